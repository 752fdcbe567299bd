"""
Utility functions for the datamodel to GraphQL generator.
"""

import keyword
import re

# Boundary between a lowercase letter or digit and an uppercase letter
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def pascal_case(text: str) -> str:
    """Uppercase the first letter and keep the rest as is.

    Inner capitals are preserved, which is what type names derived from
    field names need ("createdAt" -> "CreatedAt"). Leading underscores are
    dropped ("_count" -> "Count").

    Args:
        text: The text to convert

    Returns:
        PascalCase string
    """
    stripped = text.lstrip("_")
    if not stripped:
        return text
    return stripped[0].upper() + stripped[1:]


def snake_case(text: str) -> str:
    """Convert camelCase or PascalCase to snake_case ("findManyUser" -> "find_many_user")."""
    return _CAMEL_BOUNDARY.sub("_", text).lower()


def escape_identifier(name: str) -> str:
    """Return a valid Python identifier for a schema name.

    Python keywords get a trailing underscore ("in" -> "in_"); the GraphQL
    name is kept separately by the caller.
    """
    if keyword.iskeyword(name):
        return f"{name}_"
    return name
