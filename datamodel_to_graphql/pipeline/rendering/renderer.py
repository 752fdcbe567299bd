"""
Jinja2 rendering of generated modules.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2

from ...utils import escape_identifier
from ..config import GeneratorOptions

TEMPLATE_DIR = Path(__file__).parent.parent.parent / "templates"


def generation_comment(options: GeneratorOptions) -> str:
    """Header comment of every generated module."""
    if not options.add_generation_comment:
        return ""

    from ... import __version__
    from ...cli_utils import reconstruct_command_line
    from ...datamodel_to_graphql import datamodel_to_graphql as click_command

    command_line = reconstruct_command_line(click_command)
    return f"# Generated by datamodel_to_graphql v{__version__} : {command_line}\n# Do not edit this file manually."


def python_tuple(items) -> str:
    """Render strings as a tuple literal of quoted strings."""
    return python_names_tuple([json.dumps(item) for item in items])


def python_names_tuple(names) -> str:
    """Render names as a tuple literal (a trailing comma for one element)."""
    names = list(names)
    if len(names) == 1:
        return f"({names[0]},)"
    return f"({', '.join(names)})"


class TemplateRenderer:
    """
    Renders generated modules from the package templates.

    One renderer is shared by all block generators of a run. Jinja2
    environments are safe to render from several threads.
    """

    def __init__(self, options: GeneratorOptions, header: str | None = None):
        """
        Initialize the renderer.

        Args:
            options: Resolved generator options
            header: Header comment, computed from the options when omitted
        """
        self.options = options
        self.header = generation_comment(options) if header is None else header
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
            lstrip_blocks=True,
            trim_blocks=True,
            undefined=jinja2.StrictUndefined,
        )
        self.jinja_env.filters["escape_identifier"] = escape_identifier
        self.jinja_env.filters["quote"] = json.dumps
        self.jinja_env.filters["python_tuple"] = python_tuple
        self.jinja_env.filters["python_names_tuple"] = python_names_tuple
        self.jinja_env.globals["decorator"] = self.decorator

    def decorator(self, kind: str, name: str, description: str | None = None) -> str:
        """
        Render a strawberry class decorator.

        Args:
            kind: Decorator name ("type", "input" or "enum")
            name: GraphQL name of the type
            description: Type documentation

        Returns:
            e.g. '@strawberry.type(name="User")'
        """
        arguments = []
        if self.options.emit_decorator_metadata:
            arguments.append(f"name={json.dumps(name)}")
        if description:
            arguments.append(f"description={json.dumps(description)}")
        if not arguments:
            return f"@strawberry.{kind}"
        return f"@strawberry.{kind}({', '.join(arguments)})"

    def render(self, template_name: str, **context: Any) -> str:
        """
        Render a template into module source.

        Args:
            template_name: Template file name under the templates directory
            **context: Template variables

        Returns:
            Module source ending with exactly one newline
        """
        template = self.jinja_env.get_template(template_name)
        text = template.render(header=self.header, options=self.options, **context)
        return text.strip("\n") + "\n"
