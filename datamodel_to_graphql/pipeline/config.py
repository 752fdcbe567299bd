"""
Configuration for the code generator pipeline.

GeneratorConfig is the user-facing record (loaded from a dict or JSON
file). resolve() validates it and returns GeneratorOptions, the frozen
set of values every stage of a run reads. Anything derived from the
environment (for example compiled mode inferred from the output path) is
decided there, once.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .errors import ConfigError

# Upper bound for the emission worker pool
MAX_EMISSION_WORKERS = 8


class EmitBlockKind(str, Enum):
    """Categories of generated artifacts."""

    ENUMS = "enums"
    MODELS = "models"
    INPUTS = "inputs"
    OUTPUTS = "outputs"
    CRUD_RESOLVERS = "crudResolvers"
    RELATION_RESOLVERS = "relationResolvers"


ALL_EMIT_BLOCK_KINDS: tuple[EmitBlockKind, ...] = tuple(EmitBlockKind)

# Blocks whose generated files import names from other blocks
BLOCK_DEPENDENCIES: dict[EmitBlockKind, tuple[EmitBlockKind, ...]] = {
    EmitBlockKind.ENUMS: (),
    EmitBlockKind.MODELS: (EmitBlockKind.ENUMS,),
    EmitBlockKind.INPUTS: (EmitBlockKind.ENUMS,),
    EmitBlockKind.OUTPUTS: (EmitBlockKind.INPUTS, EmitBlockKind.MODELS, EmitBlockKind.ENUMS),
    EmitBlockKind.CRUD_RESOLVERS: (
        EmitBlockKind.INPUTS,
        EmitBlockKind.OUTPUTS,
        EmitBlockKind.MODELS,
        EmitBlockKind.ENUMS,
    ),
    EmitBlockKind.RELATION_RESOLVERS: (
        EmitBlockKind.INPUTS,
        EmitBlockKind.MODELS,
        EmitBlockKind.ENUMS,
    ),
}


class FormatMode(str, Enum):
    """Post-processing applied to the output tree."""

    NONE = "none"
    VERIFY = "verify"  # ruff check, no rewriting
    RUFF = "ruff"  # ruff format
    BLACK = "black"  # black library API


class ExecutorKind(str, Enum):
    """Backend of the emission worker pool."""

    PROCESS = "process"
    THREAD = "thread"


@dataclass
class FormatterConfig:
    """Configuration for the post-processing formatter."""

    # Which formatter to run over the output tree
    mode: FormatMode = FormatMode.NONE

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"


@dataclass
class EmissionConfig:
    """Configuration for the emission stage.

    Attributes:
        emit_transpiled_code: Byte-compile and stub every file. None means
            infer from the output path (site-packages implies compiled mode)
        max_workers: Upper bound on transpile workers (None = hardware parallelism)
        executor: "process" or "thread"
        optimization: Optimization level passed to the byte compiler
        skip_declaration_verification: Fast path for stub synthesis; when False
            the declaration job also checks every relative import target
    """

    emit_transpiled_code: bool | None = None
    max_workers: int | None = None
    executor: ExecutorKind = ExecutorKind.PROCESS
    optimization: int = -1
    skip_declaration_verification: bool = True


@dataclass
class GeneratorConfig:
    """Configuration options for code generation."""

    # Directory receiving the generated package (cleared at the start of a run)
    output_dir: str = ""

    # Block allow-list (None = every block)
    emit_only: list[str] | None = None

    # Per-type omission lists: {"UserCreateInput": ["password"]}
    omit_fields: dict[str, list[str]] = field(default_factory=dict)

    # Fields omitted from every input / output type
    omit_input_fields_by_default: list[str] = field(default_factory=list)
    omit_output_fields_by_default: list[str] = field(default_factory=list)

    # Exposed name overrides: {"User": {"name": "displayName"}}
    field_name_overrides: dict[str, dict[str, str]] = field(default_factory=dict)

    # Emit explicit strawberry.field(...) metadata on every field
    emit_decorator_metadata: bool = True

    # Module the generated resolvers import the data client from
    custom_client_import_path: str | None = None

    # Key of the data client in the GraphQL context
    context_client_key: str = "prisma"

    # Render @id model fields as strawberry.ID
    emit_id_as_id_type: bool = False

    # Allow "Unchecked" input variants when selecting input field types
    use_unchecked_scalar_inputs: bool = False

    # Prefer plain values over `*FieldUpdateOperationsInput` wrappers in update inputs
    use_simple_inputs: bool = False

    # Add generation comment at top of every file
    add_generation_comment: bool = True

    # Write the consumed IR next to the generated code
    emit_schema_ir: bool = False

    # Forward progress messages to the log callback
    verbose_logging: bool = False

    # Parse every generated file before it replaces its target
    validate_before_write: bool = True

    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    emission: EmissionConfig = field(default_factory=EmissionConfig)

    @staticmethod
    def from_dict(d: dict) -> GeneratorConfig:
        """Create a config from a dictionary."""
        config = GeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                config.formatter = FormatterConfig(
                    mode=_parse_format_mode(v.get("mode", FormatMode.NONE)),
                    line_length=v.get("line_length", 100),
                    target_version=v.get("target_version", "py312"),
                )
            elif k in ("formatGeneratedCode", "format_generated_code"):
                config.formatter.mode = _parse_format_mode(v)
            elif k == "emission" and isinstance(v, dict):
                executor = v.get("executor", ExecutorKind.PROCESS)
                config.emission = EmissionConfig(
                    emit_transpiled_code=v.get("emit_transpiled_code"),
                    max_workers=v.get("max_workers"),
                    executor=_parse_enum(ExecutorKind, executor, "emission.executor"),
                    optimization=v.get("optimization", -1),
                    skip_declaration_verification=v.get("skip_declaration_verification", True),
                )
            elif k in ("emitTranspiledCode", "emit_transpiled_code"):
                config.emission.emit_transpiled_code = v
            elif k == "useSimpleInputs":
                config.use_simple_inputs = v
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "output_dir": self.output_dir,
            "emit_only": self.emit_only,
            "omit_fields": self.omit_fields,
            "omit_input_fields_by_default": self.omit_input_fields_by_default,
            "omit_output_fields_by_default": self.omit_output_fields_by_default,
            "field_name_overrides": self.field_name_overrides,
            "emit_decorator_metadata": self.emit_decorator_metadata,
            "custom_client_import_path": self.custom_client_import_path,
            "context_client_key": self.context_client_key,
            "emit_id_as_id_type": self.emit_id_as_id_type,
            "use_unchecked_scalar_inputs": self.use_unchecked_scalar_inputs,
            "use_simple_inputs": self.use_simple_inputs,
            "add_generation_comment": self.add_generation_comment,
            "emit_schema_ir": self.emit_schema_ir,
            "verbose_logging": self.verbose_logging,
            "validate_before_write": self.validate_before_write,
            "formatter": {
                "mode": FormatMode(self.formatter.mode).value,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
            },
            "emission": {
                "emit_transpiled_code": self.emission.emit_transpiled_code,
                "max_workers": self.emission.max_workers,
                "executor": ExecutorKind(self.emission.executor).value,
                "optimization": self.emission.optimization,
                "skip_declaration_verification": self.emission.skip_declaration_verification,
            },
        }

    def resolve(self) -> GeneratorOptions:
        """Validate the configuration and freeze it for a run.

        Raises:
            ConfigError: If an option is invalid or conflicts with another one
        """
        if not self.output_dir:
            raise ConfigError("output_dir is required")
        output_dir = Path(self.output_dir).expanduser().resolve()
        if output_dir == Path(output_dir.anchor) or output_dir == Path.home():
            raise ConfigError(f"Refusing to use {output_dir} as output directory (it is cleared on every run)")

        format_mode = _parse_format_mode(self.formatter.mode)
        executor = _parse_enum(ExecutorKind, self.emission.executor, "emission.executor")

        max_workers = self.emission.max_workers
        if max_workers is not None and max_workers < 1:
            raise ConfigError(f"emission.max_workers must be at least 1, got {max_workers}")

        emit_transpiled_code = self.emission.emit_transpiled_code
        if emit_transpiled_code is None:
            emit_transpiled_code = "site-packages" in output_dir.parts

        if self.emission.optimization not in (-1, 0, 1, 2):
            raise ConfigError(f"emission.optimization must be -1, 0, 1 or 2, got {self.emission.optimization}")

        if not self.context_client_key.isidentifier():
            raise ConfigError(f"context_client_key must be an identifier, got {self.context_client_key!r}")

        return GeneratorOptions(
            output_dir=output_dir,
            blocks_to_emit=get_blocks_to_emit(self.emit_only),
            omit_fields=_freeze_lists(self.omit_fields),
            omit_input_fields_by_default=tuple(self.omit_input_fields_by_default),
            omit_output_fields_by_default=tuple(self.omit_output_fields_by_default),
            field_name_overrides=MappingProxyType(
                {type_name: MappingProxyType(dict(fields)) for type_name, fields in self.field_name_overrides.items()}
            ),
            emit_decorator_metadata=self.emit_decorator_metadata,
            client_import_path=self.custom_client_import_path or "prisma",
            context_client_key=self.context_client_key,
            emit_id_as_id_type=self.emit_id_as_id_type,
            use_unchecked_scalar_inputs=self.use_unchecked_scalar_inputs,
            use_simple_inputs=self.use_simple_inputs,
            add_generation_comment=self.add_generation_comment,
            emit_schema_ir=self.emit_schema_ir,
            verbose_logging=self.verbose_logging,
            validate_before_write=self.validate_before_write,
            format_mode=format_mode,
            formatter=self.formatter,
            emit_transpiled_code=emit_transpiled_code,
            worker_count=resolve_worker_count(max_workers),
            executor=executor,
            optimization=self.emission.optimization,
            skip_declaration_verification=self.emission.skip_declaration_verification,
        )


@dataclass(frozen=True)
class GeneratorOptions:
    """Resolved, read-only options shared by every stage of a run."""

    output_dir: Path
    blocks_to_emit: tuple[EmitBlockKind, ...]
    omit_fields: Mapping[str, tuple[str, ...]]
    omit_input_fields_by_default: tuple[str, ...]
    omit_output_fields_by_default: tuple[str, ...]
    field_name_overrides: Mapping[str, Mapping[str, str]]
    emit_decorator_metadata: bool
    client_import_path: str
    context_client_key: str
    emit_id_as_id_type: bool
    use_unchecked_scalar_inputs: bool
    use_simple_inputs: bool
    add_generation_comment: bool
    emit_schema_ir: bool
    verbose_logging: bool
    validate_before_write: bool
    format_mode: FormatMode
    formatter: FormatterConfig
    emit_transpiled_code: bool
    worker_count: int
    executor: ExecutorKind
    optimization: int
    skip_declaration_verification: bool

    def should_generate_block(self, kind: EmitBlockKind) -> bool:
        return kind in self.blocks_to_emit


def get_blocks_to_emit(emit_only: list[str] | None) -> tuple[EmitBlockKind, ...]:
    """Resolve the block allow-list, adding the blocks it depends on.

    Returns the blocks in canonical order.
    """
    if emit_only is None:
        return ALL_EMIT_BLOCK_KINDS
    if not emit_only:
        raise ConfigError("emit_only must name at least one block")

    requested = {_parse_enum(EmitBlockKind, kind, "emit_only") for kind in emit_only}
    pending = list(requested)
    while pending:
        kind = pending.pop()
        for dependency in BLOCK_DEPENDENCIES[kind]:
            if dependency not in requested:
                requested.add(dependency)
                pending.append(dependency)
    return tuple(kind for kind in ALL_EMIT_BLOCK_KINDS if kind in requested)


def resolve_worker_count(max_workers: int | None) -> int:
    """Worker count bounded by hardware parallelism and MAX_EMISSION_WORKERS."""
    available = os.cpu_count() or 1
    count = min(available, MAX_EMISSION_WORKERS)
    if max_workers is not None:
        count = min(count, max_workers)
    return max(count, 1)


def _parse_format_mode(value: Any) -> FormatMode:
    # Booleans follow the historical formatGeneratedCode option
    if value is True:
        return FormatMode.VERIFY
    if value is False or value is None:
        return FormatMode.NONE
    return _parse_enum(FormatMode, value, "formatter.mode")


def _parse_enum(enum_cls, value: Any, option: str):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigError(f"Invalid value {value!r} for {option} (expected one of: {allowed})") from None


def _freeze_lists(d: dict[str, list[str]]) -> Mapping[str, tuple[str, ...]]:
    return MappingProxyType({key: tuple(values) for key, values in d.items()})
