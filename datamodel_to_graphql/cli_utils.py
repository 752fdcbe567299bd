"""
CLI utilities for the generation comment of generated files.
"""

from __future__ import annotations

from pathlib import Path

import click

PROGRAM_NAME = "datamodel_to_graphql"


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the invoking command line from the current Click context.

    Paths are reduced to their file names so that the comment does not
    depend on where the generator was run from.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string, or the bare program name when
        the generator is not running under the CLI
    """
    try:
        ctx = click.get_current_context()
    except RuntimeError:
        return PROGRAM_NAME

    cli_args = ctx.params
    if not cli_args:
        return PROGRAM_NAME

    arguments = []
    options = []
    for param in click_command.params:
        value = cli_args.get(param.name)
        if value is None or value == ():
            continue

        if isinstance(param, click.Argument):
            arguments.append(Path(str(value)).name)
            continue
        if not isinstance(param, click.Option) or value == param.default:
            continue

        flag = param.opts[0] if param.opts else f"--{param.name}"
        if param.is_flag:
            options.append(flag if value else (param.secondary_opts or [flag])[0])
        elif param.multiple:
            for item in value:
                options.extend([flag, str(item)])
        elif isinstance(value, (str, Path)) and Path(str(value)).exists():
            options.extend([flag, Path(str(value)).name])
        else:
            options.extend([flag, str(value)])

    return " ".join([PROGRAM_NAME, *arguments, *options])
