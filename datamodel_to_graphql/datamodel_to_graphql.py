import json
import logging

import click

from .pipeline import (
    EmitBlockKind,
    ExecutorKind,
    FormatMode,
    GenerationError,
    GeneratorConfig,
    SimpleMetricsCollector,
    generate_code,
)


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option(
    "--emit-only",
    "-e",
    multiple=True,
    type=click.Choice([kind.value for kind in EmitBlockKind]),
    help="Generate only these blocks (and the blocks they depend on)",
)
@click.option(
    "--transpile/--no-transpile",
    default=None,
    help="Byte-compile and stub the output (default: only when writing into site-packages)",
)
@click.option("--format", "format_mode", default=None, type=click.Choice([mode.value for mode in FormatMode]))
@click.option("--executor", default=None, type=click.Choice([kind.value for kind in ExecutorKind]))
@click.option("--verbose", "-v", is_flag=True, default=False, help="Print progress and stage timings")
@click.argument("path", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("output", default=None, type=click.Path(resolve_path=True))
def datamodel_to_graphql(config, emit_only, transpile, format_mode, executor, verbose, path, output):
    with open(path) as f:
        schema = json.load(f)

    if config is not None:
        with open(config) as f:
            config = GeneratorConfig.from_dict(json.load(f))
    else:
        config = GeneratorConfig()

    # Command line flags override the config file
    config.output_dir = output
    if emit_only:
        config.emit_only = list(emit_only)
    if transpile is not None:
        config.emission.emit_transpiled_code = transpile
    if format_mode is not None:
        config.formatter.mode = FormatMode(format_mode)
    if executor is not None:
        config.emission.executor = ExecutorKind(executor)
    if verbose:
        config.verbose_logging = True
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    metrics = SimpleMetricsCollector(verbose=config.verbose_logging)
    try:
        report = generate_code(schema, config, log=click.echo, metrics=metrics)
    except GenerationError as e:
        raise click.ClickException(str(e)) from e

    for warning in report.warnings:
        click.echo(f"Warning: {warning}", err=True)
    click.echo(f"Generated {len(report.written_paths)} files in {report.output_dir}")
