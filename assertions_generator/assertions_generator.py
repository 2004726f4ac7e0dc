import logging
import os
import sys

import click

from .description import ClassDescriptionError
from .pipeline import AssertionsPipeline, ClassDiscoveryError, GenerationError, GeneratorConfig, OutputMode


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--output", "-o", default="generated_assertions", type=click.Path(file_okay=False, resolve_path=True))
@click.option(
    "--hierarchical",
    is_flag=True,
    default=False,
    help="Generated assertion classes extend the assertion class of their super type",
)
@click.option("--force", is_flag=True, default=False, help="Overwrite existing generated files")
@click.option("--format", "format_code", is_flag=True, default=False, help="Format generated code with ruff")
@click.option(
    "--source-path",
    "-p",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Directory added to the import path to find targets (default: current directory)",
)
@click.option("--verbose", "-v", is_flag=True, default=False)
@click.argument("targets", nargs=-1, required=True)
def assertions_generator(config, output, hierarchical, force, format_code, source_path, verbose, targets):
    """Generate assertion classes for the classes of TARGETS.

    A target is a module (shop.models), a package (shop) or a class
    (shop.models:Order).
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    for path in source_path or (os.getcwd(),):
        if path not in sys.path:
            sys.path.insert(0, path)

    config = GeneratorConfig.from_file(config) if config is not None else GeneratorConfig()

    # CLI flags override the config file when set
    if hierarchical:
        config.hierarchical = True
    if force:
        config.output.mode = OutputMode.FORCE
    if format_code:
        config.formatter.enabled = True

    pipeline = AssertionsPipeline(config)
    try:
        written = pipeline.run(list(targets), output)
    except (ClassDiscoveryError, ClassDescriptionError, GenerationError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Generated {len(written)} files in {output}")
