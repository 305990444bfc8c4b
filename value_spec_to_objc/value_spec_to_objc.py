import json
import logging
import sys

import click

from .pipeline import Generator, GeneratorConfig


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.option("--output", "-o", default=None, type=click.Path(file_okay=False, resolve_path=True))
@click.option(
    "--single-file",
    is_flag=True,
    default=False,
    help="Fold the files added by plugins into the base file of each type",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log every plugin run and written file")
@click.argument("paths", nargs=-1, required=True, type=click.Path(exists=True, resolve_path=True))
def value_spec_to_objc(config, output, single_file, verbose, paths):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if config is not None:
        with open(config) as f:
            try:
                config = GeneratorConfig.from_dict(json.load(f))
            except (json.JSONDecodeError, ValueError) as e:
                raise click.BadParameter(str(e), param_hint="--config") from e
    else:
        config = GeneratorConfig()

    # CLI flags override the config file
    if output is not None:
        config.output_path = output
    if single_file:
        config.single_file = True

    report = Generator(config).generate(paths)
    for path in report.written:
        click.echo(str(path))
    for error in report.errors:
        click.echo(str(error), err=True)
    if report.errors:
        sys.exit(1)
