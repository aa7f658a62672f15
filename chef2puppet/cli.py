"""
Command-line interface for chef2puppet.

Converts a Chef cookbook directory into a Puppet module.
"""

import sys
from pathlib import Path
from typing import NoReturn

import click

from chef2puppet import __version__
from chef2puppet.converters.mappings import DEFAULT_TABLES
from chef2puppet.core.config import load_translator_settings
from chef2puppet.core.errors import Chef2PuppetError
from chef2puppet.core.logging import configure_logging
from chef2puppet.generators.module import ModuleLayout, convert_cookbook


def _print_layout(layout: ModuleLayout) -> None:
    click.echo(f"Cookbook Name: {layout.cookbook_name}")
    click.echo(f"Recipes Path:  {layout.recipes_path}")
    click.echo(f"Output Path:   {layout.output_path}")


@click.command()
@click.version_option(version=__version__, prog_name="chef2puppet")
@click.option(
    "-o",
    "--output",
    "output_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory the Puppet module is created in",
)
@click.option(
    "-c",
    "--cookbook",
    "cookbook_dir",
    required=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Chef cookbook root directory",
)
def cli(output_dir: Path, cookbook_dir: Path) -> None:
    """
    Convert a Chef cookbook into a Puppet module.

    Every recipe under the cookbook's recipes directory becomes a manifest
    in the module's manifests directory.
    """
    settings = load_translator_settings()
    try:
        convert_cookbook(
            cookbook_dir,
            output_dir,
            DEFAULT_TABLES,
            settings,
            on_layout=_print_layout,
            on_recipe=lambda path: click.echo(f"Working on... {path}"),
        )
    except Chef2PuppetError as e:
        raise click.ClickException(str(e)) from e


def main() -> NoReturn:
    """Run the CLI."""
    configure_logging("WARNING")
    cli()
    sys.exit(0)


if __name__ == "__main__":
    main()
