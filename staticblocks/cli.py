"""Command-line interface for StaticBlocks.

This module defines the CLI commands using Click framework.

Commands:
- build: Build the project in the current directory into its output directory.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import __version__


@click.group()
@click.version_option(version=__version__, prog_name="staticblocks")
def cli():
    """StaticBlocks block-based static site generator."""


@cli.command()
@click.option("-v", "--verbose", is_flag=True, help="Log every page as it is built")
def build(verbose: bool):
    """Build the project for production."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    project_root = Path.cwd()
    from .builder import BuildError, ConfigError, build_site

    try:
        result = build_site(project_root)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from None
    except BuildError as exc:
        # Display user-friendly error message
        try:
            rel_path = exc.source_path.relative_to(project_root)
        except ValueError:
            rel_path = exc.source_path
        click.echo(click.style("Build failed:", fg="red", bold=True), err=True)
        click.echo(click.style(f"  File: {rel_path}", fg="yellow"), err=True)
        click.echo(click.style(f"  Error: {exc.message}", fg="white"), err=True)
        raise SystemExit(1) from None
    click.echo(f"Built {len(result.pages)} pages into {result.output_dir}")


def main():
    """Entry point for the CLI application."""
    cli()
