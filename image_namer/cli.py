#!/usr/bin/env python3


import logging
import sys
from pathlib import Path

import click
import rich
from rich.markup import escape

from .generators import DEFAULT_MODEL, initialize_captioner
from .list_files import find_image_files
from .rename_image_files import rename_image_files
from .types import CliOptions


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("directory", required=False, type=click.Path(path_type=Path))
@click.option("-n", "--dry-run", is_flag=True, help="Show changes without renaming")
@click.option(
    "--model",
    "model_name",
    type=click.STRING,
    default=DEFAULT_MODEL,
    help=f"Model to use for captioning (default: {DEFAULT_MODEL})",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default="INFO",
    help="Set the logging level (default: INFO)",
)
@click.pass_context
def main(
    ctx: click.Context,
    directory: Path | None,
    dry_run: bool,
    model_name: str,
    log_level: str,
) -> None:
    """Rename images in DIRECTORY (and its subdirectories) after AI-generated captions.

    Files whose names already describe the picture are left alone.
    """
    # Set up logging
    level = getattr(logging, log_level.upper())
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    # When not in debug mode, only show our own debug messages
    if level != logging.DEBUG:
        # Set third-party loggers to WARNING
        for logger_name in logging.root.manager.loggerDict:
            if not logger_name.startswith("image_namer"):
                logging.getLogger(logger_name).setLevel(logging.WARNING)

    if directory is None:
        click.echo(ctx.get_help())
        return

    if not directory.exists():
        rich.print(f"[red]Error: Directory not found: {escape(str(directory.absolute()))}[/red]")
        sys.exit(1)
    if not directory.is_dir():
        rich.print(f"[red]Error: {escape(str(directory))} is not a directory[/red]")
        sys.exit(1)

    rich.print(f"Scanning directory (including subdirectories): {escape(str(directory))}")
    files = find_image_files(directory)
    rich.print(f"Found {len(files)} image(s)")
    if not files:
        rich.print(f"[yellow]No images found in {escape(str(directory.absolute()))} or its subdirectories[/yellow]")
        return

    captioner = initialize_captioner(model_name)
    options = CliOptions(dry_run=dry_run)
    rename_image_files(files, captioner=captioner, options=options)


if __name__ == "__main__":
    main()
