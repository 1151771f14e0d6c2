import logging
import os
from pathlib import Path

import rich
from rich.markup import escape

from .image_utils import is_image_file
from .types import FileRecord


def walk(root: Path) -> list[Path]:
    """List all regular files below root, depth first.

    Entries are visited in name order. Directories that can't be read are
    skipped with a warning.
    """
    files: list[Path] = []
    _walk_into(Path(root).absolute(), files)
    return files


def _walk_into(directory: Path, files: list[Path]) -> None:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as e:
        logging.warning(f"Cannot access directory {directory}: {e}")
        rich.print(f"[yellow]Cannot access directory: {escape(str(directory))}[/yellow]")
        return

    for entry in entries:
        path = directory / entry.name
        try:
            if entry.is_dir(follow_symlinks=False):
                _walk_into(path, files)
            elif entry.is_file(follow_symlinks=False):
                files.append(path)
        except OSError as e:
            logging.warning(f"Cannot stat {path}: {e}")


def find_image_files(root: Path) -> list[FileRecord]:
    """Walk root and keep the files with an image extension."""
    return [FileRecord.from_path(path) for path in walk(root) if is_image_file(path)]
