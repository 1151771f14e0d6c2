import logging
from pathlib import Path

import rich
from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeRemainingColumn,
)

from .generators import Captioner
from .types import CliOptions, Decision, FileRecord, FileStatus, RunSummary
from .utils import apply_rename, decide, plan_rename, slugify


def process_image(
    record: FileRecord,
    captioner: Captioner,
    options: CliOptions,
    console: Console,
    planned: set[Path] | None = None,
) -> FileStatus:
    """Caption one image and rename it when its name isn't descriptive.

    Errors are reported and turned into FileStatus.ERRORED so that a single bad
    file never stops the run. In dry runs, targets already promised to earlier
    files are collected in planned and treated as taken.
    """
    logging.debug(f"Starting to process {record.path}")
    name = escape(record.name)
    try:
        caption = captioner.caption(record.path)
    except Exception as e:
        logging.debug(f"Captioning {record.path} failed", exc_info=True)
        console.print(f"[red]Error processing {escape(str(record.path))}: {escape(str(e))}")
        return FileStatus.ERRORED

    console.print(f"  Description: [cyan]{escape(caption)}[/cyan]")

    if decide(record.name, caption) is Decision.KEEP:
        console.print(f"  [green]Keeping {name}[/green] (already descriptive)")
        return FileStatus.KEPT

    candidate = slugify(caption, record.name)
    if candidate == record.name:
        console.print(f"  Name unchanged: {name}")
        return FileStatus.UNCHANGED

    reserved = planned if options.dry_run and planned is not None else set()
    try:
        plan = plan_rename(record, candidate, reserved=reserved)
        if plan.unchanged:
            # already carries a numbered variant of the slug
            console.print(f"  Name unchanged: {name}")
            return FileStatus.UNCHANGED
        if options.dry_run:
            reserved.add(plan.target)
            console.print(f"  Would rename {name} → {escape(plan.target.name)}")
            return FileStatus.RENAMED
        apply_rename(plan)
    except OSError as e:
        logging.debug(f"Renaming {record.path} to {candidate} failed", exc_info=True)
        console.print(f"[red]Error renaming {escape(str(record.path))}: {escape(str(e))}")
        return FileStatus.ERRORED

    suffix = f" (already taken: {escape(candidate)})" if plan.collided else ""
    console.print(f"  Renamed {name} → {escape(plan.target.name)}{suffix}")
    return FileStatus.RENAMED


def rename_image_files(
    files: list[FileRecord],
    *,
    captioner: Captioner,
    options: CliOptions,
) -> RunSummary:
    """Rename image files using model-generated captions.

    Files are processed one at a time, in order, with a single captioner.

    Args:
        files: Image files to process
        captioner: Source of image descriptions
        options: Command-line options

    Returns:
        Counts of renamed, skipped and failed files
    """
    summary = RunSummary()
    if not files:
        rich.print("[yellow]No files to process[/yellow]")
        return summary

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TimeRemainingColumn(),
        transient=True,
    )
    with progress:
        task_id = progress.add_task("Processing files...", total=len(files))
        planned: set[Path] = set()
        for index, record in enumerate(files, start=1):
            progress.update(task_id, description=f"Processing {escape(record.name)}...")
            counter = escape(f"[{index}/{len(files)}]")
            progress.console.print(f"[bold]{counter}[/bold] {escape(str(record.path))}")
            status = process_image(record, captioner, options, progress.console, planned)
            summary.record(status)
            progress.advance(task_id)

    verb = "Would rename" if options.dry_run else "Renamed"
    rich.print(f"\n{verb}: {summary.renamed}")
    rich.print(f"Skipped: {summary.skipped}")
    if summary.errors:
        rich.print(f"[red]Errors: {summary.errors}[/red]")
    return summary
