from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Decision(Enum):
    """Whether an image keeps its current name."""

    KEEP = "keep"
    RENAME = "rename"


class FileStatus(Enum):
    """Final state of one processed image."""

    KEPT = "kept"  # current name is already descriptive
    UNCHANGED = "unchanged"  # slug equals the current name
    RENAMED = "renamed"
    ERRORED = "errored"


@dataclass(frozen=True)
class FileRecord:
    """An image file found while scanning."""

    path: Path
    directory: Path
    name: str
    extension: str

    @classmethod
    def from_path(cls, path: Path) -> "FileRecord":
        path = path.absolute()
        return cls(path=path, directory=path.parent, name=path.name, extension=path.suffix)


@dataclass(frozen=True)
class RenamePlan:
    source: Path
    candidate_name: str
    target: Path

    @property
    def collided(self) -> bool:
        return self.target.name != self.candidate_name

    @property
    def unchanged(self) -> bool:
        return self.target == self.source


@dataclass
class RunSummary:
    """Per-run counters; one of them is incremented for every image."""

    renamed: int = 0
    skipped: int = 0
    errors: int = 0

    def record(self, status: FileStatus) -> None:
        match status:
            case FileStatus.RENAMED:
                self.renamed += 1
            case FileStatus.KEPT | FileStatus.UNCHANGED:
                self.skipped += 1
            case FileStatus.ERRORED:
                self.errors += 1

    @property
    def total(self) -> int:
        return self.renamed + self.skipped + self.errors


@dataclass
class CliOptions:
    dry_run: bool = False
