"""Filename heuristics and collision-safe renaming for image-namer."""

import logging
import re
from collections.abc import Collection
from pathlib import Path
from typing import Final

from .types import Decision, FileRecord, RenamePlan

# Auto-generated names that say nothing about the picture. Each pattern must
# match the whole lower-cased stem; the first hit wins.
GENERIC_PATTERNS: Final = [
    ("camera", re.compile(r"img[-_]?\d+")),
    ("dslr", re.compile(r"dsc[-_]?\d+")),
    ("numbered image", re.compile(r"image[-_]?\d+")),
    ("numbered photo", re.compile(r"photo[-_]?\d+")),
    ("screenshot", re.compile(r"screenshot.*")),
    ("numbered picture", re.compile(r"pic[-_]?\d+")),
    ("phone timestamp", re.compile(r"\d{8}[-_]\d{6}")),  # 20231231_123456
    ("hex id", re.compile(r"[a-f0-9]{8,}")),
    ("untitled", re.compile(r"untitled.*")),
    ("new image", re.compile(r"new[-_]?image.*")),
]

MIN_TOKEN_LENGTH: Final = 3
MIN_MATCHES: Final = 2
MIN_OVERLAP_RATIO: Final = 0.4

MAX_SLUG_LENGTH: Final = 50
PLACEHOLDER_STEM: Final = "image"


def generic_pattern_name(filename: str) -> str | None:
    """Return the name of the generic pattern the filename matches, if any."""
    stem = Path(filename).stem.lower()
    for name, pattern in GENERIC_PATTERNS:
        if pattern.fullmatch(stem):
            return name
    return None


def is_generic_filename(filename: str) -> bool:
    return generic_pattern_name(filename) is not None


def tokenize(text: str) -> list[str]:
    """Split text into lower-case alphanumeric words of at least three characters."""
    words = re.sub(r"[^a-z0-9\s]", " ", text.lower()).split()
    return [word for word in words if len(word) >= MIN_TOKEN_LENGTH]


def count_matches(caption_tokens: list[str], name_tokens: list[str]) -> int:
    """Count caption tokens that share a substring relation with some name token.

    "cat" and "cats" match each other. Every caption token counts at most once.
    """
    matches = 0
    for caption_token in caption_tokens:
        for name_token in name_tokens:
            if caption_token in name_token or name_token in caption_token:
                matches += 1
                break
    return matches


def is_good_enough(filename: str, caption: str) -> bool:
    """Check whether the current filename already describes the image.

    Generic camera/screenshot style names are never good enough. Otherwise the
    name is kept when at least two caption words appear in it, or when it
    covers at least 40% of the caption words.
    """
    if pattern := generic_pattern_name(filename):
        logging.debug(f"{filename} matches generic pattern: {pattern}")
        return False

    caption_tokens = tokenize(caption)
    name_tokens = tokenize(Path(filename).stem)
    matches = count_matches(caption_tokens, name_tokens)
    overlap_ratio = matches / len(caption_tokens) if caption_tokens else 0.0
    logging.debug(f"{filename}: {matches} matching words, overlap {overlap_ratio:.2f}")
    return matches >= MIN_MATCHES or overlap_ratio >= MIN_OVERLAP_RATIO


def decide(filename: str, caption: str) -> Decision:
    return Decision.KEEP if is_good_enough(filename, caption) else Decision.RENAME


def slugify(caption: str, original_name: str) -> str:
    """Turn a caption into a filename that keeps the original extension.

    Args:
        caption: The image description
        original_name: Current filename; its extension is reused verbatim

    Returns:
        A lower-case, hyphenated filename of at most 50 characters plus extension
    """
    slug = caption.lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return f"{slug or PLACEHOLDER_STEM}{Path(original_name).suffix}"


def resolve_collision(
    directory: Path,
    candidate: str,
    *,
    source: Path | None = None,
    reserved: Collection[Path] = frozenset(),
) -> Path:
    """Find a path in directory for candidate that doesn't exist yet.

    Tries candidate itself, then stem-1.ext, stem-2.ext, ... in order. The
    source file's own path counts as free, so a file that already carries one
    of these names resolves to itself. Paths in reserved count as taken.

    The result is only free at the time of the check; another process could
    claim it before the rename. Safe for single-process sequential use only.
    """

    def is_free(path: Path) -> bool:
        if path in reserved:
            return False
        return path == source or not path.exists()

    path = directory / candidate
    if is_free(path):
        return path

    candidate_path = Path(candidate)
    stem, ext = candidate_path.stem, candidate_path.suffix
    counter = 1
    while True:
        path = directory / f"{stem}-{counter}{ext}"
        if is_free(path):
            logging.debug(f"{candidate} exists, using {path.name}")
            return path
        counter += 1


def plan_rename(record: FileRecord, candidate: str, reserved: Collection[Path] = frozenset()) -> RenamePlan:
    return RenamePlan(
        source=record.path,
        candidate_name=candidate,
        target=resolve_collision(record.directory, candidate, source=record.path, reserved=reserved),
    )


def apply_rename(plan: RenamePlan) -> Path:
    """Rename the source file to the planned target. Raises OSError on failure."""
    return plan.source.rename(plan.target)
