"""A command-line tool that renames non-descriptive image files after AI captions."""

from .generators import initialize_captioner
from .rename_image_files import rename_image_files
from .utils import is_good_enough, resolve_collision, slugify

__all__ = ["initialize_captioner", "is_good_enough", "rename_image_files", "resolve_collision", "slugify"]
