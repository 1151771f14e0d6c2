import logging
import re
from pathlib import Path
from typing import Protocol

import click
import llm

from .image_utils import load_image_for_model

DEFAULT_MODEL = "gpt-4o-mini"

DEFAULT_PROMPT = """You are a helpful assistant that captions images.
Describe this image in one short sentence of at most twelve words.
Focus on the main subject and key details.
Reply with the caption only.
Example captions:
- a red car parked on the street
- two cats playing with red yarn
- sunset over a mountain lake"""

PLACEHOLDER_CAPTION = "image"

SUPPORTED_ATTACHMENT_TYPES = {"image/jpeg", "image/png", "image/webp"}

# Longer prefixes first so "this is " wins over "this "
LEADING_FILLER = re.compile(r"^(?:this is |there is |an |a |the |this |that )", re.IGNORECASE)
TRAILING_PUNCTUATION = re.compile(r"[.,;:!?]+$")


class CaptionError(Exception):
    """Raised when an image cannot be captioned."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Analysis failed for {path.name}: {reason}")


class Captioner(Protocol):
    def caption(self, image_path: Path) -> str: ...


def clean_caption(text: str) -> str:
    """Normalize raw model output into a caption.

    Keeps the first non-empty line, lower-cases it, drops one leading article
    or demonstrative and any trailing punctuation. Falls back to a placeholder
    when nothing is left.
    """
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    caption = lines[0].lower() if lines else ""
    caption = caption.strip("\"'")
    caption = LEADING_FILLER.sub("", caption)
    caption = TRAILING_PUNCTUATION.sub("", caption).strip()
    return caption or PLACEHOLDER_CAPTION


def get_model(model_name: str | None) -> llm.Model:
    try:
        model = llm.get_model(model_name or DEFAULT_MODEL)
    except llm.UnknownModelError as e:
        raise click.ClickException(str(e))
    try:
        model.get_key()
    except llm.NeedsKeyException:
        raise click.ClickException(
            f"{model.key_env_var or 'API key'} environment variable not set. "
            f"Set it or run 'llm keys set {model.needs_key}'"
        )
    if not any(t in model.attachment_types for t in SUPPORTED_ATTACHMENT_TYPES):
        raise click.ClickException(f"Model {model.model_id} does not support any image types")
    return model


class LlmCaptioner:
    """Captions images with a vision model from the llm library."""

    def __init__(self, model: llm.Model, prompt: str = DEFAULT_PROMPT):
        self.model = model
        self.prompt = prompt

    def caption(self, image_path: Path) -> str:
        try:
            image_content = load_image_for_model(image_path, set(self.model.attachment_types))
            logging.debug(f"Requesting caption for {image_path}")
            response = self.model.prompt(
                self.prompt,
                attachments=[llm.Attachment(content=image_content)],
            ).text()
        except Exception as e:
            raise CaptionError(image_path, str(e)) from e
        logging.debug(f"Raw caption for {image_path.name}: {response!r}")
        return clean_caption(response)


def initialize_captioner(model_name: str | None = None) -> Captioner:
    """Load the captioning model; failures are fatal for the run."""
    return LlmCaptioner(get_model(model_name))
