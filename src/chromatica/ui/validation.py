"""Validation utilities for the palette form inputs."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Please upload an image and enter a Vibe!"


class ValidationError(Exception):
    """User-friendly validation error.

    This exception is raised when form input fails validation.
    The message is intended to be displayed directly to the user.
    """

    pass


def validate_image_path(path: str | os.PathLike) -> Path:
    """Check that a selected image path points at an existing file.

    Args:
        path: Path of the uploaded image (Gradio hands over a temp file path).

    Returns:
        The path as a :class:`~pathlib.Path`.

    Raises:
        ValidationError: If the path does not exist or is not a file.
    """
    image_path = Path(path)
    if not image_path.exists():
        logger.warning("Selected image does not exist: %s", image_path)
        raise ValidationError(f"Image not found: {image_path.name}")
    if not image_path.is_file():
        raise ValidationError(f"Path is not a file: {image_path.name}")
    return image_path


def validate_form_inputs(image: str | os.PathLike | bytes | None, mood_vibe: str | None) -> None:
    """Check that both an image and a mood were supplied.

    Runs before any network call so an incomplete form never reaches the
    API.  File paths must also point at an existing file; raw bytes and data
    URIs are accepted as-is.

    Args:
        image: Selected image (path, bytes, or data URI), or ``None``.
        mood_vibe: Mood keyword text.

    Raises:
        ValidationError: If the image or the mood is missing, or the image
            path does not exist.
    """
    if image is None or (isinstance(image, (str, bytes)) and not image):
        raise ValidationError(MISSING_INPUT_MESSAGE)
    if not mood_vibe or not mood_vibe.strip():
        raise ValidationError(MISSING_INPUT_MESSAGE)

    if isinstance(image, os.PathLike) or (
        isinstance(image, str) and not image.startswith("data:")
    ):
        validate_image_path(image)
