"""Form controller: drives one palette submission through its states.

:class:`FormController` owns a :class:`~chromatica.ui.client.PaletteClient`
and turns a submission into a sequence of
:class:`~chromatica.ui.models.FormState` snapshots:

- incomplete input -> a single ``error`` state, no network call;
- otherwise ``loading`` followed by ``success`` or ``error``.

Every failure ends in an ``error`` state; nothing is raised to the caller, so
the form always becomes interactive again.  Submissions are independent: a
second call while one is in flight is neither blocked nor cancels the first.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator

from .client import EncodingError, PaletteClient, RequestFailed, encode_image
from .models import FormState
from .validation import ValidationError, validate_form_inputs

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred during Vibe Check."


class FormController:
    """Run palette submissions against a :class:`PaletteClient`."""

    def __init__(self, client: PaletteClient) -> None:
        self.client = client

    def submit(
        self, image: str | os.PathLike | bytes | None, mood_vibe: str | None
    ) -> Iterator[FormState]:
        """Submit the form, yielding each state the form passes through.

        Args:
            image: Selected image (path, bytes, or data URI), or ``None``.
            mood_vibe: Mood keyword text.

        Yields:
            ``FormState`` snapshots, ending in ``success`` or ``error``.
        """
        try:
            validate_form_inputs(image, mood_vibe)
        except ValidationError as e:
            logger.info("Palette form blocked locally: %s", e)
            yield FormState.error(str(e))
            return

        mood = mood_vibe.strip()
        yield FormState.loading()

        try:
            image_base64 = encode_image(image)
            palette = self.client.submit_palette_request(image_base64, mood)
        except EncodingError as e:
            logger.warning("Could not encode selected image: %s", e)
            yield FormState.error(str(e))
            return
        except RequestFailed as e:
            yield FormState.error(e.message)
            return
        except Exception:
            logger.exception("Unexpected error during palette submission.")
            yield FormState.error(UNEXPECTED_ERROR_MESSAGE)
            return

        yield FormState.success(palette, mood)
