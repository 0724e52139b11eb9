"""Gradio event handlers for the palette form."""

import logging
from collections.abc import Callable, Iterator

import gradio as gr

from .controller import FormController
from .render import render

logger = logging.getLogger(__name__)

SUBMIT_LABEL = "✨ Generate Palette"
BUSY_LABEL = "Vibe Checking..."


def make_generate_handler(
    controller: FormController,
) -> Callable[[str | None, str | None], Iterator[tuple]]:
    """Build the submit handler bound to *controller*.

    The returned function is a generator, so Gradio streams every state:
    the button is disabled while loading and re-enabled after the final
    ``success`` or ``error`` state.

    Args:
        controller: Form controller used for each submission.

    Returns:
        Handler taking ``(image_path, mood_vibe)`` and yielding
        ``(result_html, button_update, image_update, mood_update)``.
    """

    def generate_palette(image_path: str | None, mood_vibe: str | None) -> Iterator[tuple]:
        for state in controller.submit(image_path, mood_vibe):
            busy = state.is_busy
            logger.debug("Palette form state: %s", state.status)
            yield (
                render(state),
                gr.update(interactive=not busy, value=BUSY_LABEL if busy else SUBMIT_LABEL),
                gr.update(interactive=not busy),
                gr.update(interactive=not busy),
            )

    return generate_palette
