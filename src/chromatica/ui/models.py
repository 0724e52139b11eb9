"""Data models for the palette form state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from chromatica.api.models import PaletteResponse

FormStatus = Literal["idle", "loading", "error", "success"]


@dataclass(frozen=True)
class FormState:
    """Snapshot of the palette form.

    The form moves ``idle -> loading -> success | error`` and starts again
    from ``loading`` on the next submission.  Only the fields relevant to the
    current status are set.

    Attributes:
        status: Current phase of the form.
        message: User-facing error text (``error`` only).
        palette: Generated palette (``success`` only).
        mood_vibe: Mood the palette was generated for (``success`` only).
    """

    status: FormStatus = "idle"
    message: str | None = None
    palette: PaletteResponse | None = None
    mood_vibe: str | None = None

    @classmethod
    def idle(cls) -> FormState:
        return cls(status="idle")

    @classmethod
    def loading(cls) -> FormState:
        return cls(status="loading")

    @classmethod
    def error(cls, message: str) -> FormState:
        return cls(status="error", message=message)

    @classmethod
    def success(cls, palette: PaletteResponse, mood_vibe: str) -> FormState:
        return cls(status="success", palette=palette, mood_vibe=mood_vibe)

    @property
    def is_busy(self) -> bool:
        """True while a request is in flight; inputs should be disabled."""
        return self.status == "loading"
