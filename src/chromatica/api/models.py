"""Pydantic request and response models for the palette API.

These models define the JSON schema for ``POST /api/palette``.  Python code
uses snake_case attribute names; the wire format is camelCase through an alias
generator, so ``PaletteItem.hex_code`` is serialised as ``hexCode``.

Models
------
PaletteRequest
    Payload for ``POST /api/palette``: the base64 image and the mood text.
PaletteItem
    One recommended product with its color and application tip.
PaletteResponse
    The full palette returned by the generation service.
ErrorResponse
    Body of every non-2xx response.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

HEX_CODE_PATTERN = r"^#[0-9A-Fa-f]{6}$"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PaletteRequest(_CamelModel):
    """Request body for the ``POST /api/palette`` endpoint.

    Both fields are optional at the schema level so that a missing field
    reaches the proxy and is rejected with a descriptive message, instead of
    a generic schema error.  Only the camelCase names are accepted on input;
    construct instances with ``PaletteRequest(imageBase64=..., moodVibe=...)``.

    Attributes:
        image_base64: Base64 text of the image bytes.  A ``data:`` URI prefix
            is tolerated and stripped.
        mood_vibe: Free-text mood keyword, e.g. ``"Cozy Sunday"``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=False)

    image_base64: str | None = Field(
        default=None,
        description="Base64-encoded image (selfie or inspiration photo).",
    )
    mood_vibe: str | None = Field(
        default=None,
        description="Mood keyword steering the palette style.",
    )


class PaletteItem(_CamelModel):
    """A single palette entry.

    Attributes:
        product_type: Category label (foundation, blush, lipstick, ...).
        vibe_color: Creative color name.
        hex_code: Color as ``#RRGGBB``.
        application_tip: Usage instruction.
        texture: Finish (matte, shimmer, ...).  Only present for the
            ``textured`` prompt variant.
    """

    product_type: str = Field(..., min_length=1)
    vibe_color: str = Field(..., min_length=1)
    hex_code: str = Field(..., pattern=HEX_CODE_PATTERN)
    application_tip: str = Field(..., min_length=1)
    texture: str | None = None


class PaletteResponse(_CamelModel):
    """Palette returned by ``POST /api/palette`` on success.

    Attributes:
        stylist_notes: Creative summary of the palette choice.
        user_undertone: Detected undertone; the output schema restricts it to
            ``Warm``, ``Cool`` or ``Neutral``.
        palette_items: Ordered palette entries.
    """

    stylist_notes: str
    user_undertone: str = Field(..., min_length=1)
    palette_items: list[PaletteItem]


class ErrorResponse(BaseModel):
    """Body of every error response."""

    message: str
