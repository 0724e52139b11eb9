"""Versioned system instructions and output schemas for palette generation.

Two prompt/schema pairs exist for the same ``POST /api/palette`` route.
Rather than keeping two code paths, each pair is a frozen
:class:`PromptVariant` and the active one is selected by
``ChromaticaConfig.prompt_variant``.

Variants
--------
``classic`` (default)
    Three to five palette items, four fields each.
``textured``
    Exactly three palette items, each with an extra ``texture`` field.

The response schema is expressed in the OpenAPI subset accepted by the Gemini
``response_schema`` option, so it constrains the model's output directly.
The same bounds are re-checked after parsing in
:mod:`chromatica.api.proxy`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

UNDERTONES: tuple[str, ...] = ("Warm", "Cool", "Neutral")

_PERSONA = """\
You are Chromatica, the world's most innovative AI stylist specializing in creating \
bespoke makeup palettes. Your task is to analyze the user's uploaded image (for skin \
tone, lighting, and style) and the user's desired 'Vibe' keyword to generate a \
cohesive makeup palette.

RULES:
1. Multimodal Analysis: Use the image to determine the user's underlying skin \
undertone (Warm, Cool, or Neutral).
2. Persona: The output MUST be in the voice of a confident, high-end stylist.
3. Structured Output: The final result MUST be a valid JSON object matching the \
requested schema. Do not include any text outside of the JSON object.
"""

_CLASSIC_SCHEMA_TEXT = """
SCHEMA REQUESTED:
{
  "stylistNotes": "A creative summary explaining the palette choice.",
  "userUndertone": "The detected skin undertone (Warm, Cool, or Neutral).",
  "paletteItems": [
    {
      "productType": "Foundation, Blush, Lipstick, Eyeshadow, or Highlight",
      "vibeColor": "A creative name for the color.",
      "hexCode": "#RRGGBB",
      "applicationTip": "A professional application tip for this product."
    }
  ]
}
Return a total of 3 to 5 palette items.
"""

_TEXTURED_SCHEMA_TEXT = """
SCHEMA REQUESTED:
{
  "stylistNotes": "A creative summary explaining the palette choice.",
  "userUndertone": "The detected skin undertone (Warm, Cool, or Neutral).",
  "paletteItems": [
    {
      "productType": "Foundation, Blush, Lipstick, Eyeshadow, or Highlight",
      "vibeColor": "A creative name for the color.",
      "hexCode": "#RRGGBB",
      "texture": "Matte, Satin, Shimmer, Gloss, or Cream",
      "applicationTip": "A professional application tip for this product."
    }
  ]
}
Return exactly 3 palette items.
"""


@dataclass(frozen=True)
class PromptVariant:
    """A named system instruction plus the response schema it asks for.

    Attributes:
        name: Identifier used by ``ChromaticaConfig.prompt_variant``.
        system_instruction: Persona and output-format directive sent as the
            model's system instruction.
        min_items: Minimum number of palette items accepted.
        max_items: Maximum number of palette items accepted.
        include_texture: Whether each item must carry a ``texture`` field.
        response_schema: Schema passed to the generation service.
    """

    name: str
    system_instruction: str
    min_items: int
    max_items: int
    include_texture: bool = False
    response_schema: dict[str, Any] = field(default_factory=dict)

    def user_text(self, mood_vibe: str) -> str:
        """Build the user-turn text that accompanies the image."""
        return f"User Vibe/Mood: {mood_vibe}"


def build_response_schema(min_items: int, max_items: int, include_texture: bool) -> dict[str, Any]:
    """Build the declared output schema for a palette response.

    Args:
        min_items: Minimum length of ``paletteItems``.
        max_items: Maximum length of ``paletteItems``.
        include_texture: Add a required ``texture`` property to each item.

    Returns:
        A JSON-schema-like dict suitable for Gemini's ``response_schema``.
    """
    item_properties: dict[str, Any] = {
        "productType": {"type": "string"},
        "vibeColor": {"type": "string"},
        "hexCode": {"type": "string", "description": "Color as #RRGGBB."},
        "applicationTip": {"type": "string"},
    }
    item_required = ["productType", "vibeColor", "hexCode", "applicationTip"]
    if include_texture:
        item_properties["texture"] = {"type": "string"}
        item_required.append("texture")

    return {
        "type": "object",
        "properties": {
            "stylistNotes": {"type": "string", "description": "A creative summary."},
            "userUndertone": {
                "type": "string",
                "enum": list(UNDERTONES),
                "description": "The detected skin undertone.",
            },
            "paletteItems": {
                "type": "array",
                "minItems": min_items,
                "maxItems": max_items,
                "items": {
                    "type": "object",
                    "properties": item_properties,
                    "required": item_required,
                },
            },
        },
        "required": ["stylistNotes", "userUndertone", "paletteItems"],
    }


CLASSIC = PromptVariant(
    name="classic",
    system_instruction=_PERSONA + _CLASSIC_SCHEMA_TEXT,
    min_items=3,
    max_items=5,
    include_texture=False,
    response_schema=build_response_schema(3, 5, include_texture=False),
)

TEXTURED = PromptVariant(
    name="textured",
    system_instruction=_PERSONA + _TEXTURED_SCHEMA_TEXT,
    min_items=3,
    max_items=3,
    include_texture=True,
    response_schema=build_response_schema(3, 3, include_texture=True),
)

PROMPT_VARIANTS: dict[str, PromptVariant] = {
    CLASSIC.name: CLASSIC,
    TEXTURED.name: TEXTURED,
}


def get_prompt_variant(name: str) -> PromptVariant:
    """Look up a prompt variant by name.

    Raises:
        KeyError: If *name* is not a known variant.
    """
    try:
        return PROMPT_VARIANTS[name]
    except KeyError:
        raise KeyError(
            f"Unknown prompt variant '{name}'. Available: {', '.join(sorted(PROMPT_VARIANTS))}"
        ) from None
