"""Tests for chromatica.api.models - request and response models.

Tests cover:
- camelCase wire aliases and snake_case population.
- Hex code pattern and non-empty string constraints.
- Optional ``texture`` handling.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from chromatica.api.models import ErrorResponse, PaletteItem, PaletteRequest, PaletteResponse


class TestPaletteRequest:
    """Test PaletteRequest parsing."""

    def test_camel_case_aliases(self):
        req = PaletteRequest.model_validate({"imageBase64": "aGk=", "moodVibe": "Cozy"})
        assert req.image_base64 == "aGk="
        assert req.mood_vibe == "Cozy"

    def test_dump_uses_wire_names(self):
        req = PaletteRequest(imageBase64="aGk=", moodVibe="Cozy")
        assert req.model_dump(by_alias=True) == {"imageBase64": "aGk=", "moodVibe": "Cozy"}

    def test_snake_case_keys_not_accepted(self):
        """Only the camelCase wire names populate the request."""
        req = PaletteRequest.model_validate({"image_base64": "aGk=", "mood_vibe": "Cozy"})
        assert req.image_base64 is None
        assert req.mood_vibe is None

    def test_fields_optional(self):
        req = PaletteRequest.model_validate({})
        assert req.image_base64 is None
        assert req.mood_vibe is None

    def test_non_string_rejected(self):
        with pytest.raises(ValidationError):
            PaletteRequest.model_validate({"imageBase64": 123, "moodVibe": "Cozy"})


class TestPaletteItem:
    """Test PaletteItem constraints."""

    def _item(self, **overrides):
        data = {
            "productType": "Blush",
            "vibeColor": "Cinnamon Hug",
            "hexCode": "#C8645A",
            "applicationTip": "Sweep upward.",
        }
        data.update(overrides)
        return PaletteItem.model_validate(data)

    def test_valid(self):
        item = self._item()
        assert item.hex_code == "#C8645A"
        assert item.texture is None

    @pytest.mark.parametrize("hex_code", ["#abcdef", "#ABCDEF", "#012345"])
    def test_valid_hex(self, hex_code):
        assert self._item(hexCode=hex_code).hex_code == hex_code

    @pytest.mark.parametrize("hex_code", ["abcdef", "#abc", "#abcdeg", " #abcdef"])
    def test_invalid_hex(self, hex_code):
        with pytest.raises(ValidationError):
            self._item(hexCode=hex_code)

    def test_empty_product_type_rejected(self):
        with pytest.raises(ValidationError):
            self._item(productType="")

    def test_texture(self):
        assert self._item(texture="Shimmer").texture == "Shimmer"


class TestPaletteResponse:
    """Test PaletteResponse parsing."""

    def test_valid(self, valid_palette):
        palette = PaletteResponse.model_validate(valid_palette)
        assert palette.user_undertone == "Warm"
        assert [item.vibe_color for item in palette.palette_items] == [
            "Honey Glow",
            "Cinnamon Hug",
            "Mulled Wine",
        ]

    def test_dump_uses_wire_names(self, valid_palette):
        palette = PaletteResponse.model_validate(valid_palette)
        dumped = palette.model_dump(by_alias=True, exclude_none=True)
        assert dumped == valid_palette

    def test_empty_undertone_rejected(self, valid_palette):
        valid_palette["userUndertone"] = ""
        with pytest.raises(ValidationError):
            PaletteResponse.model_validate(valid_palette)

    def test_missing_items_rejected(self, valid_palette):
        del valid_palette["paletteItems"]
        with pytest.raises(ValidationError):
            PaletteResponse.model_validate(valid_palette)


def test_error_response():
    assert ErrorResponse(message="boom").model_dump() == {"message": "boom"}
