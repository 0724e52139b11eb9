"""External generation service used to produce palettes.

This module provides the seam between the proxy endpoint and the third-party
multimodal model.  :class:`PaletteGenerator` is the abstract interface the
proxy depends on; :class:`GeminiPaletteGenerator` implements it with the
``google-genai`` SDK.

Key Responsibilities
--------------------
- **Lazy client creation** - the SDK client is created on the first call to
  ``generate()``, so building the application never needs network access or
  a credential.
- **Credential injection** - the API key comes from the
  :class:`~chromatica.core.config.ChromaticaConfig` passed to the
  constructor, never from process globals at request time.
- **Schema-constrained output** - every call declares
  ``response_mime_type="application/json"`` together with the active prompt
  variant's response schema.

The generator does not parse or validate the returned text;
that is the proxy's job (see :mod:`chromatica.api.proxy`).

Usage
-----
::

    from chromatica.core.config import config
    from chromatica.core.generation import GeminiPaletteGenerator

    generator = GeminiPaletteGenerator(config)
    text = await generator.generate(
        system_instruction="You are a stylist...",
        user_text="User Vibe/Mood: Cozy",
        image_bytes=jpeg_bytes,
        image_mime_type="image/jpeg",
        output_schema=schema,
    )
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from chromatica.core.config import ChromaticaConfig

logger = logging.getLogger(__name__)


class PaletteGenerator(ABC):
    """Opaque multimodal generation function.

    Implementations are fallible and non-deterministic: the same inputs may
    produce different text, and any exception they raise is reported to the
    client as an upstream failure.
    """

    @abstractmethod
    async def generate(
        self,
        system_instruction: str,
        user_text: str,
        image_bytes: bytes,
        image_mime_type: str,
        output_schema: dict[str, Any],
    ) -> str:
        """Generate raw result text for a prompt and an image.

        Args:
            system_instruction: Persona and output-format directive.
            user_text: The user's turn (the mood keyword).
            image_bytes: Decoded image content.
            image_mime_type: MIME type of *image_bytes*, e.g. ``image/png``.
            output_schema: Schema the output is constrained to.

        Returns:
            The service's raw text output, expected to be JSON.
        """


class GeminiPaletteGenerator(PaletteGenerator):
    """Palette generator backed by the Gemini API.

    Attributes:
        _config (ChromaticaConfig):
            Application configuration - model name and credential.
        _client:
            The ``google.genai.Client`` instance, or ``None`` until the first
            call to :meth:`generate`.
    """

    def __init__(self, config: ChromaticaConfig) -> None:
        self._config = config
        self._client = None

    @property
    def model(self) -> str:
        """Gemini model identifier used for every call."""
        return self._config.gemini_model

    def _get_client(self):
        """Return the SDK client, creating it on first use.

        Raises:
            RuntimeError: If no API key is configured.
        """
        if self._client is not None:
            return self._client

        if self._config.gemini_api_key is None:
            raise RuntimeError(
                "Gemini API key is not configured. Set GEMINI_API_KEY or "
                "CHROMATICA_GEMINI_API_KEY."
            )

        from google import genai

        logger.info("Creating Gemini client for model '%s'.", self.model)
        self._client = genai.Client(api_key=self._config.gemini_api_key.get_secret_value())
        return self._client

    async def generate(
        self,
        system_instruction: str,
        user_text: str,
        image_bytes: bytes,
        image_mime_type: str,
        output_schema: dict[str, Any],
    ) -> str:
        """Call Gemini once with the image and mood text.

        Raises:
            RuntimeError: If no API key is configured.
            ValueError: If the service returned no text at all.
            Exception: Any SDK error (network, quota, invalid credential) is
                propagated unchanged.
        """
        from google.genai import types

        client = self._get_client()

        contents = [
            types.Part.from_bytes(data=image_bytes, mime_type=image_mime_type),
            user_text,
        ]
        generation_config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            response_mime_type="application/json",
            response_schema=output_schema,
        )

        logger.debug(
            "Requesting palette from '%s' (%d image bytes, %s).",
            self.model,
            len(image_bytes),
            image_mime_type,
        )
        response = await client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=generation_config,
        )

        text = response.text
        if not text:
            raise ValueError("Gemini returned an empty response.")
        return text
