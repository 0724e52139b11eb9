"""Palette proxy: the contract between API clients and the generation service.

:class:`PaletteProxy` holds everything a request needs (generator, prompt
variant, size limit, secrets to redact) and exposes a single coroutine,
:meth:`PaletteProxy.handle`.  It is built once per application in the
lifespan hook and shared read-only between requests.

Request flow
------------
1. **Validate** - both fields present and non-empty, else
   :class:`~chromatica.api.errors.InvalidRequest`.  The generator is not
   called.
2. **Decode** - strip an optional ``data:`` URI prefix, base64-decode, and
   enforce ``max_image_bytes`` (:class:`PayloadTooLarge`).
3. **Detect MIME type** - Pillow identifies the format from the header
   bytes.  Unidentifiable data is sent as ``image/jpeg``.
4. **Generate** - one awaited call to the generator with the variant's
   system instruction and schema.  Any exception becomes
   :class:`UpstreamCallFailed`, with configured secrets redacted.
5. **Parse and validate** - :func:`parse_palette_response` turns the raw
   text into a dict or raises :class:`UpstreamMalformedResponse`.

The parsed dict is returned as-is, so a conforming response is forwarded
without dropping or renaming fields.
"""

from __future__ import annotations

import base64
import binascii
import io
import json
import logging
from collections.abc import Iterable
from typing import Any

from PIL import Image
from pydantic import ValidationError

from chromatica.api.errors import (
    InvalidRequest,
    PayloadTooLarge,
    UpstreamCallFailed,
    UpstreamMalformedResponse,
)
from chromatica.api.models import PaletteRequest, PaletteResponse
from chromatica.core.config import ChromaticaConfig
from chromatica.core.generation import PaletteGenerator
from chromatica.core.prompts import PromptVariant, get_prompt_variant

logger = logging.getLogger(__name__)

# Image formats the generation service accepts, keyed by Pillow format name.
SUPPORTED_IMAGE_FORMATS: dict[str, str] = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "HEIF": "image/heic",
}

FALLBACK_MIME_TYPE = "image/jpeg"

REDACTED = "[REDACTED]"


def _format_size(num_bytes: int) -> str:
    """Format a byte count as a short human-readable string (``4MB``)."""
    if num_bytes >= 1024 * 1024:
        return f"{num_bytes / (1024 * 1024):g}MB"
    if num_bytes >= 1024:
        return f"{num_bytes / 1024:g}KB"
    return f"{num_bytes} bytes"


def _too_large_message(max_bytes: int) -> str:
    return f"Image is too large. Please upload an image under {_format_size(max_bytes)}."


# Room for the JSON envelope, a data URI prefix and the mood text.
REQUEST_OVERHEAD_BYTES = 64 * 1024


def max_request_bytes(max_image_bytes: int) -> int:
    """Largest ``POST /api/palette`` body that can still carry a valid image.

    Base64 turns every 3 bytes into 4 characters, so the body limit is the
    encoded image limit plus :data:`REQUEST_OVERHEAD_BYTES`.
    """
    return -(-max_image_bytes // 3) * 4 + REQUEST_OVERHEAD_BYTES


def check_content_length(content_length: str | None, max_image_bytes: int) -> None:
    """Reject a request body by its declared size, before it is read.

    Args:
        content_length: Raw ``Content-Length`` header value, if any.
        max_image_bytes: Configured decoded image limit.

    Raises:
        PayloadTooLarge: If the declared body exceeds
            :func:`max_request_bytes`.
    """
    if content_length is None:
        return
    try:
        declared = int(content_length)
    except ValueError:
        return
    if declared > max_request_bytes(max_image_bytes):
        logger.info("Rejecting palette request: declared body of %d bytes.", declared)
        raise PayloadTooLarge(_too_large_message(max_image_bytes))


def decode_image(image_base64: str, max_bytes: int) -> bytes:
    """Decode base64 image text, enforcing a size limit.

    Args:
        image_base64: Base64 text, optionally prefixed with a data URI header
            such as ``data:image/png;base64,``.  Embedded whitespace (line
            wrapping) is ignored.
        max_bytes: Maximum decoded size.

    Returns:
        The decoded image bytes.

    Raises:
        InvalidRequest: If the text is not valid base64 or decodes to nothing.
        PayloadTooLarge: If the decoded image exceeds *max_bytes*.
    """
    text = image_base64.strip()
    if text.startswith("data:"):
        _, _, text = text.partition(",")
    text = "".join(text.split())

    # Reject before decoding: 4 base64 characters carry 3 bytes.
    if (len(text) * 3) // 4 - text.count("=") > max_bytes:
        raise PayloadTooLarge(_too_large_message(max_bytes))

    try:
        data = base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidRequest("Image data is not valid base64.") from e

    if not data:
        raise InvalidRequest("Image data is empty.")
    if len(data) > max_bytes:
        raise PayloadTooLarge(_too_large_message(max_bytes))
    return data


def detect_mime_type(data: bytes) -> str:
    """Identify the MIME type of image bytes with Pillow.

    Only the header is read; the image is never fully decoded.

    Returns:
        A MIME type from :data:`SUPPORTED_IMAGE_FORMATS`, or
        :data:`FALLBACK_MIME_TYPE` if Pillow cannot identify the data.

    Raises:
        InvalidRequest: If the data is a recognised image in a format the
            generation service does not accept (BMP, TIFF, ...).
        PayloadTooLarge: If the header declares more pixels than Pillow's
            decompression-bomb limit allows.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format
    except Image.DecompressionBombError as e:
        logger.warning("Rejecting image with oversized dimensions: %s", e)
        raise PayloadTooLarge(
            "Image dimensions are too large. Please upload a smaller image."
        ) from e
    except OSError:
        logger.debug("Pillow could not identify image; falling back to %s.", FALLBACK_MIME_TYPE)
        return FALLBACK_MIME_TYPE

    mime_type = SUPPORTED_IMAGE_FORMATS.get(image_format or "")
    if mime_type is None:
        raise InvalidRequest(
            f"Unsupported image format: {image_format}. "
            "Please upload a JPEG, PNG, WEBP or GIF image."
        )
    return mime_type


def _strip_code_fence(text: str) -> str:
    """Remove a surrounding markdown code fence (```json ... ```), if any."""
    raw = text.strip()
    if raw.startswith("```"):
        raw = raw.split("```")[1]
        if raw.lower().startswith("json"):
            raw = raw[4:]
        raw = raw.strip()
    return raw


def parse_palette_response(text: str, variant: PromptVariant) -> dict[str, Any]:
    """Parse and validate the generation service's raw output.

    Args:
        text: Raw text returned by the generator.
        variant: Active prompt variant; supplies the item-count range and
            whether ``texture`` is required.

    Returns:
        The parsed JSON object, unchanged.

    Raises:
        UpstreamMalformedResponse: If the text is not JSON, not an object,
            or does not satisfy the palette contract.  The message is always
            the generic sanitized one; details go to the log.
    """
    try:
        data = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError as e:
        logger.warning("Generation service returned invalid JSON: %s", e)
        raise UpstreamMalformedResponse() from e

    if not isinstance(data, dict):
        logger.warning("Generation service returned %s instead of an object.", type(data).__name__)
        raise UpstreamMalformedResponse()

    try:
        palette = PaletteResponse.model_validate(data)
    except ValidationError as e:
        logger.warning(
            "Generation service response violates the palette schema (%d errors): %s",
            e.error_count(),
            "; ".join(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()),
        )
        raise UpstreamMalformedResponse() from e

    count = len(palette.palette_items)
    if not variant.min_items <= count <= variant.max_items:
        logger.warning(
            "Generation service returned %d palette items (expected %d-%d).",
            count,
            variant.min_items,
            variant.max_items,
        )
        raise UpstreamMalformedResponse()

    if variant.include_texture and any(not item.texture for item in palette.palette_items):
        logger.warning("Generation service omitted 'texture' on one or more palette items.")
        raise UpstreamMalformedResponse()

    return data


class PaletteProxy:
    """Stateless request handler in front of a :class:`PaletteGenerator`.

    Attributes:
        generator: The external generation service.
        variant: Prompt/schema pair sent with every request.
        max_image_bytes: Upper bound on the decoded image size.
    """

    def __init__(
        self,
        generator: PaletteGenerator,
        variant: PromptVariant,
        max_image_bytes: int,
        secrets: Iterable[str] = (),
    ) -> None:
        self.generator = generator
        self.variant = variant
        self.max_image_bytes = max_image_bytes
        self._secrets = tuple(s for s in secrets if s)

    @classmethod
    def from_config(cls, config: ChromaticaConfig, generator: PaletteGenerator) -> PaletteProxy:
        """Build a proxy from application configuration."""
        secrets = []
        if config.gemini_api_key is not None:
            secrets.append(config.gemini_api_key.get_secret_value())
        return cls(
            generator=generator,
            variant=get_prompt_variant(config.prompt_variant),
            max_image_bytes=config.max_image_bytes,
            secrets=secrets,
        )

    def redact(self, text: str) -> str:
        """Replace every configured secret in *text* with a placeholder."""
        for secret in self._secrets:
            text = text.replace(secret, REDACTED)
        return text

    async def handle(self, request: PaletteRequest) -> dict[str, Any]:
        """Validate a request, call the generator once, and return the palette.

        Args:
            request: Parsed request body.

        Returns:
            The palette object exactly as produced by the generation service.

        Raises:
            InvalidRequest: Missing/empty fields, bad base64, or an
                unsupported image format.
            PayloadTooLarge: Decoded image exceeds the configured limit.
            UpstreamCallFailed: The generator raised.
            UpstreamMalformedResponse: The generator's output is not a valid
                palette.
        """
        image_base64 = (request.image_base64 or "").strip()
        mood_vibe = (request.mood_vibe or "").strip()

        if not image_base64 or not mood_vibe:
            missing = [
                name
                for name, value in (("imageBase64", image_base64), ("moodVibe", mood_vibe))
                if not value
            ]
            logger.info("Rejecting palette request: missing %s.", ", ".join(missing))
            raise InvalidRequest(f"Missing image or mood vibe ({', '.join(missing)} is required).")

        image_bytes = decode_image(image_base64, self.max_image_bytes)
        mime_type = detect_mime_type(image_bytes)

        try:
            text = await self.generator.generate(
                system_instruction=self.variant.system_instruction,
                user_text=self.variant.user_text(mood_vibe),
                image_bytes=image_bytes,
                image_mime_type=mime_type,
                output_schema=self.variant.response_schema,
            )
        except Exception as e:
            detail = self.redact(str(e) or type(e).__name__)
            logger.error("Gemini API error: %s", detail)
            raise UpstreamCallFailed(
                "AI Generation Failed. Please check the server logs for API key errors, "
                f"or try a smaller image (under {_format_size(self.max_image_bytes)}). "
                f"Error: {detail}"
            ) from e

        palette = parse_palette_response(text, self.variant)
        logger.info(
            "Generated %d-item palette (undertone=%s).",
            len(palette["paletteItems"]),
            palette["userUndertone"],
        )
        return palette
