"""HTTP client for the palette API.

This module is the Python counterpart of the browser page's script: it turns
a selected image into base64 text and posts it, together with the mood
keyword, to ``POST /api/palette``.

- :func:`encode_image` reads a file path, raw bytes, or a data URI and returns
  bare base64 text (any ``data:...;base64,`` prefix is stripped).
- :class:`PaletteClient` performs exactly one request per call via ``httpx``
  and converts every failure into :class:`RequestFailed` carrying a message
  that is safe to show to the user.

Usage
-----
::

    from chromatica.ui.client import PaletteClient, encode_image

    with PaletteClient("http://127.0.0.1:8000") as client:
        palette = client.submit_palette_request(encode_image("selfie.jpg"), "Cozy")
        print(palette.user_undertone)
"""

from __future__ import annotations

import base64
import logging
import os
from pathlib import Path

import httpx
from pydantic import ValidationError

from chromatica.api.models import PaletteResponse
from chromatica.core.config import ChromaticaConfig

logger = logging.getLogger(__name__)

PALETTE_ENDPOINT = "/api/palette"
DEFAULT_ERROR_MESSAGE = "API request failed. Check the server logs."


class EncodingError(Exception):
    """The selected image could not be read or encoded."""


class RequestFailed(Exception):
    """The palette API answered with an error, or could not be reached.

    Attributes:
        message: User-facing description of the failure.
        status_code: HTTP status of the response, or ``None`` for transport
            failures.
    """

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def encode_image(source: str | os.PathLike | bytes) -> str:
    """Encode an image as base64 text without any data-URI metadata.

    Args:
        source: A filesystem path, the raw image bytes, or a data URI string
            (``data:image/png;base64,...``).

    Returns:
        Base64 text of the image bytes.

    Raises:
        EncodingError: If the file cannot be read or is empty.
    """
    if isinstance(source, str) and source.startswith("data:"):
        header, sep, payload = source.partition(",")
        if not sep or ";base64" not in header or not payload.strip():
            raise EncodingError("Image data URI is not base64-encoded.")
        return "".join(payload.split())

    if isinstance(source, (bytes, bytearray)):
        data = bytes(source)
    else:
        try:
            data = Path(source).read_bytes()
        except (OSError, TypeError) as e:
            raise EncodingError(f"Could not read image file: {e}") from e

    if not data:
        raise EncodingError("The selected image file is empty.")
    return base64.b64encode(data).decode("ascii")


def _error_message(response: httpx.Response) -> str:
    """Extract ``message`` from an error body, or fall back to a generic one."""
    try:
        body = response.json()
    except ValueError:
        return DEFAULT_ERROR_MESSAGE
    message = body.get("message") if isinstance(body, dict) else None
    if isinstance(message, str) and message.strip():
        return message
    return DEFAULT_ERROR_MESSAGE


class PaletteClient:
    """Thin synchronous client for ``POST /api/palette``.

    Args:
        base_url: Root URL of the API, e.g. ``http://127.0.0.1:8000``.
            Ignored when *http_client* is given.
        timeout: Request timeout in seconds.
        http_client: Pre-built ``httpx.Client`` (for example a FastAPI
            ``TestClient``).  The caller keeps ownership of it.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8000",
        timeout: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(base_url=base_url, timeout=timeout)

    @classmethod
    def from_config(cls, config: ChromaticaConfig) -> PaletteClient:
        return cls(base_url=config.api_base_url, timeout=config.request_timeout)

    def submit_palette_request(self, image_base64: str, mood_vibe: str) -> PaletteResponse:
        """Post one palette request and return the parsed palette.

        Args:
            image_base64: Base64 text from :func:`encode_image`.
            mood_vibe: The user's mood keyword.

        Returns:
            The palette returned by the API.

        Raises:
            RequestFailed: On a transport error, a non-2xx status (message
                taken from the body when possible), or an unreadable success
                body.
        """
        try:
            response = self._http.post(
                PALETTE_ENDPOINT,
                json={"imageBase64": image_base64, "moodVibe": mood_vibe},
            )
        except httpx.HTTPError as e:
            logger.error("Palette request could not be sent: %s", e)
            raise RequestFailed(f"Could not reach the palette service: {e}") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning("Palette request failed with HTTP %d: %s", response.status_code, message)
            raise RequestFailed(message, status_code=response.status_code)

        try:
            return PaletteResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error("Palette response could not be parsed: %s", e)
            raise RequestFailed(
                "The palette service returned an unreadable palette.",
                status_code=response.status_code,
            ) from e

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> PaletteClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
