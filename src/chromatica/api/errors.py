"""Error taxonomy for the palette proxy endpoint.

Every failure the endpoint can report is a :class:`PaletteError` subclass
carrying an HTTP status code and a client-safe message.  The exception
handler registered in :mod:`chromatica.api.main` renders them all as
``{"message": ...}`` bodies, so route code only has to ``raise``.

========================== ====== ==========================================
Exception                  Status Raised when
========================== ====== ==========================================
InvalidRequest             400    Missing/empty/undecodable request fields
MethodNotAllowed           405    Any method other than POST on the route
PayloadTooLarge            413    Decoded image exceeds ``max_image_bytes``
UpstreamCallFailed         500    The generation service raised
UpstreamMalformedResponse  500    Service output is not a valid palette
========================== ====== ==========================================
"""

from __future__ import annotations


class PaletteError(Exception):
    """Base class for errors surfaced to API clients.

    Attributes:
        status_code: HTTP status used for the response.
        message: Text placed in the ``message`` field of the response body.
            Must never contain credentials or raw tracebacks.
        headers: Optional extra response headers.
    """

    status_code: int = 500
    default_message: str = "Palette generation failed."

    def __init__(self, message: str | None = None, *, headers: dict[str, str] | None = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class InvalidRequest(PaletteError):
    status_code = 400
    default_message = "Missing image or mood vibe."


class MethodNotAllowed(PaletteError):
    status_code = 405
    default_message = "Method Not Allowed"

    def __init__(self, message: str | None = None, *, allow: str = "POST"):
        super().__init__(message, headers={"Allow": allow})


class PayloadTooLarge(PaletteError):
    status_code = 413
    default_message = "Image is too large."


class UpstreamCallFailed(PaletteError):
    """The external generation service could not be reached or refused the call."""

    status_code = 500
    default_message = "AI Generation Failed."


class UpstreamMalformedResponse(PaletteError):
    """The external generation service answered with something that is not a palette."""

    status_code = 500
    default_message = (
        "AI Generation Failed. The stylist returned an unreadable palette, please try again."
    )
