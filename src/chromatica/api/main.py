"""Chromatica Palette Service - FastAPI Application.

This module defines the application factory :func:`create_app`, the default
module-level ``app`` instance, all routes, and the ``main()`` CLI function
that launches the uvicorn server.

Architecture
------------
The application is a stateless proxy:

- **Configuration** comes from a :class:`~chromatica.core.config.ChromaticaConfig`
  passed to :func:`create_app` (the global ``config`` for the CLI, a
  test-local instance in the test suite).
- **Palette generation** is delegated to a
  :class:`~chromatica.core.generation.PaletteGenerator` wrapped by a
  :class:`~chromatica.api.proxy.PaletteProxy`, both created in the lifespan
  hook and stored on ``app.state``.
- **Errors** are raised as :class:`~chromatica.api.errors.PaletteError`
  subclasses and rendered by exception handlers as ``{"message": ...}``.
  Anything else is logged and answered with a generic 500 message.
- **Upload size** is checked from ``Content-Length`` by a middleware before
  the palette body is read.
- **The HTML page** is served as a raw ``HTMLResponse``; its script talks to
  ``/api/palette`` directly.

Endpoints
---------
========  ============================  ====================================
Method    Path                          Purpose
========  ============================  ====================================
GET       ``/``                         Serve the HTML client page
GET       ``/health``                   Liveness check
GET       ``/api/config``               Public settings for the front-end
POST      ``/api/palette``              Generate a palette
other     ``/api/palette``              405 Method Not Allowed
========  ============================  ====================================

Usage
-----
CLI (installed entry point)::

    chromatica

Direct invocation::

    python -m chromatica.api.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from chromatica import __version__
from chromatica.api.errors import MethodNotAllowed, PaletteError, PayloadTooLarge
from chromatica.api.models import ErrorResponse, PaletteRequest, PaletteResponse
from chromatica.api.proxy import PaletteProxy, check_content_length
from chromatica.core.config import ChromaticaConfig, config
from chromatica.core.generation import GeminiPaletteGenerator, PaletteGenerator

logger = logging.getLogger(__name__)

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Missing or malformed input"},
    413: {"model": ErrorResponse, "description": "Image too large"},
    500: {"model": ErrorResponse, "description": "Generation service failure"},
}


# ---------------------------------------------------------------------------
# Exception handlers - every error body is ``{"message": str}``.
# ---------------------------------------------------------------------------


async def _palette_error_handler(request: Request, exc: PaletteError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=exc.headers,
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request-body validation failures as 400.

    Only the location and message of each error are reported; the offending
    input is left out so a large base64 payload is never echoed back.
    """
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()) if part != 'body') or 'body'}: "
        f"{err.get('msg', 'invalid')}"
        for err in exc.errors()
    )
    logger.info("Rejecting malformed request body: %s", problems)
    return JSONResponse(
        status_code=400,
        content={"message": f"Invalid request body. {problems}"},
    )


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, answer with the generic message."""
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"message": PaletteError.default_message})


# ---------------------------------------------------------------------------
# Application factory.
# ---------------------------------------------------------------------------


def create_app(
    app_config: ChromaticaConfig | None = None,
    generator: PaletteGenerator | None = None,
) -> FastAPI:
    """Build a configured FastAPI application.

    Args:
        app_config: Configuration to use.  Defaults to the global
            :data:`~chromatica.core.config.config`.
        generator: Generation service.  Defaults to a
            :class:`GeminiPaletteGenerator` built from *app_config*.  Tests
            pass a fake here so no network call is ever made.

    Returns:
        The FastAPI application.  The palette proxy is created when the
        application starts (lifespan), so use ``TestClient`` as a context
        manager in tests.
    """
    app_config = app_config or config

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Create the palette proxy on startup.

        The generator's SDK client is created lazily on the first request,
        so startup needs neither network access nor a credential.
        """
        # --- Startup -----------------------------------------------------------
        palette_generator = (
            generator if generator is not None else GeminiPaletteGenerator(app_config)
        )
        app.state.palette_proxy = PaletteProxy.from_config(app_config, palette_generator)
        if app_config.gemini_api_key is None:
            logger.warning("No Gemini API key configured; palette requests will fail.")
        logger.info(
            "Palette proxy ready (model=%s, variant=%s, max_image_bytes=%d).",
            app_config.gemini_model,
            app_config.prompt_variant,
            app_config.max_image_bytes,
        )

        yield  # Application runs here.

        # --- Shutdown ----------------------------------------------------------
        logger.info("Palette proxy shut down.")

    app = FastAPI(
        title="Chromatica Palette Service",
        description="AI stylist that turns a photo and a mood into a makeup palette.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = app_config

    @app.middleware("http")
    async def limit_palette_body(request: Request, call_next):
        """Reject oversized palette uploads by Content-Length, before the body is read."""
        if request.method == "POST" and request.url.path == "/api/palette":
            try:
                check_content_length(
                    request.headers.get("content-length"), app_config.max_image_bytes
                )
            except PayloadTooLarge as e:
                return await _palette_error_handler(request, e)
        return await call_next(request)

    # Allow cross-origin requests so the Gradio client or a separately served
    # front-end can call the API during development.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PaletteError, _palette_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    if app_config.static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(app_config.static_dir)), name="static")

    # -----------------------------------------------------------------------
    # Routes.
    # -----------------------------------------------------------------------

    @app.get("/", response_class=HTMLResponse)
    async def index() -> HTMLResponse:
        """Serve the HTML client page.

        Raises:
            HTTPException: 404 if ``index.html`` is not found.
        """
        index_path = app_config.templates_dir / "index.html"
        if index_path.exists():
            return HTMLResponse(content=index_path.read_text(encoding="utf-8"))
        raise HTTPException(status_code=404, detail="index.html not found")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok", "version": __version__}

    @app.get("/api/config")
    async def get_config(request: Request) -> dict:
        """Return the public settings the front-end needs.

        The credential is never part of this payload.
        """
        proxy: PaletteProxy = request.app.state.palette_proxy
        return {
            "version": __version__,
            "model": app_config.gemini_model,
            "promptVariant": proxy.variant.name,
            "minItems": proxy.variant.min_items,
            "maxItems": proxy.variant.max_items,
            "includeTexture": proxy.variant.include_texture,
            "maxImageBytes": proxy.max_image_bytes,
        }

    @app.post(
        "/api/palette",
        response_model=PaletteResponse,
        responses=_ERROR_RESPONSES,
    )
    async def create_palette(req: PaletteRequest, request: Request) -> JSONResponse:
        """Generate a makeup palette from an image and a mood keyword.

        - **imageBase64**: base64 image (selfie or inspiration photo)
        - **moodVibe**: mood keyword, e.g. "Cozy Sunday"

        The palette object is returned exactly as the generation service
        produced it, once it has passed validation.
        """
        proxy: PaletteProxy = request.app.state.palette_proxy
        palette = await proxy.handle(req)
        return JSONResponse(status_code=200, content=palette)

    @app.api_route(
        "/api/palette",
        methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"],
        include_in_schema=False,
    )
    async def palette_method_not_allowed() -> None:
        """Reject every method except POST without touching the body."""
        raise MethodNotAllowed()

    return app


# ---------------------------------------------------------------------------
# Default application instance, used by uvicorn.
# ---------------------------------------------------------------------------
app = create_app()


# ---------------------------------------------------------------------------
# CLI entry point.
# ---------------------------------------------------------------------------


def main() -> None:
    """Launch the uvicorn ASGI server.

    Reads host and port from :data:`~chromatica.core.config.config` (which
    loads from ``CHROMATICA_SERVER_HOST`` and ``CHROMATICA_SERVER_PORT``
    environment variables).  Defaults to ``0.0.0.0:8000``.

    This function is registered as the ``chromatica`` console script in
    ``pyproject.toml``.
    """
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run(
        "chromatica.api.main:app",
        host=config.server_host,
        port=config.server_port,
        reload=False,
    )


if __name__ == "__main__":
    main()
