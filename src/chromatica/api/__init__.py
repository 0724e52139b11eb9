"""Chromatica Palette Service - FastAPI REST API layer.

This package contains the FastAPI application, Pydantic request/response
models, the error taxonomy, and the palette proxy.

Modules
-------
main
    Application factory, route handlers, and the ``main()`` CLI entry point.
models
    Pydantic models for the ``/api/palette`` request and response.
errors
    ``PaletteError`` hierarchy rendered as ``{"message": ...}`` bodies.
proxy
    Request validation, image decoding, the upstream call, and response
    parsing.
"""
