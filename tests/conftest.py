"""Shared pytest fixtures for Chromatica tests."""

import base64
import io
import json
import shutil
import struct
import tempfile
import zlib
from pathlib import Path
from typing import Any, Generator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from chromatica.api.main import create_app
from chromatica.core.config import ChromaticaConfig
from chromatica.core.generation import PaletteGenerator

# Credential fixture string; must never appear in any response body.
TEST_API_KEY = "test-secret-key-0123456789"


class FakePaletteGenerator(PaletteGenerator):
    """Generation service double that records calls.

    Attributes:
        calls: Keyword arguments of every ``generate()`` call, in order.
        response_text: Text returned by ``generate()``.
        error: If set, raised by ``generate()`` instead of returning.
    """

    def __init__(self, response_text: str = "{}", error: Exception | None = None):
        self.calls: list[dict[str, Any]] = []
        self.response_text = response_text
        self.error = error

    async def generate(
        self,
        system_instruction: str,
        user_text: str,
        image_bytes: bytes,
        image_mime_type: str,
        output_schema: dict[str, Any],
    ) -> str:
        self.calls.append(
            {
                "system_instruction": system_instruction,
                "user_text": user_text,
                "image_bytes": image_bytes,
                "image_mime_type": image_mime_type,
                "output_schema": output_schema,
            }
        )
        if self.error is not None:
            raise self.error
        return self.response_text


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config() -> ChromaticaConfig:
    """Create a test configuration with a known credential and no .env file.

    Returns:
        ChromaticaConfig instance for testing
    """
    return ChromaticaConfig(
        _env_file=None,
        gemini_api_key=TEST_API_KEY,
        gemini_model="gemini-test",
        prompt_variant="classic",
        max_image_bytes=64 * 1024,
    )


@pytest.fixture
def valid_palette() -> dict:
    """A schema-conforming palette with three items.

    Returns:
        Palette dict in wire (camelCase) format
    """
    return {
        "stylistNotes": "Warm, soft and inviting - a palette for slow weekends.",
        "userUndertone": "Warm",
        "paletteItems": [
            {
                "productType": "Foundation",
                "vibeColor": "Honey Glow",
                "hexCode": "#E0B48C",
                "applicationTip": "Buff in with a damp sponge for a skin-like finish.",
            },
            {
                "productType": "Blush",
                "vibeColor": "Cinnamon Hug",
                "hexCode": "#C8645A",
                "applicationTip": "Sweep high on the cheekbones toward the temples.",
            },
            {
                "productType": "Lipstick",
                "vibeColor": "Mulled Wine",
                "hexCode": "#7B2D3A",
                "applicationTip": "Blot once and reapply for lasting color.",
            },
        ],
    }


@pytest.fixture
def textured_palette(valid_palette: dict) -> dict:
    """The valid palette with a ``texture`` on every item."""
    palette = json.loads(json.dumps(valid_palette))
    for item, texture in zip(palette["paletteItems"], ["Satin", "Matte", "Cream"]):
        item["texture"] = texture
    return palette


@pytest.fixture
def png_bytes() -> bytes:
    """A tiny in-memory PNG image."""
    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(224, 180, 140)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def oversized_png_bytes() -> bytes:
    """A PNG header declaring 20000x20000 pixels, with no image data.

    Far above twice Pillow's ``MAX_IMAGE_PIXELS``, so opening it trips the
    decompression-bomb check.
    """

    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    header = struct.pack(">IIBBBBB", 20000, 20000, 8, 2, 0, 0, 0)
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", header)
        + chunk(b"IDAT", b"")
        + chunk(b"IEND", b"")
    )


@pytest.fixture
def png_base64(png_bytes: bytes) -> str:
    """Base64 text of :func:`png_bytes`."""
    return base64.b64encode(png_bytes).decode("ascii")


@pytest.fixture
def image_file(temp_dir: Path, png_bytes: bytes) -> Path:
    """The tiny PNG written to disk."""
    path = temp_dir / "selfie.png"
    path.write_bytes(png_bytes)
    return path


@pytest.fixture
def api_key() -> str:
    """The credential configured in :func:`test_config`."""
    return TEST_API_KEY


@pytest.fixture
def make_generator() -> type[FakePaletteGenerator]:
    """The generator double class, for tests that need a custom one."""
    return FakePaletteGenerator


@pytest.fixture
def make_client(test_config: ChromaticaConfig):
    """Factory building a started TestClient around a given generator.

    Clients are closed (lifespan shut down) when the test finishes.
    """
    clients: list[TestClient] = []

    def _make(generator: PaletteGenerator, app_config: ChromaticaConfig | None = None):
        client = TestClient(create_app(app_config or test_config, generator))
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def fake_generator(valid_palette: dict) -> FakePaletteGenerator:
    """Generator double returning the valid palette as JSON text."""
    return FakePaletteGenerator(response_text=json.dumps(valid_palette))


@pytest.fixture
def test_client(
    test_config: ChromaticaConfig, fake_generator: FakePaletteGenerator
) -> Generator[TestClient, None, None]:
    """TestClient for an app wired to the fake generator.

    The client is used as a context manager so the lifespan hook runs and
    the palette proxy is created.
    """
    app = create_app(test_config, fake_generator)
    with TestClient(app) as client:
        yield client
