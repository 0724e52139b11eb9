"""Chromatica - AI makeup palette generation from a photo and a mood keyword."""

__version__ = "0.1.0"

from chromatica.core.config import ChromaticaConfig, config

__all__ = [
    "ChromaticaConfig",
    "config",
]
