"""Core components for the Chromatica palette service.

- **ChromaticaConfig / config**: Configuration management using Pydantic Settings
  (``CHROMATICA_*`` environment variables).
- **PromptVariant / get_prompt_variant**: Versioned system instructions and
  output schemas, selected by configuration.
- **PaletteGenerator / GeminiPaletteGenerator**: The external generation
  service seam and its Gemini implementation.
"""

from chromatica.core.config import ChromaticaConfig, config
from chromatica.core.generation import GeminiPaletteGenerator, PaletteGenerator
from chromatica.core.prompts import PROMPT_VARIANTS, PromptVariant, get_prompt_variant

__all__ = [
    "ChromaticaConfig",
    "config",
    "GeminiPaletteGenerator",
    "PaletteGenerator",
    "PROMPT_VARIANTS",
    "PromptVariant",
    "get_prompt_variant",
]
