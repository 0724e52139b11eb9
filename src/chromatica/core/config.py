"""Configuration management for the Chromatica palette service.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables with the CHROMATICA_ prefix,
allowing easy customization without code changes.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (CHROMATICA_* prefix)
2. .env file in the project root
3. Default values defined in ChromaticaConfig

The Gemini credential is additionally accepted as a bare ``GEMINI_API_KEY``
variable so existing deployments keep working unchanged.

Example .env file:
    GEMINI_API_KEY=your-key-here
    CHROMATICA_GEMINI_MODEL=gemini-2.5-flash
    CHROMATICA_PROMPT_VARIANT=classic
    CHROMATICA_MAX_IMAGE_BYTES=4194304

Global Configuration Instance
------------------------------
A global `config` instance is created automatically at module import time and
is used by the CLI entry points.  Request handling never reads it directly:
:func:`chromatica.api.main.create_app` receives a config object, so tests can
build an application from their own instance.

Usage Example
-------------
    from chromatica.core.config import config

    print(config.gemini_model)
    print(config.prompt_variant)

Credential Handling
-------------------
The API key is stored as a :class:`pydantic.SecretStr`.  Its ``repr`` and
``str`` are masked, so logging the config object never prints the key.  Call
``get_secret_value()`` only at the point where the SDK client is created.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Package root, used to locate bundled static assets and templates.
PACKAGE_DIR = Path(__file__).resolve().parent.parent


class ChromaticaConfig(BaseSettings):
    """Main configuration for the Chromatica palette service.

    Values are loaded from environment variables with the CHROMATICA_ prefix,
    with fallback to defaults defined here.

    Attributes
    ----------
    Generation Service Settings:
        gemini_api_key : SecretStr | None
            Credential for the Gemini API (also read from GEMINI_API_KEY)
        gemini_model : str
            Gemini model identifier used for palette generation
        prompt_variant : Literal["classic", "textured"]
            Which prompt/schema pair to send (see chromatica.core.prompts)

    Request Limits:
        max_image_bytes : int
            Upper bound on the decoded image size accepted by the proxy

    Server Settings:
        server_host : str
            API bind address
        server_port : int
            API port (1024-65535)

    Client Settings:
        api_base_url : str
            Base URL the Gradio client posts to
        request_timeout : float
            Client-side HTTP timeout in seconds
        ui_server_name : str
            Gradio bind address
        ui_server_port : int
            Gradio port (1024-65535)

    Paths:
        static_dir : Path
            Directory with CSS/JS assets for the HTML client
        templates_dir : Path
            Directory containing index.html

    Examples
    --------
    Create a custom configuration:

        >>> custom = ChromaticaConfig(prompt_variant="textured", _env_file=None)
        >>> custom.prompt_variant
        'textured'
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHROMATICA_",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # Generation service settings
    gemini_api_key: SecretStr | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "gemini_api_key", "CHROMATICA_GEMINI_API_KEY", "GEMINI_API_KEY"
        ),
        description="Gemini API key (never logged or returned to clients)",
    )
    gemini_model: str = Field(
        default="gemini-2.5-flash",
        description="Gemini model identifier used for palette generation",
    )
    prompt_variant: Literal["classic", "textured"] = Field(
        default="classic",
        description="Prompt/schema variant: classic (3-5 items) or textured (3 items, texture)",
    )

    # Request limits
    max_image_bytes: int = Field(
        default=4 * 1024 * 1024,
        description="Maximum decoded image size in bytes",
        ge=1,
    )

    # API server settings
    server_host: str = Field(
        default="0.0.0.0",
        description="API server bind address",
    )
    server_port: int = Field(
        default=8000,
        description="API server port",
        ge=1024,
        le=65535,
    )

    # Client settings
    api_base_url: str = Field(
        default="http://127.0.0.1:8000",
        description="Base URL of the palette API used by the Gradio client",
    )
    request_timeout: float = Field(
        default=60.0,
        description="Client-side HTTP timeout in seconds",
        gt=0,
    )
    ui_server_name: str = Field(
        default="0.0.0.0",
        description="Gradio server bind address",
    )
    ui_server_port: int = Field(
        default=7860,
        description="Gradio server port",
        ge=1024,
        le=65535,
    )

    # Paths
    static_dir: Path = Field(
        default=PACKAGE_DIR / "static",
        description="Directory with static assets for the HTML client",
    )
    templates_dir: Path = Field(
        default=PACKAGE_DIR / "templates",
        description="Directory containing index.html",
    )


# Global configuration instance, used by the CLI entry points only.
config = ChromaticaConfig()
