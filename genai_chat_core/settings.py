"""Core configuration settings for the GenAI chat client.

@public

Settings are loaded from environment variables with .env file support via
pydantic-settings.

Environment variables:
    GEMINI_API_KEY: API key sent as ``x-goog-api-key``
    GEMINI_BASE_URL: Service root (default https://generativelanguage.googleapis.com)
    GEMINI_API_VERSION: API version path segment (default v1beta)
    GEMINI_TIMEOUT: Request timeout in seconds for generateContent calls
    DEFAULT_MODEL: Model used by ChatRegistry.get_or_create() when none is given
    REDIRECT_TIMEOUT: Per-hop timeout in seconds when following citation redirects
    MAX_REDIRECTS: Hop cap when following citation redirects
    CITATION_HEADER: Line written above the numbered citation list
    DEBUG: Enables verbose diagnostics for citation resolution failures
    LMNR_PROJECT_API_KEY: Laminar project key; enables span export

Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values

Example:
    >>> from genai_chat_core.settings import settings
    >>> print(settings.gemini_base_url)

Note:
    Settings are loaded once at module import and frozen. The process must be
    restarted to pick up changes to environment variables or the .env file.
    Explicit arguments to Client() always win over these values.
"""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_REDIRECT_HOPS = 5
"""Hard cap on redirect hops followed per citation URL."""

_FALSEY = frozenset({"", "0", "false", "no", "off"})


class Settings(BaseSettings):
    """Configuration for the generative-language service client.

    @public

    Attributes:
        gemini_api_key: API key for the service. Empty means "not configured";
                        Client() raises ConfigError unless a key is passed.

        gemini_base_url: Root URL of the service, without the version segment.

        gemini_api_version: Version segment inserted between base URL and endpoint.

        gemini_timeout: Timeout in seconds for a single generateContent call.

        default_model: Model identifier used for registry-created chats.

        redirect_timeout: Timeout in seconds for each redirect hop when
                          resolving grounding citation URLs.

        max_redirects: Maximum number of redirect hops followed per citation
                       (1 to 5).

        citation_header: Heading line placed before numbered citation URLs
                         in rendered answer text.

        debug: Verbose diagnostics for citation resolution. Any DEBUG value
               except an explicit false ("0", "false", "no", "off") enables
               it. Never changes resolution results, only logging.

        lmnr_project_api_key: Laminar project key. Spans around model calls
                              are exported only when this is set.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Service
    gemini_api_key: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com"
    gemini_api_version: str = "v1beta"
    gemini_timeout: float = 60.0

    # Chats
    default_model: str = "gemini-2.0-flash"

    # Citations
    redirect_timeout: float = 10.0
    max_redirects: int = Field(default=MAX_REDIRECT_HOPS, ge=1, le=MAX_REDIRECT_HOPS)
    citation_header: str = "참고한 URL:"

    debug: bool = False

    # Observability
    lmnr_project_api_key: str = ""

    @field_validator("debug", mode="before")
    @classmethod
    def debug_flag(cls, v: Any) -> Any:
        """Any set DEBUG value other than an explicit false turns diagnostics on."""
        if isinstance(v, str):
            return v.strip().lower() not in _FALSEY
        return v


settings = Settings()
"""Global settings instance.

@public

Example:
    >>> from genai_chat_core.settings import settings
    >>> print(f"Using service at {settings.gemini_base_url}")
"""
