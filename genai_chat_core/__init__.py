"""GenAI Chat Core - multi-turn chat client for the generateContent API.

@public

Turns caller input (strings, image URLs, data URIs, structured turns) into
generateContent requests, keeps multi-turn conversation state with a
replay-safe curated history, and renders grounded answers with their
resolved source URLs.

Core Capabilities:
    - **Chats**: comprehensive vs. curated history, side-history splicing
    - **Sessions**: ChatRegistry maps session keys to chats
    - **Grounding**: Google Search tools and citation URL resolution
    - **Multimodal input**: image URLs and data URIs inlined automatically

Quick Start:
    >>> from genai_chat_core import Client
    >>>
    >>> client = Client()  # reads GEMINI_API_KEY
    >>> chats = client.chats()
    >>> chat = chats.get_or_create("user-1")
    >>> print(await chat.send_text("Is 0.1 + 0.2 == 0.3 in Python?"))

Environment Variables:
    - GEMINI_API_KEY: API key for the service
    - GEMINI_BASE_URL: Service root URL
    - DEBUG: Verbose citation resolution diagnostics
    - LMNR_PROJECT_API_KEY: Export Laminar spans for model calls
"""

from . import llm
from ._llm_core import (
    Citation,
    GenerateContentResponse,
    GenerationConfig,
    GoogleSearch,
    GoogleSearchRetrieval,
    OpaqueTool,
    Part,
    Role,
    Turn,
    UrlContext,
)
from .client import Client
from .exceptions import (
    APIError,
    ClientError,
    ConfigError,
    GenaiCoreError,
    ImageDownloadError,
    InvalidContentError,
    InvalidMessageError,
    InvalidRequestError,
    InvalidRoleError,
    MalformedResponseError,
    ServerError,
    TransportError,
)
from .llm import Chat, ChatRegistry, CitationResolver, Model, answer_text, curate
from .logging import LoggingConfig, get_logger, setup_logging
from .settings import Settings, settings
from .tracing import initialize_tracing

__version__ = "0.1.0"

__all__ = [
    "APIError",
    "Chat",
    "ChatRegistry",
    "Citation",
    "CitationResolver",
    "Client",
    "ClientError",
    "ConfigError",
    "GenaiCoreError",
    "GenerateContentResponse",
    "GenerationConfig",
    "GoogleSearch",
    "GoogleSearchRetrieval",
    "ImageDownloadError",
    "InvalidContentError",
    "InvalidMessageError",
    "InvalidRequestError",
    "InvalidRoleError",
    "LoggingConfig",
    "MalformedResponseError",
    "Model",
    "OpaqueTool",
    "Part",
    "Role",
    "ServerError",
    "Settings",
    "TransportError",
    "Turn",
    "UrlContext",
    "answer_text",
    "curate",
    "get_logger",
    "initialize_tracing",
    "llm",
    "settings",
    "setup_logging",
]
