"""Conversation layer over the generateContent API.

This package provides the Chat class (multi-turn state with curated
history), the ChatRegistry for per-key sessions, the Model facade and
grounding citation resolution.

Primary API:
    Chat - stateful conversation; send() / send_text()
    ChatRegistry - one Chat per session key
    curate - replay-safe subset of a turn history
    CitationResolver, answer_text - source URLs for grounded answers

Primitive types (Turn, Part, GenerationConfig, ...) are re-exported from _llm_core.
"""

from genai_chat_core._llm_core import (
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
    generate,
    is_valid_turn,
)

from ._content import normalize_contents
from .chat import Chat, ChatMessage
from .citations import CitationResolver, answer_text, resolve_citations
from .history import curate, is_valid_response
from .model import Model
from .registry import ChatRegistry

__all__ = [
    "Chat",
    "ChatMessage",
    "ChatRegistry",
    "Citation",
    "CitationResolver",
    "GenerateContentResponse",
    "GenerationConfig",
    "GoogleSearch",
    "GoogleSearchRetrieval",
    "Model",
    "OpaqueTool",
    "Part",
    "Role",
    "Turn",
    "UrlContext",
    "answer_text",
    "curate",
    "generate",
    "is_valid_response",
    "is_valid_turn",
    "normalize_contents",
    "resolve_citations",
]
