"""Primitive generateContent layer.

This internal module provides the wire types, response types, tool/config
models and the single-call generate() function. App code should use the
llm module's Chat and Model classes instead.

Exports:
    Types: Role, Blob, Part, Turn, is_valid_turn
    Model config: GenerationConfig, tool variants, normalize_tools
    Response types: GenerateContentResponse, Candidate, GroundingMetadata, Citation
    Functions: generate
"""

from .client import build_request_body, generate
from .model_options import (
    DEFAULT_CHAT_CONFIG,
    GenerationConfig,
    GoogleSearch,
    GoogleSearchRetrieval,
    OpaqueTool,
    Tool,
    ToolSpec,
    UrlContext,
    normalize_tool,
    normalize_tools,
)
from .model_response import (
    Candidate,
    Citation,
    GenerateContentResponse,
    GroundingChunk,
    GroundingMetadata,
    UsageMetadata,
    WebChunk,
)
from .types import VALID_ROLES, Blob, Part, Role, Turn, is_valid_turn

__all__ = [
    "DEFAULT_CHAT_CONFIG",
    "VALID_ROLES",
    "Blob",
    "Candidate",
    "Citation",
    "GenerateContentResponse",
    "GenerationConfig",
    "GoogleSearch",
    "GoogleSearchRetrieval",
    "GroundingChunk",
    "GroundingMetadata",
    "OpaqueTool",
    "Part",
    "Role",
    "Tool",
    "ToolSpec",
    "Turn",
    "UrlContext",
    "UsageMetadata",
    "WebChunk",
    "build_request_body",
    "generate",
    "is_valid_turn",
    "normalize_tool",
    "normalize_tools",
]
