"""Generation config and tool declarations for generateContent requests.

Tools form a closed set of known variants plus one explicit passthrough
variant (``OpaqueTool``), so a misspelled tool name fails loudly instead of
being forwarded to the service.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from genai_chat_core.exceptions import InvalidRequestError


class GenerationConfig(BaseModel):
    """Sampling and output options sent as ``generationConfig``.

    Unknown keys are allowed and forwarded as given, for options this
    class does not model yet.

    Example:
        >>> GenerationConfig(temperature=0.7, max_output_tokens=2048).to_wire()
        {'temperature': 0.7, 'maxOutputTokens': 2048}
    """

    model_config = ConfigDict(frozen=True, extra="allow", alias_generator=to_camel, populate_by_name=True)

    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    max_output_tokens: int | None = None
    candidate_count: int | None = None
    stop_sequences: tuple[str, ...] | None = None
    response_mime_type: str | None = None
    seed: int | None = None
    presence_penalty: float | None = None
    frequency_penalty: float | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


DEFAULT_CHAT_CONFIG = GenerationConfig(temperature=0.7, max_output_tokens=2048)
"""Config given to registry-created chats when the caller supplies none."""


class _Tool(BaseModel, ABC):
    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def to_wire(self) -> dict[str, Any]:
        """Serialize to the tool declaration sent in the request body."""


class GoogleSearch(_Tool):
    """Grounding with Google Search."""

    kind: Literal["google_search"] = "google_search"

    def to_wire(self) -> dict[str, Any]:
        return {"google_search": {}}


class GoogleSearchRetrieval(_Tool):
    """Search retrieval, optionally with a dynamic retrieval threshold."""

    kind: Literal["google_search_retrieval"] = "google_search_retrieval"
    dynamic_threshold: float | None = None

    def to_wire(self) -> dict[str, Any]:
        if self.dynamic_threshold is None:
            return {"google_search_retrieval": {}}
        return {
            "google_search_retrieval": {
                "dynamic_retrieval_config": {
                    "mode": "MODE_DYNAMIC",
                    "dynamic_threshold": self.dynamic_threshold,
                }
            }
        }


class UrlContext(_Tool):
    """Lets the model fetch URLs mentioned in the prompt."""

    kind: Literal["url_context"] = "url_context"

    def to_wire(self) -> dict[str, Any]:
        return {"url_context": {}}


class OpaqueTool(_Tool):
    """A tool declaration forwarded verbatim (function declarations, code execution, ...)."""

    kind: Literal["opaque"] = "opaque"
    payload: dict[str, Any]

    def to_wire(self) -> dict[str, Any]:
        return dict(self.payload)


Tool = Annotated[GoogleSearch | GoogleSearchRetrieval | UrlContext | OpaqueTool, Field(discriminator="kind")]

ToolSpec = Tool | str | Mapping[str, Any]
"""What callers may pass as a tool: a Tool, a known tool name, or a raw mapping."""

_NAMED_TOOLS: dict[str, type[_Tool]] = {
    "google_search": GoogleSearch,
    "google_search_retrieval": GoogleSearchRetrieval,
    "url_context": UrlContext,
}


def normalize_tool(tool: ToolSpec) -> Tool:
    """Turn a tool spec into a Tool variant.

    Raises:
        InvalidRequestError: Unknown tool name or unsupported type.
    """
    if isinstance(tool, (GoogleSearch, GoogleSearchRetrieval, UrlContext, OpaqueTool)):
        return tool
    if isinstance(tool, str):
        if tool_cls := _NAMED_TOOLS.get(tool):
            return tool_cls()  # type: ignore[return-value]
        raise InvalidRequestError(f"Unknown tool: {tool}")
    if isinstance(tool, Mapping):
        return OpaqueTool(payload=dict(tool))
    raise InvalidRequestError(f"Unknown tool: {tool!r}")


def normalize_tools(tools: ToolSpec | Sequence[ToolSpec] | None) -> list[Tool]:
    """Normalize a single tool or a sequence of tools."""
    if tools is None:
        return []
    if isinstance(tools, (str, Mapping, _Tool)):
        return [normalize_tool(tools)]
    return [normalize_tool(t) for t in tools]
