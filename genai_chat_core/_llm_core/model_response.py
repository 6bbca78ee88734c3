"""Response types for generateContent.

Parses the service's JSON payload into frozen Pydantic models. Unknown
fields are ignored so newer API revisions keep parsing.

Usage:
    response = GenerateContentResponse.model_validate(payload)
    print(response.text)             # text of the first candidate
    for chunk in response.grounding_chunks:
        print(chunk.web.uri)         # raw (redirect) citation URL
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from .types import Role, Turn, is_valid_turn


class _ResponseModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore")


@dataclass(frozen=True, slots=True)
class Citation:
    """A grounding source attached to an answer.

    ``index`` is the 1-based position of the grounding chunk in the response.
    ``raw_url`` is the URL as returned by the service (usually a redirect link),
    ``resolved_url`` the human-meaningful source URL after resolution.
    """

    index: int
    raw_url: str
    resolved_url: str
    title: str = ""


class WebChunk(_ResponseModel):
    uri: str | None = None
    title: str | None = None


class GroundingChunk(_ResponseModel):
    web: WebChunk | None = None


class GroundingMetadata(_ResponseModel):
    grounding_chunks: tuple[GroundingChunk, ...] = ()
    web_search_queries: tuple[str, ...] = ()


class Candidate(_ResponseModel):
    """A single answer candidate."""

    content: Turn | None = None
    finish_reason: str | None = None
    index: int | None = None
    grounding_metadata: GroundingMetadata | None = None

    @field_validator("content", mode="before")
    @classmethod
    def default_model_role(cls, v: Any) -> Any:
        """Candidate content may omit its role; it is always a model turn."""
        if isinstance(v, dict) and "role" not in v:
            return {**v, "role": Role.MODEL.value}
        return v


class UsageMetadata(_ResponseModel):
    prompt_token_count: int = 0
    candidates_token_count: int = 0
    total_token_count: int = 0
    cached_content_token_count: int = 0
    thoughts_token_count: int = 0


class GenerateContentResponse(_ResponseModel):
    """Parsed generateContent response.

    ``automatic_function_calling_history`` is the side history a caller-side
    tool loop may attach: the full turn sequence (curated history, the new
    user turn and any tool round-trips) that produced this answer.
    """

    candidates: tuple[Candidate, ...] = ()
    usage_metadata: UsageMetadata | None = None
    model_version: str = ""
    response_id: str = ""
    automatic_function_calling_history: tuple[Turn, ...] | None = None

    @field_validator("candidates", mode="before")
    @classmethod
    def convert_candidates(cls, v: Any) -> Any:
        if v is None:
            return ()
        return v

    @property
    def first_content(self) -> Turn | None:
        """Content of the first candidate, if any."""
        if self.candidates:
            return self.candidates[0].content
        return None

    @property
    def text(self) -> str:
        """Joined text parts of the first candidate ("" when there is none)."""
        if content := self.first_content:
            return content.text
        return ""

    @property
    def grounding_chunks(self) -> tuple[GroundingChunk, ...]:
        """Grounding chunks of the first candidate."""
        if self.candidates and (metadata := self.candidates[0].grounding_metadata):
            return metadata.grounding_chunks
        return ()

    @property
    def is_valid(self) -> bool:
        """True when the first candidate has content that is a valid turn."""
        content = self.first_content
        return content is not None and is_valid_turn(content)
