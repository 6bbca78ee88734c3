"""Primitive wire types for the generateContent API.

Turns and parts mirror the service's JSON shapes. Python attributes are
snake_case, the wire uses camelCase (``inlineData``, ``mimeType``); both
spellings are accepted on input and ``to_wire()`` always emits camelCase.

All types are frozen Pydantic models for immutability and JSON serialization.
"""

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class Role(StrEnum):
    """Turn role accepted by the service."""

    USER = "user"
    MODEL = "model"


VALID_ROLES = frozenset(Role)


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize to the camelCase JSON shape, dropping unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Blob(_WireModel):
    """Inline binary payload, base64 encoded."""

    mime_type: str
    data: str


class Part(_WireModel):
    """One piece of turn content.

    Only one field is normally set. Fields the library does not model
    (``executableCode``, ``thought``, ...) are kept verbatim and sent back
    unchanged.
    """

    model_config = ConfigDict(extra="allow")

    text: str | None = None
    inline_data: Blob | None = None
    function_call: dict[str, Any] | None = None
    function_response: dict[str, Any] | None = None

    @property
    def is_empty(self) -> bool:
        """True when the part carries no field at all."""
        return not self.model_dump(exclude_none=True)


class Turn(_WireModel):
    """One role-tagged message in a conversation.

    ``role`` is kept as given; the history curator is responsible for
    rejecting roles other than "user" and "model".
    """

    role: str
    parts: tuple[Part, ...] = ()

    @field_validator("parts", mode="before")
    @classmethod
    def convert_parts_to_tuple(cls, v: Any) -> Any:
        """Coerce parts list or None to immutable tuple."""
        if v is None:
            return ()
        if isinstance(v, list):
            return tuple(v)
        return v

    @classmethod
    def user(cls, text: str) -> "Turn":
        """Build a user turn holding a single text part."""
        return cls(role=Role.USER, parts=(Part(text=text),))

    @classmethod
    def empty_model(cls) -> "Turn":
        """Placeholder model turn recorded when the service returned no content."""
        return cls(role=Role.MODEL, parts=())

    @property
    def text(self) -> str:
        """Concatenated text of all text parts."""
        return "".join(p.text for p in self.parts if p.text is not None)


def is_valid_turn(turn: Turn) -> bool:
    """A turn is valid when it has parts, none empty, and no empty text part."""
    if not turn.parts:
        return False
    for part in turn.parts:
        if part.is_empty:
            return False
        if part.text is not None and part.text == "":
            return False
    return True
