"""Test helpers: turn builders, response payloads and a fake generateContent service."""

import json
from collections.abc import Sequence
from typing import Any

import httpx

from genai_chat_core import GenerateContentResponse, Part, Turn


def user_turn(text: str) -> Turn:
    return Turn(role="user", parts=(Part(text=text),))


def model_turn(text: str) -> Turn:
    return Turn(role="model", parts=(Part(text=text),))


def invalid_model_turn() -> Turn:
    """A model turn with no parts, as recorded for blocked answers."""
    return Turn(role="model", parts=())


def make_response_payload(
    text: str | None = "Test response",
    *,
    grounding_uris: Sequence[str] = (),
    afc_history: Sequence[Turn] | None = None,
    finish_reason: str = "STOP",
    empty_content: bool = False,
) -> dict[str, Any]:
    """Build a generateContent JSON payload.

    ``text=None`` produces a payload without candidates (e.g. a blocked prompt);
    ``empty_content=True`` a candidate whose content has no parts.
    """
    if text is None:
        return {"promptFeedback": {"blockReason": "SAFETY"}}

    content: dict[str, Any] = {"role": "model"} if empty_content else {"role": "model", "parts": [{"text": text}]}
    candidate: dict[str, Any] = {"content": content, "finishReason": finish_reason, "index": 0}
    if grounding_uris:
        candidate["groundingMetadata"] = {
            "groundingChunks": [{"web": {"uri": uri, "title": f"source-{i}"}} for i, uri in enumerate(grounding_uris)],
            "webSearchQueries": ["test query"],
        }
    payload: dict[str, Any] = {
        "candidates": [candidate],
        "usageMetadata": {"promptTokenCount": 10, "candidatesTokenCount": 20, "totalTokenCount": 30},
        "modelVersion": "gemini-2.0-flash",
        "responseId": "test-response-id",
    }
    if afc_history is not None:
        payload["automaticFunctionCallingHistory"] = [turn.to_wire() for turn in afc_history]
    return payload


def make_response(text: str | None = "Test response", **kwargs: Any) -> GenerateContentResponse:
    return GenerateContentResponse.model_validate(make_response_payload(text, **kwargs))


class FakeGenerateService:
    """In-memory generateContent endpoint served through httpx.MockTransport.

    Queue replies with ``reply()`` (JSON payloads) or ``fail()`` (status + body).
    When the queue is empty a default text answer is returned. Every request
    body is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.urls: list[str] = []
        self.headers: list[httpx.Headers] = []
        self._replies: list[httpx.Response] = []
        self.transport = httpx.MockTransport(self._handle)

    def reply(self, payload: dict[str, Any]) -> "FakeGenerateService":
        self._replies.append(httpx.Response(200, json=payload))
        return self

    def reply_text(self, text: str | None = "Test response", **kwargs: Any) -> "FakeGenerateService":
        return self.reply(make_response_payload(text, **kwargs))

    def fail(self, status_code: int, body: str = "error") -> "FakeGenerateService":
        self._replies.append(httpx.Response(status_code, text=body))
        return self

    def raw(self, response: httpx.Response) -> "FakeGenerateService":
        self._replies.append(response)
        return self

    @property
    def last_contents(self) -> list[dict[str, Any]]:
        return self.requests[-1]["contents"]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        self.urls.append(str(request.url))
        self.headers.append(request.headers)
        if self._replies:
            return self._replies.pop(0)
        return httpx.Response(200, json=make_response_payload())
