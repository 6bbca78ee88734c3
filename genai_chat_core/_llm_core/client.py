"""Primitive generateContent client.

This module provides the low-level generate() function. It expects contents
that are already normalized into Turns (see llm._content) and performs a
single POST; retrying is left to the caller.

For app code, use Client / Model / Chat instead.
"""

import json
import time
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from lmnr import Laminar
from pydantic import ValidationError

from genai_chat_core.exceptions import (
    APIError,
    ClientError,
    InvalidRequestError,
    MalformedResponseError,
    ServerError,
    TransportError,
)
from genai_chat_core.logging import get_logger
from genai_chat_core.settings import settings

from .model_options import GenerationConfig, Tool
from .model_response import GenerateContentResponse
from .types import Turn

logger = get_logger(__name__)

_RESERVED_BODY_KEYS = frozenset({"contents", "tools", "generationConfig"})


def api_url(endpoint: str, *, base_url: str | None = None) -> str:
    """Build the versioned endpoint URL."""
    root = (base_url or settings.gemini_base_url).rstrip("/")
    return f"{root}/{settings.gemini_api_version}/{endpoint}"


def build_request_body(
    contents: Sequence[Turn],
    *,
    tools: Sequence[Tool] | None = None,
    generation_config: GenerationConfig | None = None,
    extra_options: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble the JSON body for generateContent.

    Raises:
        InvalidRequestError: If extra_options tries to replace a body key
            this function owns.
    """
    body: dict[str, Any] = {"contents": [turn.to_wire() for turn in contents]}
    if tools:
        body["tools"] = [tool.to_wire() for tool in tools]
    if generation_config is not None:
        body["generationConfig"] = generation_config.to_wire()
    if extra_options:
        if clashing := _RESERVED_BODY_KEYS.intersection(extra_options):
            raise InvalidRequestError(f"extra_options may not override {sorted(clashing)}")
        body.update(extra_options)
    return body


def _raise_for_status(response: httpx.Response) -> None:
    status = response.status_code
    if 200 <= status < 300:
        return
    if 400 <= status < 500:
        raise ClientError(status, response.text)
    if status >= 500:
        raise ServerError(status, response.text)
    raise APIError(status, response.text)


def _parse_response(response: httpx.Response) -> GenerateContentResponse:
    try:
        payload = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"Response body is not JSON: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(payload).__name__}")
    try:
        return GenerateContentResponse.model_validate(payload)
    except ValidationError as e:
        raise MalformedResponseError(f"Unexpected response shape: {e}") from e


async def generate(
    contents: Sequence[Turn],
    *,
    model: str,
    tools: Sequence[Tool] | None = None,
    generation_config: GenerationConfig | None = None,
    extra_options: Mapping[str, Any] | None = None,
    api_key: str | None = None,
    base_url: str | None = None,
    timeout: float | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> GenerateContentResponse:
    """Call models/{model}:generateContent once.

    Args:
        contents: Turns to send, oldest first.
        model: Model identifier (e.g., "gemini-2.0-flash").
        tools: Tool declarations.
        generation_config: Sampling/output options.
        extra_options: Additional top-level body keys (safetySettings,
            systemInstruction, ...).
        api_key: Overrides settings.gemini_api_key.
        base_url: Overrides settings.gemini_base_url.
        timeout: Overrides settings.gemini_timeout.
        transport: Custom httpx transport (tests, proxies).

    Returns:
        The parsed response.

    Raises:
        ValueError: If contents is empty or model is not provided.
        ClientError: 4xx status.
        ServerError: 5xx status.
        APIError: Any other non-2xx status.
        MalformedResponseError: Body is not a valid response payload.
        TransportError: The request could not be completed.
    """
    if not contents:
        raise ValueError("contents must not be empty")
    if not model:
        raise ValueError("model must be provided")

    body = build_request_body(
        contents,
        tools=tools,
        generation_config=generation_config,
        extra_options=extra_options,
    )
    url = api_url(f"models/{model}:generateContent", base_url=base_url)
    headers = {
        "Content-Type": "application/json",
        "x-goog-api-key": api_key or settings.gemini_api_key,
    }

    with Laminar.start_as_current_span(model, span_type="LLM", input=body["contents"]):
        start_time = time.time()
        try:
            async with httpx.AsyncClient(timeout=timeout or settings.gemini_timeout, transport=transport) as client:
                http_response = await client.post(url, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"generateContent request to {model} failed: {e}")
            raise TransportError(f"Request to {model} failed: {e}") from e

        _raise_for_status(http_response)
        response = _parse_response(http_response)

        span_attrs: dict[str, Any] = {
            "time_taken": round(time.time() - start_time, 2),
            "gen_ai.request_model": model,
        }
        if usage := response.usage_metadata:
            span_attrs["gen_ai.usage.input_tokens"] = usage.prompt_token_count
            span_attrs["gen_ai.usage.output_tokens"] = usage.candidates_token_count
            span_attrs["gen_ai.usage.total_tokens"] = usage.total_token_count
        Laminar.set_span_attributes(span_attrs)  # pyright: ignore[reportArgumentType]
        Laminar.set_span_output(response.text)

    if not response.is_valid:
        finish_reason = response.candidates[0].finish_reason if response.candidates else None
        logger.debug(f"{model} returned no usable content (finish_reason={finish_reason})")

    return response
