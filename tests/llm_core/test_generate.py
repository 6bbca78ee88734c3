"""Tests for the primitive generate() call."""

from unittest.mock import MagicMock

import httpx
import pytest

from genai_chat_core import (
    APIError,
    ClientError,
    GenerationConfig,
    GoogleSearch,
    InvalidRequestError,
    MalformedResponseError,
    ServerError,
    TransportError,
    Turn,
)
from genai_chat_core._llm_core import build_request_body, generate
from genai_chat_core._llm_core.client import api_url
from tests.support.helpers import FakeGenerateService, make_response_payload


def _call(service: FakeGenerateService, **kwargs):
    kwargs.setdefault("model", "gemini-2.0-flash")
    kwargs.setdefault("api_key", "test-key")
    kwargs.setdefault("base_url", "https://generativelanguage.test")
    return generate([Turn.user("hi")], transport=service.transport, **kwargs)


class TestBuildRequestBody:
    def test_contents_only(self):
        assert build_request_body([Turn.user("hi")]) == {"contents": [{"role": "user", "parts": [{"text": "hi"}]}]}

    def test_all_sections(self):
        body = build_request_body(
            [Turn.user("hi")],
            tools=[GoogleSearch()],
            generation_config=GenerationConfig(top_p=0.9, stop_sequences=("END",)),
            extra_options={"systemInstruction": {"parts": [{"text": "be brief"}]}},
        )
        assert body["tools"] == [{"google_search": {}}]
        assert body["generationConfig"] == {"topP": 0.9, "stopSequences": ["END"]}
        assert body["systemInstruction"] == {"parts": [{"text": "be brief"}]}

    @pytest.mark.parametrize("key", ["contents", "tools", "generationConfig"])
    def test_reserved_keys_rejected(self, key: str):
        with pytest.raises(InvalidRequestError, match=key):
            build_request_body([Turn.user("hi")], extra_options={key: {}})


class TestApiUrl:
    def test_trailing_slash_stripped(self):
        assert api_url("models/m:generateContent", base_url="https://host.test/") == (
            "https://host.test/v1beta/models/m:generateContent"
        )


class TestGenerate:
    """Test generate() status handling and parsing."""

    async def test_parses_response(self, service: FakeGenerateService):
        service.reply_text("Hello!")
        response = await _call(service)
        assert response.text == "Hello!"
        assert response.usage_metadata is not None
        assert response.usage_metadata.total_token_count == 30

    async def test_request_shape(self, service: FakeGenerateService):
        await _call(service, model="gemini-2.5-pro")
        assert service.urls[-1] == "https://generativelanguage.test/v1beta/models/gemini-2.5-pro:generateContent"
        assert service.headers[-1]["x-goog-api-key"] == "test-key"
        assert service.headers[-1]["content-type"] == "application/json"

    async def test_empty_contents(self, service: FakeGenerateService):
        with pytest.raises(ValueError, match="contents"):
            await generate([], model="m", transport=service.transport)

    async def test_missing_model(self, service: FakeGenerateService):
        with pytest.raises(ValueError, match="model"):
            await generate([Turn.user("hi")], model="", transport=service.transport)

    @pytest.mark.parametrize(
        ("status", "error", "label"),
        [(400, ClientError, "Client"), (404, ClientError, "Client"), (500, ServerError, "Server")],
    )
    async def test_error_statuses(self, service: FakeGenerateService, status: int, error: type[APIError], label: str):
        service.fail(status, '{"error": "bad"}')
        with pytest.raises(error) as exc_info:
            await _call(service)
        assert exc_info.value.status_code == status
        assert exc_info.value.body == '{"error": "bad"}'
        assert str(exc_info.value) == f'{label} error: {status} - {{"error": "bad"}}'

    async def test_unexpected_status(self, service: FakeGenerateService):
        service.raw(httpx.Response(304))
        with pytest.raises(APIError) as exc_info:
            await _call(service)
        assert type(exc_info.value) is APIError
        assert exc_info.value.status_code == 304

    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>oops</html>"),
            httpx.Response(200, json=["not", "an", "object"]),
            httpx.Response(200, json={"candidates": "nope"}),
        ],
        ids=["not-json", "not-object", "bad-shape"],
    )
    async def test_malformed_bodies(self, service: FakeGenerateService, response: httpx.Response):
        service.raw(response)
        with pytest.raises(MalformedResponseError):
            await _call(service)

    async def test_transport_error(self):
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(TransportError):
            await generate([Turn.user("hi")], model="m", api_key="k", transport=httpx.MockTransport(refuse))

    async def test_unknown_response_fields_ignored(self, service: FakeGenerateService):
        payload = make_response_payload("ok")
        payload["somethingNew"] = {"x": 1}
        payload["candidates"][0]["safetyRatings"] = []
        service.reply(payload)
        assert (await _call(service)).text == "ok"


class TestTracing:
    """Test Laminar span reporting."""

    async def test_span_opened_per_call(self, service: FakeGenerateService, mock_laminar: MagicMock):
        await _call(service)
        mock_laminar.start_as_current_span.assert_called_once()
        args, kwargs = mock_laminar.start_as_current_span.call_args
        assert args[0] == "gemini-2.0-flash"
        assert kwargs["span_type"] == "LLM"

    async def test_usage_reported(self, service: FakeGenerateService, mock_laminar: MagicMock):
        service.reply_text("answer")
        await _call(service)

        attrs = mock_laminar.set_span_attributes.call_args[0][0]
        assert attrs["gen_ai.request_model"] == "gemini-2.0-flash"
        assert attrs["gen_ai.usage.input_tokens"] == 10
        assert attrs["gen_ai.usage.output_tokens"] == 20
        assert attrs["gen_ai.usage.total_tokens"] == 30
        mock_laminar.set_span_output.assert_called_once_with("answer")
