"""Common test fixtures."""

from unittest.mock import MagicMock, patch

import pytest

from genai_chat_core import Client
from tests.support.helpers import FakeGenerateService


@pytest.fixture(autouse=True)
def mock_laminar():
    """Replace Laminar in the model-call layer so tests never emit spans."""
    with (
        patch("genai_chat_core._llm_core.client.Laminar") as laminar,
        patch("genai_chat_core.tracing.Laminar"),
    ):
        laminar.start_as_current_span.return_value = MagicMock()
        yield laminar


@pytest.fixture
def service() -> FakeGenerateService:
    return FakeGenerateService()


@pytest.fixture
def client(service: FakeGenerateService) -> Client:
    return Client(api_key="test-key", base_url="https://generativelanguage.test", transport=service.transport)
