"""Integration tests against the live generateContent service."""

import pytest

from genai_chat_core import Client, GenerationConfig
from genai_chat_core.settings import settings

HAS_API_KEY = bool(settings.gemini_api_key)

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(not HAS_API_KEY, reason="GEMINI_API_KEY not configured in settings or .env file"),
]

MODEL = settings.default_model


class TestLiveChat:
    """Multi-turn and grounded calls with real API requests."""

    async def test_multi_turn_remembers_context(self):
        chat = Client().chats().create(MODEL, config=GenerationConfig(temperature=0.0, max_output_tokens=100))

        await chat.send("My favourite number is 42. Reply with OK.")
        response = await chat.send("What is my favourite number? Reply with just the number.")

        assert "42" in response.text
        assert len(chat.history(curated=True)) == 4

    async def test_grounded_answer_has_resolved_sources(self):
        text = await Client().generate_text(model=MODEL, contents="Who won the most recent FIFA World Cup?", grounding=True)

        assert text
        if f"\n\n{settings.citation_header}\n" in text:
            sources = text.split(f"\n\n{settings.citation_header}\n", 1)[1].splitlines()
            assert all(line.split(". ", 1)[1].startswith("http") for line in sources if line)
