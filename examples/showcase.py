#!/usr/bin/env python3
"""Showcase of genai_chat_core features.

This example walks through the public API:
  • Settings configuration with environment variables and .env files
  • Logging setup (setup_logging, get_logger)
  • One-shot generation with Google Search grounding and resolved citations
  • Multi-turn chats kept per session key in a ChatRegistry
  • Curated vs. comprehensive history after a blocked answer

Prerequisites:
  - GEMINI_API_KEY configured (can be set in .env)
  - Optional: LMNR_PROJECT_API_KEY for tracing

Usage:
  python examples/showcase.py "What changed in Python 3.13?"
  python examples/showcase.py "Latest Mars rover news" --grounding --model gemini-2.5-flash
  python examples/showcase.py "Hello" --session alice --turns 3

Tip: Set GENAI_LOG_LEVEL=DEBUG and DEBUG=true to see citation resolution details
"""

import argparse
import asyncio

from genai_chat_core import Client, GenerationConfig, get_logger, settings, setup_logging

logger = get_logger(__name__)


async def one_shot(client: Client, model: str, prompt: str, grounding: bool) -> None:
    """Single request; grounded answers get numbered source URLs appended."""
    text = await client.generate_text(model=model, contents=prompt, grounding=grounding)
    print(text)


async def conversation(client: Client, model: str, prompt: str, session: str, turns: int) -> None:
    """Multi-turn chat that keeps context between sends."""
    chats = client.chats()
    chat = chats.get_or_create(session, model=model, config=GenerationConfig(temperature=0.3, max_output_tokens=512))

    message = prompt
    for turn in range(turns):
        answer = await chat.send_text(message)
        print(f"[{session} #{turn + 1}] {answer}\n")
        message = "Summarize your previous answer in one sentence."

    logger.info(
        f"Session {session!r}: {len(chat.history())} turns recorded, "
        f"{len(chat.history(curated=True))} replayed as context"
    )
    chats.clear(session)


def main():
    parser = argparse.ArgumentParser(description="genai_chat_core showcase")
    parser.add_argument("prompt", help="Prompt to send")
    parser.add_argument("--model", default=settings.default_model, help="Model identifier")
    parser.add_argument("--grounding", action="store_true", help="Ground the answer with Google Search")
    parser.add_argument("--session", help="Run a multi-turn chat under this session key")
    parser.add_argument("--turns", type=int, default=2, help="Number of turns in chat mode")
    args = parser.parse_args()

    setup_logging(level="INFO")
    client = Client()

    if args.session:
        asyncio.run(conversation(client, args.model, args.prompt, args.session, args.turns))
    else:
        asyncio.run(one_shot(client, args.model, args.prompt, args.grounding))


if __name__ == "__main__":
    main()
