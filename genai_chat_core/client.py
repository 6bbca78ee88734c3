"""Client entry point."""

from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from genai_chat_core._llm_core import GenerateContentResponse, GenerationConfig, ToolSpec
from genai_chat_core.exceptions import ConfigError
from genai_chat_core.llm._content import Contents
from genai_chat_core.llm.citations import CitationResolver
from genai_chat_core.llm.model import Model
from genai_chat_core.llm.registry import ChatRegistry
from genai_chat_core.settings import settings
from genai_chat_core.tracing import initialize_tracing


class Client:
    """Connection settings shared by models and chats.

    @public

    Args:
        api_key: Service API key; falls back to GEMINI_API_KEY.
        base_url: Service root; falls back to GEMINI_BASE_URL.
        timeout: Request timeout in seconds; falls back to GEMINI_TIMEOUT.
        transport: Custom httpx transport for generateContent calls.

    Raises:
        ConfigError: No API key was given or configured.

    Example:
        >>> client = Client(api_key="...")
        >>> text = await client.generate_text(model="gemini-2.0-flash", contents="Hi", grounding=True)
        >>> chats = client.chats()
        >>> chat = chats.get_or_create("user-1")
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key or settings.gemini_api_key
        if not self.api_key:
            raise ConfigError("API key is required. Set GEMINI_API_KEY environment variable or pass api_key parameter.")
        self.base_url = base_url or settings.gemini_base_url
        self.timeout = timeout or settings.gemini_timeout
        self.transport = transport
        initialize_tracing()

    def model(self, model_id: str) -> Model:
        return Model(self, model_id)

    def chats(self) -> ChatRegistry:
        """Create a new, empty chat registry bound to this client."""
        return ChatRegistry(self)

    async def generate_content(
        self,
        *,
        model: str,
        contents: Contents,
        tools: ToolSpec | Sequence[ToolSpec] | None = None,
        generation_config: GenerationConfig | None = None,
        grounding: bool = False,
        dynamic_threshold: float | None = None,
        extra_options: Mapping[str, Any] | None = None,
    ) -> GenerateContentResponse:
        return await self.model(model).generate_content(
            contents,
            tools=tools,
            generation_config=generation_config,
            grounding=grounding,
            dynamic_threshold=dynamic_threshold,
            extra_options=extra_options,
        )

    async def generate_text(
        self,
        *,
        model: str,
        contents: Contents,
        resolver: CitationResolver | None = None,
        **options: Any,
    ) -> str:
        return await self.model(model).generate_text(contents, resolver=resolver, **options)
