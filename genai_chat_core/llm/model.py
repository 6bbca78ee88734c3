"""Model facade: one model id bound to a client's connection settings."""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from genai_chat_core._llm_core import (
    GenerateContentResponse,
    GenerationConfig,
    GoogleSearch,
    GoogleSearchRetrieval,
    Tool,
    ToolSpec,
    generate,
    normalize_tools,
)

from ._content import Contents, normalize_contents
from .citations import CitationResolver, answer_text

if TYPE_CHECKING:
    from genai_chat_core.client import Client


def grounding_tools(grounding: bool = False, dynamic_threshold: float | None = None) -> list[Tool]:
    """Tools implied by the grounding switches.

    ``dynamic_threshold`` selects search retrieval with a dynamic threshold;
    plain ``grounding`` selects Google Search.
    """
    if dynamic_threshold is not None:
        return [GoogleSearchRetrieval(dynamic_threshold=dynamic_threshold)]
    if grounding:
        return [GoogleSearch()]
    return []


class Model:
    """Calls generateContent for a single model.

    Obtain one with ``client.model("gemini-2.0-flash")``.
    """

    def __init__(self, client: "Client", model_id: str):
        if not model_id:
            raise ValueError("model_id must be non-empty")
        self.client = client
        self.model_id = model_id

    def __repr__(self) -> str:
        return f"Model({self.model_id!r})"

    async def generate_content(
        self,
        contents: Contents,
        *,
        tools: ToolSpec | Sequence[ToolSpec] | None = None,
        generation_config: GenerationConfig | None = None,
        grounding: bool = False,
        dynamic_threshold: float | None = None,
        extra_options: Mapping[str, Any] | None = None,
    ) -> GenerateContentResponse:
        """Normalize contents, add grounding tools and call the service.

        Returns:
            The raw response; use answer_text() or generate_text() for the
            rendered answer.
        """
        tool_list = normalize_tools(tools) + grounding_tools(grounding, dynamic_threshold)
        turns = await normalize_contents(contents)
        return await generate(
            turns,
            model=self.model_id,
            tools=tool_list or None,
            generation_config=generation_config,
            extra_options=extra_options,
            api_key=self.client.api_key,
            base_url=self.client.base_url,
            timeout=self.client.timeout,
            transport=self.client.transport,
        )

    async def generate_text(
        self,
        contents: Contents,
        *,
        resolver: CitationResolver | None = None,
        **options: Any,
    ) -> str:
        """generate_content() followed by answer_text() (text + resolved citations)."""
        response = await self.generate_content(contents, **options)
        return await answer_text(response, resolver)
