"""Vulture whitelist — methods called by frameworks, not direct code."""

# Pydantic validators — called by Pydantic, not our code
from genai_chat_core._llm_core.model_response import Candidate, GenerateContentResponse
from genai_chat_core._llm_core.types import Turn

Turn.convert_parts_to_tuple
Candidate.default_model_role
GenerateContentResponse.convert_candidates

# Pydantic discriminator fields on tool variants
from genai_chat_core._llm_core.model_options import GoogleSearch, GoogleSearchRetrieval, OpaqueTool, UrlContext

GoogleSearch.kind
GoogleSearchRetrieval.kind
UrlContext.kind
OpaqueTool.kind

# Add more as vulture reports false positives
