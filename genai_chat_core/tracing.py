"""Laminar (``lmnr``) tracing setup.

Every generateContent call runs inside a Laminar LLM span (see
``_llm_core.client``). Spans are only exported once Laminar has been
initialized, which ``initialize_tracing`` does when ``LMNR_PROJECT_API_KEY``
is configured.
"""

from lmnr import Laminar

from genai_chat_core.logging import get_logger
from genai_chat_core.settings import settings

logger = get_logger(__name__)

_initialized = False


def initialize_tracing() -> bool:
    """Initialize the Laminar SDK with the project key from settings.

    Called once per process; later calls are no-ops. Returns True when
    tracing is active.
    """
    global _initialized

    if _initialized:
        return True
    if not settings.lmnr_project_api_key:
        logger.debug("LMNR_PROJECT_API_KEY not set, spans are not exported")
        return False

    Laminar.initialize(project_api_key=settings.lmnr_project_api_key, export_timeout_seconds=15)
    _initialized = True
    logger.info("Laminar initialized")
    return True
