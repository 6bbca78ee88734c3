"""Per-key chat sessions.

ChatRegistry maps an external key (user id, channel id, ...) to a Chat. It is
an ordinary object: construct one per key space and keep it alive for as long
as sessions should persist. Registries never share state with each other.
"""

import threading
from collections.abc import Sequence
from typing import TYPE_CHECKING

from genai_chat_core._llm_core import DEFAULT_CHAT_CONFIG, GenerationConfig, ToolSpec, Turn
from genai_chat_core.logging import get_logger
from genai_chat_core.settings import settings

from .chat import Chat

if TYPE_CHECKING:
    from genai_chat_core.client import Client

logger = get_logger(__name__)


class ChatRegistry:
    """Creates chats and keeps one chat per session key.

    The key map is guarded by a lock so sessions can be created and cleared
    from several threads. Individual chats are not locked; see Chat.

    Example:
        >>> registry = ChatRegistry(client)
        >>> chat = registry.get_or_create("user-42")
        >>> await chat.send("Hi")
        >>> registry.get_or_create("user-42") is chat
        True
    """

    def __init__(self, client: "Client"):
        self._client = client
        self._sessions: dict[str, Chat] = {}
        self._lock = threading.Lock()

    def create(
        self,
        model: str,
        config: GenerationConfig | None = None,
        history: Sequence[Turn] = (),
        tools: Sequence[ToolSpec] | None = None,
    ) -> Chat:
        """Create a chat that is not tracked by the registry."""
        return Chat(self._client.model(model), config=config, history=history, tools=tools)

    def get_or_create(self, key: str, model: str | None = None, config: GenerationConfig | None = None) -> Chat:
        """Return the chat for ``key``, creating it on first access.

        On a hit the existing chat is returned unchanged; ``model`` and
        ``config`` only apply when the chat is created.
        """
        with self._lock:
            if (chat := self._sessions.get(key)) is None:
                chat = self.create(model or settings.default_model, config=config or DEFAULT_CHAT_CONFIG)
                self._sessions[key] = chat
                logger.debug(f"Created chat session {key!r} ({chat.model})")
            return chat

    def clear(self, key: str) -> Chat | None:
        """Drop the chat for ``key``; returns it, or None if there was none."""
        with self._lock:
            return self._sessions.pop(key, None)

    def clear_all(self) -> None:
        with self._lock:
            self._sessions.clear()

    def count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def active_keys(self) -> list[str]:
        with self._lock:
            return list(self._sessions)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._sessions
