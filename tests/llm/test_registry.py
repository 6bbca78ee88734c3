"""Tests for ChatRegistry."""

from concurrent.futures import ThreadPoolExecutor

from genai_chat_core import Chat, ChatRegistry, Client, GenerationConfig, settings
from genai_chat_core._llm_core import DEFAULT_CHAT_CONFIG
from tests.support.helpers import FakeGenerateService, model_turn, user_turn


class TestGetOrCreate:
    """Test session lookup and creation."""

    def test_creates_on_first_access(self, client: Client):
        registry = client.chats()
        chat = registry.get_or_create("user-1")
        assert isinstance(chat, Chat)
        assert registry.count() == 1
        assert "user-1" in registry

    def test_same_key_returns_same_chat(self, client: Client):
        registry = client.chats()
        assert registry.get_or_create("user-1") is registry.get_or_create("user-1")

    def test_defaults(self, client: Client):
        chat = client.chats().get_or_create("user-1")
        assert chat.model == settings.default_model
        assert chat.config == DEFAULT_CHAT_CONFIG

    def test_explicit_model_and_config(self, client: Client):
        config = GenerationConfig(temperature=0.1)
        chat = client.chats().get_or_create("user-1", model="gemini-2.5-pro", config=config)
        assert chat.model == "gemini-2.5-pro"
        assert chat.config is config

    def test_model_and_config_ignored_on_hit(self, client: Client):
        registry = client.chats()
        first = registry.get_or_create("user-1", model="gemini-2.0-flash")
        second = registry.get_or_create("user-1", model="gemini-2.5-pro", config=GenerationConfig(temperature=0.0))
        assert second is first
        assert second.model == "gemini-2.0-flash"
        assert second.config == DEFAULT_CHAT_CONFIG

    async def test_keys_are_isolated(self, client: Client, service: FakeGenerateService):
        registry = client.chats()
        service.reply_text("for alice")

        await registry.get_or_create("alice").send("hi from alice")
        bob = registry.get_or_create("bob")

        assert bob.history() == ()
        assert registry.get_or_create("alice").history() == (user_turn("hi from alice"), model_turn("for alice"))

    def test_registries_do_not_share_sessions(self, client: Client):
        first, second = client.chats(), client.chats()
        first.get_or_create("user-1")
        assert "user-1" not in second
        assert len(second) == 0

    def test_concurrent_creation_yields_one_chat(self, client: Client):
        registry = client.chats()
        with ThreadPoolExecutor(max_workers=8) as pool:
            chats = list(pool.map(lambda _: registry.get_or_create("shared"), range(32)))
        assert all(chat is chats[0] for chat in chats)
        assert registry.count() == 1


class TestClear:
    """Test removing sessions."""

    def test_clear_returns_removed_chat(self, client: Client):
        registry = client.chats()
        chat = registry.get_or_create("user-1")
        assert registry.clear("user-1") is chat
        assert "user-1" not in registry

    def test_clear_unknown_key(self, client: Client):
        assert client.chats().clear("missing") is None

    def test_get_after_clear_creates_fresh_chat(self, client: Client):
        registry = client.chats()
        old = registry.get_or_create("user-1")
        old.record_exchange([user_turn("q")], [model_turn("a")], valid=True)
        registry.clear("user-1")

        fresh = registry.get_or_create("user-1")
        assert fresh is not old
        assert fresh.history() == ()

    def test_clear_all(self, client: Client):
        registry = client.chats()
        for key in ("a", "b", "c"):
            registry.get_or_create(key)
        registry.clear_all()
        assert registry.count() == 0
        assert registry.active_keys() == []

    def test_active_keys_in_creation_order(self, client: Client):
        registry = client.chats()
        for key in ("b", "a", "c"):
            registry.get_or_create(key)
        registry.clear("a")
        assert registry.active_keys() == ["b", "c"]
        assert len(registry) == 2


class TestCreate:
    """Test untracked chat creation."""

    def test_create_is_not_tracked(self, client: Client):
        registry = ChatRegistry(client)
        chat = registry.create("gemini-2.0-flash", history=[user_turn("a"), model_turn("b")])
        assert registry.count() == 0
        assert chat.history(curated=True) == (user_turn("a"), model_turn("b"))
        assert chat.config is None
