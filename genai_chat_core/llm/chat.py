"""Stateful multi-turn chat session.

A Chat keeps two views of one conversation:

- the comprehensive history: every turn ever exchanged, including empty or
  malformed model answers;
- the curated history: the replay-safe subset sent to the service as context.

Both are seeded from an optional prior history and then grow only through
send() / record_exchange(). Exchanges are accepted or excluded incrementally,
without rescanning, and the curated view always equals
``curate(comprehensive)`` for plain user/model exchanges.

A Chat is not safe for concurrent send() calls; one conversation should be
driven by one task at a time.

Usage:
    >>> chat = client.chats().create(model="gemini-2.0-flash")
    >>> response = await chat.send("Hello!")
    >>> print(response.text)
    >>> print(await chat.send_text("And in Korean?"))
"""

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from genai_chat_core._llm_core import GenerateContentResponse, GenerationConfig, Part, Role, Turn, ToolSpec
from genai_chat_core.exceptions import InvalidMessageError
from genai_chat_core.logging import get_logger

from .citations import CitationResolver, answer_text
from .history import check_role, curate, is_valid_response

if TYPE_CHECKING:
    from .model import Model

logger = get_logger(__name__)

ChatMessage = str | Turn | Mapping[str, Any] | Sequence[Part | Mapping[str, Any]]
"""What send() accepts: text, a prebuilt Turn (or its mapping form), or a list of parts."""


def _to_part(item: Any) -> Part:
    if isinstance(item, Part):
        return item
    if isinstance(item, Mapping):
        try:
            return Part.model_validate(item)
        except ValidationError as e:
            raise InvalidMessageError(f"Invalid message part: {e}") from e
    raise InvalidMessageError(f"Message parts must be Part objects or mappings, got {type(item).__name__}")


def to_user_turn(message: ChatMessage) -> Turn:
    """Normalize a send() message into a single turn.

    - ``str`` becomes a user turn with one text part.
    - a sequence of parts becomes a user turn with those parts.
    - a ``Turn`` is passed through unchanged; a mapping is validated into one
      (role defaults to "user"). Chat.send() only accepts user turns.

    Raises:
        InvalidMessageError: Any other message shape.
    """
    if isinstance(message, str):
        return Turn.user(message)
    if isinstance(message, Turn):
        return message
    if isinstance(message, Mapping):
        try:
            return Turn.model_validate({"role": Role.USER.value, **message})
        except ValidationError as e:
            raise InvalidMessageError(f"Invalid message turn: {e}") from e
    if isinstance(message, Sequence) and not isinstance(message, (bytes, bytearray)):
        return Turn(role=Role.USER, parts=tuple(_to_part(item) for item in message))
    raise InvalidMessageError(f"Message must be a str, Turn, mapping or list of parts, got {type(message).__name__}")


class Chat:
    """One logical conversation with a model.

    Args:
        model: The Model facade used for generateContent calls.
        config: Default generation config for send().
        history: Prior turns to seed the conversation with.
        tools: Tools declared on every request of this chat.

    Raises:
        InvalidRoleError: The seed history contains a role other than user/model.
    """

    def __init__(
        self,
        model: "Model",
        *,
        config: GenerationConfig | None = None,
        history: Sequence[Turn] = (),
        tools: Sequence[ToolSpec] | None = None,
    ):
        self._model = model
        self.config = config
        self.tools = list(tools) if tools else None
        seed = list(history)
        self._curated_history: list[Turn] = curate(seed)
        self._comprehensive_history: list[Turn] = seed

    @property
    def model(self) -> str:
        """Model identifier of this chat."""
        return self._model.model_id

    def history(self, curated: bool = False) -> tuple[Turn, ...]:
        """Return the curated or comprehensive history (read-only)."""
        return tuple(self._curated_history if curated else self._comprehensive_history)

    def record_exchange(self, inputs: Sequence[Turn], outputs: Sequence[Turn], valid: bool) -> None:
        """Append one exchange to the histories.

        ``inputs`` then ``outputs`` are always appended to the comprehensive
        history. Empty ``outputs`` are recorded there as a single empty model
        turn, so every prompt is followed by exactly one recorded answer
        block. The curated history receives the exchange only when ``valid``
        and ``outputs`` is non-empty.
        """
        input_turns = list(inputs)
        output_turns = list(outputs)

        self._comprehensive_history.extend(input_turns)
        self._comprehensive_history.extend(output_turns or [Turn.empty_model()])

        if valid and output_turns:
            self._curated_history.extend(input_turns)
            self._curated_history.extend(output_turns)
        else:
            logger.debug(f"Excluded invalid exchange from curated history of {self.model} chat")

    async def send(self, message: ChatMessage, config: GenerationConfig | None = None) -> GenerateContentResponse:
        """Send a message with the curated history as context.

        Args:
            message: Text, a Turn (or its mapping form), or a list of parts.
            config: Generation config for this call; defaults to the chat's config.

        Returns:
            The raw service response.

        Raises:
            InvalidMessageError: Unsupported message shape, or a model turn.
            InvalidRoleError: The message turn has a role other than user/model.
            ClientError, ServerError, APIError, MalformedResponseError, TransportError:
                Propagated from the model call; history is left untouched.
        """
        user_turn = to_user_turn(message)
        check_role(user_turn)
        if user_turn.role != Role.USER:
            raise InvalidMessageError(f"Messages must be user turns, got role {user_turn.role!r}")

        response = await self._model.generate_content(
            [*self._curated_history, user_turn],
            tools=self.tools,
            generation_config=config or self.config,
        )

        content = response.first_content
        model_output = [content] if content is not None else [Turn.empty_model()]

        inputs = [user_turn]
        if side_history := response.automatic_function_calling_history:
            # The side history starts with what we sent; only its tail is new
            inputs = list(side_history[len(self._curated_history) :]) or [user_turn]

        self.record_exchange(inputs, model_output, valid=is_valid_response(response))
        return response

    async def send_text(
        self,
        message: ChatMessage,
        config: GenerationConfig | None = None,
        resolver: CitationResolver | None = None,
    ) -> str:
        """Send a message and return the answer text with resolved citations."""
        response = await self.send(message, config=config)
        return await answer_text(response, resolver)
