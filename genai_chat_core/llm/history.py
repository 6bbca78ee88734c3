"""History curation: which turns are safe to replay to the model.

The service can answer with an empty or malformed model turn (for example
when a response is safety-filtered). Such turns stay in the comprehensive
history for debugging, but must not be sent back as context. ``curate``
derives the replay-safe subset.

The scan is a two-state reducer over an index cursor:

    EXPECT_TURN     user turn  -> keep it, stay
                    model turn -> IN_MODEL_BLOCK
    IN_MODEL_BLOCK  consume the maximal run of model turns; one invalid turn
                    invalidates the whole run. A valid run is kept. An invalid
                    run is dropped together with the user turn that prompted it.
"""

from collections.abc import Sequence
from enum import Enum, auto

from genai_chat_core._llm_core import GenerateContentResponse, Role, Turn, is_valid_turn
from genai_chat_core._llm_core.types import VALID_ROLES
from genai_chat_core.exceptions import InvalidRoleError


class _ScanState(Enum):
    EXPECT_TURN = auto()
    IN_MODEL_BLOCK = auto()


def check_role(turn: Turn) -> None:
    """Raise InvalidRoleError unless the turn is a user or model turn."""
    if turn.role not in VALID_ROLES:
        raise InvalidRoleError(turn.role)


def _scan_model_block(turns: Sequence[Turn], start: int) -> tuple[int, bool]:
    """Return (end, valid) for the run of model turns beginning at start."""
    end = start
    valid = True
    while end < len(turns) and turns[end].role == Role.MODEL:
        if valid and not is_valid_turn(turns[end]):
            valid = False
        end += 1
    return end, valid


def curate(turns: Sequence[Turn]) -> list[Turn]:
    """Return the subset of ``turns`` that can be replayed as context.

    User turns are kept verbatim. A run of consecutive model turns is kept
    only if every turn in it is valid; otherwise the run is dropped and the
    user turn right before it is removed as well.

    Raises:
        InvalidRoleError: A turn has a role other than "user" or "model".
    """
    curated: list[Turn] = []
    state = _ScanState.EXPECT_TURN
    i = 0

    while i < len(turns):
        if state is _ScanState.EXPECT_TURN:
            check_role(turns[i])
            if turns[i].role == Role.USER:
                curated.append(turns[i])
                i += 1
            else:
                state = _ScanState.IN_MODEL_BLOCK
        else:
            end, valid = _scan_model_block(turns, i)
            if valid:
                curated.extend(turns[i:end])
            elif i > 0 and curated and curated[-1] is turns[i - 1]:
                # Only a directly preceding user turn is a dangling prompt
                curated.pop()
            i = end
            state = _ScanState.EXPECT_TURN

    return curated


def is_valid_response(response: GenerateContentResponse) -> bool:
    """A response is valid when its first candidate has valid content."""
    return response.is_valid
