"""
Conversation state for codemate.

Keeps the bounded turn history that is sent to the model as context.
"""

import logging
from typing import Any

from codemate.memory.models import ConversationTurn, TurnRole

logger = logging.getLogger(__name__)

DEFAULT_MAX_TURNS = 10  # Five user/model pairs


class ConversationState:
    """Ordered, capped history of conversation turns.

    Appending beyond the cap drops the oldest turns first. Alternation of
    user and model turns is expected but not enforced.
    """

    def __init__(self, max_turns: int = DEFAULT_MAX_TURNS):
        """Initialize the conversation state.

        Args:
            max_turns: Maximum number of turns kept.
        """
        if max_turns < 1:
            raise ValueError("max_turns must be at least 1")
        self.max_turns = max_turns
        self._turns: list[ConversationTurn] = []

    def append(self, role: TurnRole | str, text: str) -> ConversationTurn:
        """Add a turn, dropping the oldest turns beyond the cap.

        Args:
            role: "user" or "model".
            text: Turn text.

        Returns:
            The created turn.
        """
        turn = ConversationTurn(role=TurnRole(role), text=text)
        self._turns.append(turn)

        overflow = len(self._turns) - self.max_turns
        if overflow > 0:
            del self._turns[:overflow]
            logger.debug(f"Dropped {overflow} oldest turn(s) from history")

        return turn

    def add_user_message(self, text: str) -> ConversationTurn:
        return self.append(TurnRole.USER, text)

    def add_model_message(self, text: str) -> ConversationTurn:
        return self.append(TurnRole.MODEL, text)

    def current(self) -> list[ConversationTurn]:
        """Snapshot of the most recent turns, oldest first."""
        return list(self._turns[-self.max_turns :])

    def to_messages(self) -> list[dict[str, Any]]:
        """Snapshot rendered as chat-completion message dicts."""
        return [turn.to_message_dict() for turn in self.current()]

    def clear(self) -> None:
        """Remove all turns."""
        self._turns.clear()
        logger.info("Cleared conversation history")

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self):
        return iter(self.current())

    def __repr__(self) -> str:
        return f"<ConversationState turns={len(self._turns)} max={self.max_turns}>"
