"""
Conversation memory for codemate.

Provides the capped turn history that feeds the model's context window.
"""

from codemate.memory.conversation import DEFAULT_MAX_TURNS, ConversationState
from codemate.memory.models import ConversationTurn, TurnRole

__all__ = [
    "DEFAULT_MAX_TURNS",
    "ConversationState",
    "ConversationTurn",
    "TurnRole",
]
