"""
Memory models for codemate.

Defines the conversation turn stored in chat history.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TurnRole(str, Enum):
    """Role in a conversation turn."""

    USER = "user"
    MODEL = "model"


class ConversationTurn(BaseModel):
    """A single turn in a conversation."""

    role: TurnRole
    text: str
    timestamp: datetime = Field(default_factory=datetime.now)

    class Config:
        """Pydantic configuration."""

        use_enum_values = True

    def to_message_dict(self) -> dict[str, Any]:
        """Convert to a chat-completion message dict."""
        role = "assistant" if self.role == TurnRole.MODEL.value else self.role
        return {"role": role, "content": self.text}
