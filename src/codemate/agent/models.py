"""Data models for chat turns and tool dispatch."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from codemate.tools.models import ToolExecutionRecord


class ChatState(str, Enum):
    """Orchestrator state within one request/response cycle."""

    IDLE = "idle"
    COMPOSING = "composing"  # Building system instructions and prompt
    AWAITING_MODEL = "awaiting_model"  # Backend call in flight
    DISPATCHING = "dispatching"  # Parsing and executing tool calls
    UPDATING = "updating"  # Committing processed text to history
    ERRORED = "errored"  # Turn failed, returning to idle


class EventType(str, Enum):
    """Chat events for progress reporting."""

    TURN_START = "turn_start"
    MODEL_RESPONSE = "model_response"
    TOOL_START = "tool_start"
    TOOL_COMPLETE = "tool_complete"
    TOOL_ERROR = "tool_error"
    TURN_COMPLETE = "turn_complete"
    TURN_ERROR = "turn_error"


class ChatEvent(BaseModel):
    """Event emitted while a turn is processed."""

    event_type: EventType = Field(description="Type of event")

    message: Optional[str] = Field(
        default=None,
        description="Human-readable message describing the event",
    )

    tool_name: Optional[str] = Field(
        default=None,
        description="Tool name (for tool events)",
    )

    data: Optional[dict[str, Any]] = Field(
        default=None,
        description="Additional event data (tool parameters, results, etc.)",
    )

    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat())

    class Config:
        """Pydantic config."""

        use_enum_values = True


@dataclass
class DispatchResult:
    """Processed text plus one record per parsed tool call."""

    text: str
    records: list[ToolExecutionRecord] = field(default_factory=list)

    @property
    def tool_results(self) -> list[dict[str, Any]]:
        return [record.to_dict() for record in self.records]


@dataclass
class ChatResponse:
    """Result of one user message."""

    text: str = ""
    original_text: str = ""
    tool_results: list[dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        if self.error is not None:
            return {"error": self.error}
        return {
            "text": self.text,
            "originalText": self.original_text,
            "toolResults": self.tool_results,
        }
