"""Data models for the tool system."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

TRUE_WORDS = frozenset({"true", "yes", "1", "on"})
FALSE_WORDS = frozenset({"false", "no", "0", "off"})


def parse_bool(value: str) -> Optional[bool]:
    """Read a boolean parameter value, or None if it is not a boolean word."""
    word = value.strip().lower()
    if word in TRUE_WORDS:
        return True
    if word in FALSE_WORDS:
        return False
    return None


class ToolParameter(BaseModel):
    """Typed descriptor for one tool parameter."""

    name: str
    type: str = "string"  # "string", "integer", "number", "boolean", "array", "object"
    description: str = ""
    required: bool = True

    def to_catalog_entry(self) -> dict[str, str]:
        """Schema entry as shown to the model."""
        return {"type": self.type, "description": self.description}


class ToolCall(BaseModel):
    """A tool invocation extracted from model output."""

    name: str
    parameters: dict[str, str] = Field(default_factory=dict)
    source_span: str  # Exact substring of the raw text that produced this call

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name}({', '.join(f'{k}={v}' for k, v in self.parameters.items())})"


class ErrorKind(str, Enum):
    """Failure classification for a tool invocation."""

    NOT_FOUND = "not_found"
    MISSING_PARAMETER = "missing_parameter"
    INVALID_PARAMETER = "invalid_parameter"
    EXECUTION = "execution"


class ToolOutcome(BaseModel):
    """Tagged result of ``ToolRegistry.invoke``: either a value or an error."""

    ok: bool
    value: Any = None
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, value: Any) -> "ToolOutcome":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "ToolOutcome":
        return cls(ok=False, error_kind=kind, error=message)

    @property
    def is_error(self) -> bool:
        return not self.ok

    def unwrap(self) -> Any:
        """Return the value, or raise the exception matching the error kind."""
        if self.ok:
            return self.value

        from codemate.tools.base import error_for_kind

        raise error_for_kind(self.error_kind or ErrorKind.EXECUTION, self.error or "")

    def __str__(self) -> str:
        """String representation."""
        if self.is_error:
            return f"Error: {self.error}"
        text = str(self.value)
        return text[:200] + ("..." if len(text) > 200 else "")


class ToolExecutionRecord(BaseModel):
    """One executed tool call, successful or not."""

    name: str
    parameters: dict[str, Any] = Field(default_factory=dict)
    result: Any = None
    error: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Plain dict with either ``result`` or ``error`` set."""
        data: dict[str, Any] = {"name": self.name, "parameters": self.parameters}
        if self.is_error:
            data["error"] = self.error
        else:
            data["result"] = self.result
        return data
