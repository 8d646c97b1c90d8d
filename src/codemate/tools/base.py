"""Base classes and errors for tool implementation."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from codemate.tools.models import ErrorKind, ToolParameter


class ToolError(Exception):
    """Base exception for tool dispatch failures."""

    kind: ErrorKind = ErrorKind.EXECUTION


class ToolNotFoundError(ToolError):
    """Raised when a tool name is not registered."""

    kind = ErrorKind.NOT_FOUND

    @classmethod
    def for_tool(cls, name: str) -> "ToolNotFoundError":
        return cls(f"Tool '{name}' not found")


class MissingParameterError(ToolError):
    """Raised when one or more required parameters are absent."""

    kind = ErrorKind.MISSING_PARAMETER

    def __init__(self, message: str, missing: Optional[list[str]] = None):
        super().__init__(message)
        self.missing = missing or []

    @classmethod
    def for_tool(cls, tool_name: str, missing: list[str]) -> "MissingParameterError":
        names = ", ".join(f"'{name}'" for name in missing)
        noun = "parameter" if len(missing) == 1 else "parameters"
        return cls(f"Missing required {noun} {names} for tool '{tool_name}'", missing)


class InvalidParameterError(ToolError):
    """Raised when a parameter value cannot be read as its declared type."""

    kind = ErrorKind.INVALID_PARAMETER


class ToolExecutionError(ToolError):
    """Raised when the tool function itself fails."""

    kind = ErrorKind.EXECUTION


_ERRORS_BY_KIND: dict[ErrorKind, type[ToolError]] = {
    ErrorKind.NOT_FOUND: ToolNotFoundError,
    ErrorKind.MISSING_PARAMETER: MissingParameterError,
    ErrorKind.INVALID_PARAMETER: InvalidParameterError,
    ErrorKind.EXECUTION: ToolExecutionError,
}


def error_for_kind(kind: ErrorKind, message: str) -> ToolError:
    """Build the exception that corresponds to an outcome's error kind."""
    return _ERRORS_BY_KIND.get(kind, ToolExecutionError)(message)


class Tool(ABC):
    """Base class for class-based tools.

    A tool declares a name, a description for the model, its parameters and
    an async ``execute`` that receives the parsed parameter mapping. Use
    ``ToolRegistry.register_tool`` to register an instance.
    """

    def __init__(self):
        """Initialize the tool."""
        self._validate_definition()

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name (must be unique)."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what the tool does (for the model)."""
        pass

    @property
    def parameters(self) -> list[ToolParameter]:
        """List of tool parameters."""
        return []

    @abstractmethod
    async def execute(self, params: dict[str, str]) -> Any:
        """Execute the tool.

        Args:
            params: Parameter values as parsed from the model output

        Returns:
            A string, or any JSON-serializable structure

        Raises:
            ToolExecutionError: If execution fails
        """
        pass

    def _validate_definition(self) -> None:
        """Validate the tool definition.

        Raises:
            ValueError: If tool definition is invalid
        """
        if not self.name:
            raise ValueError("Tool name cannot be empty")

        param_names = [p.name for p in self.parameters]
        if len(param_names) != len(set(param_names)):
            raise ValueError("Parameter names must be unique")

    def __str__(self) -> str:
        """String representation."""
        return f"Tool({self.name})"

    def __repr__(self) -> str:
        """Representation."""
        return f"<Tool name={self.name}>"
