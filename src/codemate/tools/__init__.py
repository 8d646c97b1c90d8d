"""Tool system for codemate.

Tools are named, schema-described functions the model may ask to run by
embedding tool-call markup in its reply. This package provides:
- Typed parameter descriptors and call/outcome models
- The error taxonomy for dispatch failures
- The registry that stores tools and invokes them
"""

from codemate.tools.base import (
    InvalidParameterError,
    MissingParameterError,
    Tool,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
)
from codemate.tools.models import (
    ErrorKind,
    ToolCall,
    ToolExecutionRecord,
    ToolOutcome,
    ToolParameter,
    parse_bool,
)
from codemate.tools.registry import ToolDefinition, ToolFunction, ToolRegistry

__all__ = [
    "ErrorKind",
    "InvalidParameterError",
    "MissingParameterError",
    "Tool",
    "ToolCall",
    "ToolDefinition",
    "ToolError",
    "ToolExecutionError",
    "ToolExecutionRecord",
    "ToolFunction",
    "ToolNotFoundError",
    "ToolOutcome",
    "ToolParameter",
    "ToolRegistry",
    "parse_bool",
]
