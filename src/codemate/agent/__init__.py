"""Chat agent for codemate.

Composes prompts from history and editor context, calls the model backend,
and runs any tool calls the model embeds in its reply.
"""

from codemate.agent.dispatcher import (
    ToolDispatcher,
    format_error_block,
    format_result_block,
    serialize_result,
)
from codemate.agent.models import ChatEvent, ChatResponse, ChatState, DispatchResult, EventType
from codemate.agent.orchestrator import ChatOrchestrator
from codemate.agent.parser import ToolCallParser
from codemate.agent.prompts import (
    DEFAULT_SYSTEM_PROMPT,
    build_prompt,
    build_system_instructions,
    serialize_catalog,
)

__all__ = [
    "DEFAULT_SYSTEM_PROMPT",
    "ChatEvent",
    "ChatOrchestrator",
    "ChatResponse",
    "ChatState",
    "DispatchResult",
    "EventType",
    "ToolCallParser",
    "ToolDispatcher",
    "build_prompt",
    "build_system_instructions",
    "format_error_block",
    "format_result_block",
    "serialize_catalog",
    "serialize_result",
]
