"""Dispatcher that executes parsed tool calls and rewrites the model text."""

import json
import logging
from typing import Any, Callable, Optional

from pydantic import BaseModel

from codemate.agent.models import ChatEvent, DispatchResult, EventType
from codemate.agent.parser import ToolCallParser
from codemate.tools.models import ToolCall, ToolExecutionRecord
from codemate.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def serialize_result(result: Any) -> str:
    """Render a tool result for substitution into the response text.

    Strings pass through unchanged; anything else is pretty-printed JSON.
    """
    if isinstance(result, str):
        return result
    if isinstance(result, BaseModel):
        result = result.model_dump(mode="json")
    return json.dumps(result, indent=2, ensure_ascii=False, default=str)


def format_result_block(name: str, result: Any) -> str:
    return f'<tool-result name="{name}">\n{serialize_result(result)}\n</tool-result>'


def format_error_block(name: str, message: str) -> str:
    return f'<tool-error name="{name}">\nError: {message}\n</tool-error>'


class ToolDispatcher:
    """Runs tool calls found in model output against a registry.

    Calls run one at a time, left to right, since a later call may depend on
    the side effects of an earlier one. Each call's markup is replaced by a
    result or error block; a failing call never stops the others.

    Replacement substitutes the first remaining occurrence of the call's
    exact text. When two calls are byte-for-byte identical, each
    substitution hits the earliest unreplaced copy.
    """

    def __init__(
        self,
        registry: ToolRegistry,
        parser: Optional[ToolCallParser] = None,
        event_callback: Optional[Callable[[ChatEvent], None]] = None,
    ):
        """Initialize dispatcher.

        Args:
            registry: ToolRegistry with available tools
            parser: Parser used to find tool calls (default ToolCallParser)
            event_callback: Optional callback for tool progress events
        """
        self.registry = registry
        self.parser = parser or ToolCallParser()
        self.event_callback = event_callback

    def _emit_event(self, event: ChatEvent) -> None:
        if self.event_callback:
            try:
                self.event_callback(event)
            except Exception as e:
                logger.warning(f"Event callback error: {e}")

    async def dispatch(self, text: str) -> DispatchResult:
        """Parse and execute every tool call in ``text``.

        Args:
            text: Raw model output

        Returns:
            DispatchResult with the rewritten text and one record per call
        """
        tool_calls = self.parser.parse(text)
        if not tool_calls:
            return DispatchResult(text=text)

        logger.info(f"Model requested {len(tool_calls)} tool call(s)")
        return await self.execute_calls(text, tool_calls)

    async def execute_calls(self, text: str, tool_calls: list[ToolCall]) -> DispatchResult:
        """Execute already-parsed calls and substitute their markup in ``text``."""
        processed_text = text
        records: list[ToolExecutionRecord] = []

        for tool_call in tool_calls:
            self._emit_event(ChatEvent(
                event_type=EventType.TOOL_START,
                tool_name=tool_call.name,
                message=f"Executing tool: {tool_call.name}",
                data={"parameters": tool_call.parameters},
            ))

            outcome = await self.registry.invoke(tool_call.name, tool_call.parameters)

            if outcome.ok:
                replacement = format_result_block(tool_call.name, outcome.value)
                record = ToolExecutionRecord(
                    name=tool_call.name,
                    parameters=tool_call.parameters,
                    result=outcome.value,
                )
                self._emit_event(ChatEvent(
                    event_type=EventType.TOOL_COMPLETE,
                    tool_name=tool_call.name,
                    message=f"Tool completed: {tool_call.name}",
                ))
            else:
                message = outcome.error or "Unknown error"
                replacement = format_error_block(tool_call.name, message)
                record = ToolExecutionRecord(
                    name=tool_call.name,
                    parameters=tool_call.parameters,
                    error=message,
                )
                self._emit_event(ChatEvent(
                    event_type=EventType.TOOL_ERROR,
                    tool_name=tool_call.name,
                    message=f"Tool failed: {tool_call.name}",
                    data={"error": message, "kind": outcome.error_kind},
                ))

            processed_text = processed_text.replace(tool_call.source_span, replacement, 1)
            records.append(record)

        return DispatchResult(text=processed_text, records=records)
