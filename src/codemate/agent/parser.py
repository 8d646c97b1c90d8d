"""Parser for extracting tool calls from model output text.

The model requests tools by embedding markup blocks in its reply::

    <tool>
    <name>read_file</name>
    <parameters>
    <param name="file_path">src/app.py</param>
    </parameters>
    </tool>

Blocks are located with a plain left-to-right scan. The first ``</tool>``
closes the nearest ``<tool>`` before it; blocks do not nest.
"""

import logging
from typing import Optional

from codemate.tools.models import ToolCall

logger = logging.getLogger(__name__)

TOOL_OPEN = "<tool>"
TOOL_CLOSE = "</tool>"
NAME_OPEN = "<name>"
NAME_CLOSE = "</name>"
PARAMETERS_OPEN = "<parameters>"
PARAMETERS_CLOSE = "</parameters>"
PARAM_OPEN = "<param"
PARAM_NAME_ATTR = 'name="'
PARAM_CLOSE = "</param>"


def _find_element(text: str, open_tag: str, close_tag: str) -> Optional[str]:
    """Return the content of the first ``open_tag ... close_tag`` pair."""
    start = text.find(open_tag)
    if start == -1:
        return None
    content_start = start + len(open_tag)
    end = text.find(close_tag, content_start)
    if end == -1:
        return None
    return text[content_start:end]


class ToolCallParser:
    """Parses tool-call markup from model responses.

    Parsing never raises: blocks that are malformed, unterminated, or miss
    their ``<name>`` or ``<parameters>`` element produce no call.
    """

    @staticmethod
    def find_blocks(text: str) -> list[tuple[int, int]]:
        """Locate every complete ``<tool>...</tool>`` block.

        Args:
            text: Raw model output

        Returns:
            List of (start, end) offsets, in document order, non-overlapping
        """
        spans: list[tuple[int, int]] = []
        if not text:
            return spans

        pos = 0
        while True:
            start = text.find(TOOL_OPEN, pos)
            if start == -1:
                break

            close = text.find(TOOL_CLOSE, start + len(TOOL_OPEN))
            if close == -1:
                # Unterminated block: nothing after it can close either
                break

            # An opener between start and close wins over the earlier one
            start = text.rfind(TOOL_OPEN, start, close)
            end = close + len(TOOL_CLOSE)
            spans.append((start, end))
            pos = end

        return spans

    @staticmethod
    def parse_parameters(block: str) -> dict[str, str]:
        """Extract ``<param name="KEY">VALUE</param>`` pairs.

        Values are kept as raw text, trimmed. A repeated key keeps its last
        value. Malformed param tags are skipped.
        """
        params: dict[str, str] = {}
        pos = 0

        while True:
            tag_start = block.find(PARAM_OPEN, pos)
            if tag_start == -1:
                break

            cursor = tag_start + len(PARAM_OPEN)
            attr_start = cursor
            while attr_start < len(block) and block[attr_start].isspace():
                attr_start += 1

            if attr_start == cursor or not block.startswith(PARAM_NAME_ATTR, attr_start):
                pos = cursor
                continue

            key_start = attr_start + len(PARAM_NAME_ATTR)
            key_end = block.find('"', key_start)
            if key_end == -1:
                break

            key = block[key_start:key_end]
            if not key or not block.startswith('">', key_end):
                pos = key_end + 1
                continue

            value_start = key_end + 2
            value_end = block.find(PARAM_CLOSE, value_start)
            if value_end == -1:
                break

            params[key] = block[value_start:value_end].strip()
            pos = value_end + len(PARAM_CLOSE)

        return params

    @staticmethod
    def parse_block(block: str) -> Optional[ToolCall]:
        """Parse one complete ``<tool>...</tool>`` block.

        Args:
            block: The block text including its outer tags

        Returns:
            ToolCall, or None when the block lacks a name or parameters
        """
        interior = block[len(TOOL_OPEN) : len(block) - len(TOOL_CLOSE)]

        name = _find_element(interior, NAME_OPEN, NAME_CLOSE)
        if name is None:
            logger.debug("Skipping tool block without <name>")
            return None

        parameters = _find_element(interior, PARAMETERS_OPEN, PARAMETERS_CLOSE)
        if parameters is None:
            logger.debug(f"Skipping tool block '{name.strip()}' without <parameters>")
            return None

        return ToolCall(
            name=name.strip(),
            parameters=ToolCallParser.parse_parameters(parameters),
            source_span=block,
        )

    @staticmethod
    def parse(text: str) -> list[ToolCall]:
        """Extract all tool calls from model output.

        Args:
            text: Raw model output

        Returns:
            Tool calls in the order their blocks appear in the text
        """
        tool_calls: list[ToolCall] = []

        for start, end in ToolCallParser.find_blocks(text):
            block = text[start:end]
            try:
                tool_call = ToolCallParser.parse_block(block)
            except Exception as e:
                logger.error(f"Error parsing tool call: {e}", exc_info=True)
                continue

            if tool_call is not None:
                tool_calls.append(tool_call)

        return tool_calls

    @staticmethod
    def has_tool_calls(text: str) -> bool:
        """Check if text contains at least one parsable tool call."""
        return bool(ToolCallParser.parse(text))
