"""System instructions and prompt composition for chat turns."""

import json
from typing import Any, Optional

from codemate.context.models import ContextBundle

DEFAULT_SYSTEM_PROMPT = (
    "You are codemate, a coding assistant embedded in the user's editor. "
    "You help the user understand, write, debug and refactor code in their "
    "workspace. Answer concisely, show code in fenced blocks, and say so "
    "when you are unsure instead of guessing."
)

TOOL_PROTOCOL_TEMPLATE = """\
You can use tools to act on the user's workspace. To call a tool, write a
block in exactly this format anywhere in your reply:

<tool>
<name>TOOL_NAME</name>
<parameters>
<param name="PARAM_NAME">PARAM_VALUE</param>
</parameters>
</tool>

Always include the <parameters> element, even when the tool takes no
parameters. Parameter values are plain text. Each call is replaced by a
<tool-result name="TOOL_NAME"> block with the tool's output, or by a
<tool-error name="TOOL_NAME"> block if the call failed. Tools run in the
order they appear in your reply.

Available tools (JSON):
{catalog}"""


def serialize_catalog(catalog: list[dict[str, Any]]) -> str:
    """Tool catalog as the JSON array injected into the system prompt."""
    return json.dumps(catalog, indent=2, ensure_ascii=False)


def build_system_instructions(
    catalog: Optional[list[dict[str, Any]]] = None,
    system_prompt: Optional[str] = None,
) -> str:
    """Compose system instructions.

    Args:
        catalog: Tool catalog; the tool protocol section is added only when
            the catalog is non-empty
        system_prompt: Override for the default system prompt

    Returns:
        System instruction text
    """
    parts = [system_prompt or DEFAULT_SYSTEM_PROMPT]
    if catalog:
        parts.append(TOOL_PROTOCOL_TEMPLATE.format(catalog=serialize_catalog(catalog)))
    return "\n\n".join(parts)


def build_prompt(text: str, context: Optional[ContextBundle] = None) -> str:
    """Compose the user prompt: serialized context bundle, then user text."""
    if context is None:
        return text
    context_text = context.to_prompt()
    if not context_text:
        return text
    return f"{context_text}\n\n{text}"
