"""
Model backend interface and LiteLLM implementation.

The orchestrator only needs ``send_turn``: system instructions, prior
turns, and the new prompt in; the model's raw reply text out.
"""

import logging
from datetime import datetime
from typing import Any, Protocol, Sequence, runtime_checkable

import litellm
from litellm import acompletion

from codemate.config.schema import ProviderConfig
from codemate.memory.models import ConversationTurn, TurnRole
from codemate.providers.exceptions import BackendError, wrap_error
from codemate.providers.models import CompletionResponse, Message, TokenUsage

logger = logging.getLogger(__name__)

# Drop unsupported params per-provider
litellm.drop_params = True


@runtime_checkable
class ModelBackend(Protocol):
    """Anything that can answer one chat turn."""

    async def send_turn(
        self,
        system_instructions: str,
        history: Sequence[ConversationTurn],
        prompt: str,
    ) -> str:
        """Send one turn and return the model's raw text.

        Raises:
            BackendError: If the model call fails
        """
        ...


class LiteLLMBackend:
    """
    Model backend backed by LiteLLM.

    Gives one interface to Gemini, OpenAI, Anthropic, Ollama and the other
    providers LiteLLM supports. Model names may be aliases from config.
    """

    def __init__(self, config: ProviderConfig | None = None):
        """
        Initialize the backend.

        Args:
            config: Provider configuration. Defaults are used if not provided.
        """
        self.config = config or ProviderConfig()

    def resolve_model(self, model: str | None = None) -> str:
        """
        Resolve model name from alias or default.

        Args:
            model: Model name, alias, or None for default.

        Returns:
            The fully resolved model identifier.
        """
        if model is None or model == "default":
            model = self.config.default

        if model in self.config.aliases:
            resolved = self.config.aliases[model]
            logger.debug(f"Resolved alias '{model}' to '{resolved}'")
            return resolved

        return model

    @staticmethod
    def build_messages(
        system_instructions: str,
        history: Sequence[ConversationTurn],
        prompt: str,
    ) -> list[Message]:
        """Assemble the chat-completion message list for one turn."""
        messages: list[Message] = []
        if system_instructions:
            messages.append(Message.system(system_instructions))
        for turn in history:
            if turn.role == TurnRole.MODEL.value:
                messages.append(Message.assistant(turn.text))
            else:
                messages.append(Message.user(turn.text))
        messages.append(Message.user(prompt))
        return messages

    async def complete(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        **kwargs: Any,
    ) -> CompletionResponse:
        """
        Send a completion request.

        Args:
            messages: Conversation messages.
            model: Model to use (name, alias, or None for default).
            **kwargs: Additional parameters passed to LiteLLM.

        Returns:
            CompletionResponse with the reply text.

        Raises:
            BackendError: If the provider call fails.
        """
        resolved_model = self.resolve_model(model)
        logger.info(f"Completing with model: {resolved_model}")

        request_kwargs: dict[str, Any] = {
            "model": resolved_model,
            "messages": [msg.to_dict() for msg in messages],
            "temperature": self.config.temperature,
            **kwargs,
        }
        if self.config.max_tokens:
            request_kwargs["max_tokens"] = self.config.max_tokens
        if self.config.api_key:
            request_kwargs["api_key"] = self.config.api_key

        try:
            response = await acompletion(**request_kwargs)
        except Exception as e:
            logger.error(f"Model call failed: {e}")
            raise wrap_error(e, provider=self._extract_provider(resolved_model)) from e

        return self._parse_response(response, resolved_model)

    async def send_turn(
        self,
        system_instructions: str,
        history: Sequence[ConversationTurn],
        prompt: str,
    ) -> str:
        """Send one chat turn and return the reply text."""
        messages = self.build_messages(system_instructions, history, prompt)
        response = await self.complete(messages)
        return response.content

    def _extract_provider(self, model: str) -> str:
        """Extract provider name from model string."""
        if "/" in model:
            return model.split("/")[0]
        return "unknown"

    def _parse_response(self, response: Any, model: str) -> CompletionResponse:
        """Parse a LiteLLM response into the unified format."""
        try:
            choice = response.choices[0]
        except (AttributeError, IndexError) as e:
            raise BackendError("Model returned no choices", self._extract_provider(model)) from e

        usage = getattr(response, "usage", None)
        token_usage = TokenUsage(
            input_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            output_tokens=getattr(usage, "completion_tokens", 0) or 0,
        )

        return CompletionResponse(
            content=choice.message.content or "",
            model=model,
            usage=token_usage,
            finish_reason=choice.finish_reason or "unknown",
            created_at=datetime.now(),
        )
