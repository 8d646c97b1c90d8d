"""Chat orchestrator driving one request/response cycle."""

import asyncio
import logging
from typing import Any, Callable, Optional, Union

from codemate.agent.dispatcher import ToolDispatcher
from codemate.agent.models import ChatEvent, ChatResponse, ChatState, DispatchResult, EventType
from codemate.agent.prompts import build_prompt, build_system_instructions
from codemate.config.schema import ChatConfig, Config
from codemate.context.models import ContextBundle
from codemate.memory.conversation import ConversationState
from codemate.memory.models import ConversationTurn
from codemate.providers.backend import LiteLLMBackend, ModelBackend
from codemate.providers.exceptions import BackendError, BackendTimeoutError, wrap_error
from codemate.tools.models import ToolParameter
from codemate.tools.registry import ToolDefinition, ToolFunction, ToolRegistry

logger = logging.getLogger(__name__)


class ChatOrchestrator:
    """Runs chat turns between the user, the model and the tool registry.

    One turn moves through COMPOSING -> AWAITING_MODEL -> DISPATCHING ->
    UPDATING and always ends back in IDLE, passing through ERRORED when the
    backend or dispatch fails.

    History rules for a turn:
    1. The user text is appended before the model is called and stays even
       if the turn fails.
    2. The model's raw reply is appended as received, tool-call markup
       included.
    3. If any tool ran, the processed reply is appended as an extra model
       turn.
    4. A backend failure appends a single "Error: ..." model turn.

    Turns on one orchestrator are serialized by a lock. If the caller
    cancels a turn while the model call is pending, the reply is discarded
    and only the user turn remains in history.
    """

    def __init__(
        self,
        backend: ModelBackend,
        registry: Optional[ToolRegistry] = None,
        config: Optional[ChatConfig] = None,
        conversation: Optional[ConversationState] = None,
        event_callback: Optional[Callable[[ChatEvent], None]] = None,
    ):
        """Initialize the orchestrator.

        Args:
            backend: Model backend used for every turn
            registry: ToolRegistry owned by this chat session
            config: Chat settings
            conversation: Conversation state (default: capped by config)
            event_callback: Optional callback for turn and tool events
        """
        self.backend = backend
        self.registry = registry if registry is not None else ToolRegistry()
        self.config = config or ChatConfig()
        self.conversation = conversation or ConversationState(self.config.max_history_turns)
        self.event_callback = event_callback
        self.dispatcher = ToolDispatcher(self.registry, event_callback=event_callback)
        self.state = ChatState.IDLE
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(
        cls,
        config: Config,
        registry: Optional[ToolRegistry] = None,
        event_callback: Optional[Callable[[ChatEvent], None]] = None,
    ) -> "ChatOrchestrator":
        """Build an orchestrator with a LiteLLM backend from loaded config."""
        return cls(
            backend=LiteLLMBackend(config.providers),
            registry=registry,
            config=config.chat,
            event_callback=event_callback,
        )

    def _emit_event(self, event: ChatEvent) -> None:
        if self.event_callback:
            try:
                self.event_callback(event)
            except Exception as e:
                logger.warning(f"Event callback error: {e}")

    def _set_state(self, state: ChatState) -> None:
        if state != self.state:
            logger.debug(f"Chat state: {self.state.value} -> {state.value}")
        self.state = state

    # ------------------------------------------------------------------
    # Outward interface
    # ------------------------------------------------------------------

    def get_available_tools(self) -> list[dict[str, Any]]:
        """Tool catalog as shown to the model."""
        return self.registry.list_tools()

    def register_tool(
        self,
        name: str,
        execute: ToolFunction,
        description: str = "",
        parameters: Union[None, list[ToolParameter], dict[str, Any]] = None,
        required: Optional[list[str]] = None,
    ) -> ToolDefinition:
        """Register a tool on this session's registry."""
        return self.registry.register(
            name, execute, description=description, parameters=parameters, required=required
        )

    def clear_history(self) -> None:
        self.conversation.clear()

    @property
    def history(self) -> list[ConversationTurn]:
        return self.conversation.current()

    def compose(self, text: str, context: Optional[ContextBundle] = None) -> tuple[str, str]:
        """Build system instructions and prompt for a user message.

        Returns:
            Tuple of (system_instructions, prompt)
        """
        catalog = self.get_available_tools() if self.config.enable_tools else None
        system_instructions = build_system_instructions(catalog, self.config.system_prompt)
        return system_instructions, build_prompt(text, context)

    async def handle_user_message(
        self,
        text: str,
        context: Optional[ContextBundle] = None,
    ) -> ChatResponse:
        """Process one user message to completion.

        Args:
            text: User message
            context: Optional editor context snapshot

        Returns:
            ChatResponse with processed text, raw text and tool results, or
            with ``error`` set when the turn failed
        """
        async with self._lock:
            try:
                return await self._run_turn(text, context)
            finally:
                self._set_state(ChatState.IDLE)

    # ------------------------------------------------------------------
    # Turn steps
    # ------------------------------------------------------------------

    async def _run_turn(self, text: str, context: Optional[ContextBundle]) -> ChatResponse:
        self._emit_event(ChatEvent(event_type=EventType.TURN_START, message="Processing message"))

        self._set_state(ChatState.COMPOSING)
        try:
            system_instructions, prompt = self.compose(text, context)
        except Exception as e:
            logger.error(f"Failed to compose prompt: {e}", exc_info=True)
            return self._fail(str(e))

        history = self.conversation.current()
        self.conversation.add_user_message(text)

        self._set_state(ChatState.AWAITING_MODEL)
        try:
            raw_text = await self._call_backend(system_instructions, history, prompt)
        except asyncio.CancelledError:
            logger.info("Turn cancelled while awaiting the model, reply discarded")
            raise
        except BackendError as e:
            logger.error(f"Model backend error: {e}")
            self.conversation.add_model_message(f"Error: {e}")
            return self._fail(str(e))

        self.conversation.add_model_message(raw_text)
        self._emit_event(ChatEvent(
            event_type=EventType.MODEL_RESPONSE,
            message="Model response received",
        ))

        self._set_state(ChatState.DISPATCHING)
        try:
            if self.config.enable_tools:
                dispatch = await self.dispatcher.dispatch(raw_text)
            else:
                dispatch = DispatchResult(text=raw_text)
        except Exception as e:
            logger.error(f"Tool dispatch failed: {e}", exc_info=True)
            return self._fail(str(e))

        self._set_state(ChatState.UPDATING)
        if dispatch.records:
            self.conversation.add_model_message(dispatch.text)

        self._emit_event(ChatEvent(
            event_type=EventType.TURN_COMPLETE,
            message=f"Turn completed with {len(dispatch.records)} tool call(s)",
            data={"tools_executed": len(dispatch.records)},
        ))

        return ChatResponse(
            text=dispatch.text,
            original_text=raw_text,
            tool_results=dispatch.tool_results,
        )

    async def _call_backend(
        self,
        system_instructions: str,
        history: list[ConversationTurn],
        prompt: str,
    ) -> str:
        """Call the backend once, applying the configured timeout.

        Raises:
            BackendError: For any backend failure, including timeouts
        """
        call = self.backend.send_turn(system_instructions, history, prompt)
        timeout = self.config.request_timeout

        try:
            if timeout is None:
                return await call
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise BackendTimeoutError(f"Model did not respond within {timeout} seconds") from e
        except BackendError:
            raise
        except Exception as e:
            raise wrap_error(e) from e

    def _fail(self, message: str) -> ChatResponse:
        self._set_state(ChatState.ERRORED)
        self._emit_event(ChatEvent(event_type=EventType.TURN_ERROR, message=message))
        return ChatResponse(error=message)
