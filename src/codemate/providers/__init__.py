"""
codemate model backends.

Provides the backend protocol used by the chat orchestrator and a LiteLLM
implementation with multi-provider support (Gemini, OpenAI, Anthropic,
Ollama, ...).
"""

from codemate.providers.backend import LiteLLMBackend, ModelBackend
from codemate.providers.exceptions import (
    AuthenticationError,
    BackendError,
    BackendTimeoutError,
    ContextLengthExceededError,
    FailureType,
    InvalidRequestError,
    NetworkError,
    RateLimitError,
    ServerError,
    classify_error,
    wrap_error,
)
from codemate.providers.models import CompletionResponse, Message, MessageRole, TokenUsage

__all__ = [
    "AuthenticationError",
    "BackendError",
    "BackendTimeoutError",
    "CompletionResponse",
    "ContextLengthExceededError",
    "FailureType",
    "InvalidRequestError",
    "LiteLLMBackend",
    "Message",
    "MessageRole",
    "ModelBackend",
    "NetworkError",
    "RateLimitError",
    "ServerError",
    "TokenUsage",
    "classify_error",
    "wrap_error",
]
