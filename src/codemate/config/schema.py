"""
Pydantic configuration schema for codemate.

This module defines all configuration models with validation.
"""

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL = "gemini/gemini-2.0-flash"

# =============================================================================
# Provider Configuration
# =============================================================================


class ProviderConfig(BaseModel):
    """Model backend configuration."""

    model_config = ConfigDict(extra="allow")

    default: str = DEFAULT_MODEL
    aliases: dict[str, str] = Field(
        default_factory=lambda: {
            "gemini-flash": "gemini/gemini-2.0-flash",
            "gemini-1.5-flash": "gemini/gemini-1.5-flash",
            "gemini-1.5-pro": "gemini/gemini-1.5-pro",
        }
    )
    api_key: str | None = Field(
        default=None,
        description="API key; when unset the provider's environment variable is used",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int | None = Field(default=None, ge=1)


# =============================================================================
# Chat Configuration
# =============================================================================


class ChatConfig(BaseModel):
    """Chat session behaviour."""

    model_config = ConfigDict(extra="allow")

    enable_tools: bool = Field(
        default=True,
        description="Advertise tools to the model and execute its tool calls",
    )

    max_history_turns: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum turns of history sent to the model",
    )

    system_prompt: str | None = Field(
        default=None,
        description="Custom system prompt (None = built-in prompt)",
    )

    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Seconds to wait for the model before failing the turn",
    )


# =============================================================================
# Root Configuration Model
# =============================================================================


class Config(BaseModel):
    """
    Root configuration model for codemate.

    Configuration can be loaded from YAML files and environment variables,
    merged in order of priority.
    """

    model_config = ConfigDict(extra="allow")

    providers: ProviderConfig = Field(default_factory=ProviderConfig)
    chat: ChatConfig = Field(default_factory=ChatConfig)

    def get_default_model(self) -> str:
        """Get the default model, resolving aliases if needed."""
        model = self.providers.default
        return self.providers.aliases.get(model, model)
