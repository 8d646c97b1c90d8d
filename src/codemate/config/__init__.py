"""Configuration for codemate."""

from codemate.config.loader import (
    ConfigurationError,
    load_config,
    load_yaml_file,
)
from codemate.config.merger import deep_merge, get_nested_value, set_nested_value
from codemate.config.schema import ChatConfig, Config, ProviderConfig

__all__ = [
    "ChatConfig",
    "Config",
    "ConfigurationError",
    "ProviderConfig",
    "deep_merge",
    "get_nested_value",
    "load_config",
    "load_yaml_file",
    "set_nested_value",
]
