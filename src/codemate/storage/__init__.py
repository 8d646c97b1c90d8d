"""Storage utilities for codemate."""

from codemate.storage.paths import (
    find_project_config,
    get_codemate_home,
    get_global_config_path,
)

__all__ = [
    "find_project_config",
    "get_codemate_home",
    "get_global_config_path",
]
