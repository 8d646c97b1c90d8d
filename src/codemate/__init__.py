"""
codemate - editor-embeddable coding assistant

A chat agent that lets a language model call workspace tools (files, code
search, diagnostics, git, code generation) through a markup protocol
embedded in its replies.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("codemate")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "__version__",
]
