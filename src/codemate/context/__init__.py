"""Editor context snapshots that are serialized into the prompt."""

from codemate.context.models import (
    ContextBundle,
    CurrentFile,
    ProjectInfo,
    RelatedFile,
    Selection,
)

__all__ = [
    "ContextBundle",
    "CurrentFile",
    "ProjectInfo",
    "RelatedFile",
    "Selection",
]
