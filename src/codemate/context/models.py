"""
Context bundle models for codemate.

A context bundle is a read-only snapshot of editor and workspace state,
assembled by the host, that is serialized into the prompt of a turn.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Selection(BaseModel):
    """Selected text in the current editor, with 1-based positions."""

    text: str
    start_line: int | None = None
    start_column: int | None = None
    end_line: int | None = None
    end_column: int | None = None


class CurrentFile(BaseModel):
    """The file open in the active editor."""

    path: str
    content: str = ""
    language: str | None = None
    selection: Selection | None = None


class RelatedFile(BaseModel):
    """A file related to the current one (same stem, references, ...)."""

    path: str
    content: str | None = None


class ProjectInfo(BaseModel):
    """Workspace project metadata."""

    name: str
    manifest: dict[str, Any] | None = None  # e.g. parsed package.json / pyproject


class ContextBundle(BaseModel):
    """Snapshot of editor state handed to the orchestrator for one turn."""

    model_config = ConfigDict(extra="ignore")

    current_file: CurrentFile | None = None
    related_files: list[RelatedFile] = Field(default_factory=list)
    project_info: ProjectInfo | None = None

    def is_empty(self) -> bool:
        return self.current_file is None and not self.related_files and self.project_info is None

    def to_prompt(self) -> str:
        """Render the bundle as prompt text.

        Returns:
            Prompt section, or an empty string for an empty bundle.
        """
        if self.is_empty():
            return ""

        parts = ["Here is the current code context:"]

        if self.current_file:
            current = self.current_file
            language = current.language or ""
            header = f"Current file: {current.path}"
            if current.language:
                header += f" ({current.language})"
            parts.append(f"{header}\n```{language}\n{current.content}\n```")

            if current.selection and current.selection.text:
                selection = current.selection
                label = "Selected code"
                if selection.start_line is not None and selection.end_line is not None:
                    label += f" (lines {selection.start_line}-{selection.end_line})"
                parts.append(f"{label}:\n```{language}\n{selection.text}\n```")

        if self.related_files:
            lines = ["Related files:"]
            for related in self.related_files:
                if related.content is None:
                    lines.append(f"- {related.path}")
                else:
                    lines.append(f"- {related.path}\n```\n{related.content}\n```")
            parts.append("\n".join(lines))

        if self.project_info:
            project = f"Project: {self.project_info.name}"
            if self.project_info.manifest:
                manifest = json.dumps(self.project_info.manifest, indent=2, ensure_ascii=False)
                project += f"\nManifest:\n```json\n{manifest}\n```"
            parts.append(project)

        return "\n\n".join(parts)
