"""
Pytest configuration and fixtures for codemate tests.
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from typing import Any, Optional, Sequence

import pytest
from typer.testing import CliRunner

from codemate.context.models import CurrentFile, Selection
from codemate.memory.models import ConversationTurn
from codemate.tools.registry import ToolRegistry


class FakeBackend:
    """Model backend returning scripted replies and recording each turn."""

    def __init__(self, replies: Optional[list[str]] = None, error: Optional[Exception] = None):
        self.replies = list(replies or [])
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def send_turn(
        self,
        system_instructions: str,
        history: Sequence[ConversationTurn],
        prompt: str,
    ) -> str:
        self.calls.append(
            {
                "system_instructions": system_instructions,
                "history": list(history),
                "prompt": prompt,
            }
        )
        if self.error is not None:
            raise self.error
        return self.replies.pop(0) if self.replies else ""


class FakeWorkspace:
    """In-memory workspace capability that records every call."""

    def __init__(self, files: Optional[dict[str, str]] = None):
        self.files = dict(files or {})
        self.calls: list[tuple[str, tuple, dict]] = []
        self.current_file: Optional[CurrentFile] = None
        self.selection: Optional[Selection] = None
        self.inserted: list[str] = []
        self.available_actions: dict[str, bool] = {}

    def _record(self, method: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((method, args, kwargs))

    async def resolve_path(self, path: str) -> str:
        return path[2:] if path.startswith("./") else path

    async def read_file(self, path: str) -> str:
        self._record("read_file", path)
        if path not in self.files:
            raise FileNotFoundError(f"File not found: {path}")
        return self.files[path]

    async def write_file(self, path: str, content: str) -> None:
        self._record("write_file", path, content)
        self.files[path] = content

    async def list_directory(self, path: str) -> list[dict[str, Any]]:
        self._record("list_directory", path)
        return [{"name": name, "type": "file"} for name in sorted(self.files)]

    async def search_files(
        self,
        pattern: str,
        directory: Optional[str] = None,
        include_hidden: bool = False,
    ) -> list[str]:
        self._record("search_files", pattern, directory=directory, include_hidden=include_hidden)
        suffix = pattern.lstrip("*")
        return sorted(name for name in self.files if name.endswith(suffix))

    async def create_file(self, path: str, content: str) -> None:
        self._record("create_file", path, content)
        if path in self.files:
            raise FileExistsError(f"File already exists: {path}")
        self.files[path] = content

    async def get_project_structure(self, max_depth: int = 3) -> dict[str, Any]:
        self._record("get_project_structure", max_depth=max_depth)
        return {"name": "project", "children": sorted(self.files)}

    async def search_text(self, query: str, **options: Any) -> list[dict[str, Any]]:
        self._record("search_text", query, **options)
        return [
            {"path": path, "line": 1, "text": content}
            for path, content in sorted(self.files.items())
            if query in content
        ]

    async def find_symbols(
        self,
        query: str,
        kind: Optional[str] = None,
        path: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        self._record("find_symbols", query, kind=kind, path=path)
        return [{"name": query or "main", "kind": kind or "function", "path": path or "app.py"}]

    async def get_diagnostics(self, path: Optional[str] = None) -> list[dict[str, Any]]:
        self._record("get_diagnostics", path)
        return [{"path": path or "app.py", "line": 3, "severity": "error", "message": "oops"}]

    async def get_code_actions(self, path: str, line: int, column: int) -> list[dict[str, Any]]:
        self._record("get_code_actions", path, line, column)
        return [{"title": title} for title in self.available_actions]

    async def apply_code_action(self, path: str, line: int, column: int, title: str) -> bool:
        self._record("apply_code_action", path, line, column, title)
        return self.available_actions.get(title, False)

    async def run_git(self, operation: str, **options: Any) -> Any:
        self._record("run_git", operation, **options)
        return {"operation": operation, **options}

    async def get_current_file(self) -> Optional[CurrentFile]:
        return self.current_file

    async def get_selection(self) -> Optional[Selection]:
        return self.selection

    async def insert_code(self, code: str) -> None:
        self._record("insert_code", code)
        self.inserted.append(code)

    async def replace_selection(self, code: str) -> None:
        self._record("replace_selection", code)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def codemate_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point CODEMATE_HOME at an empty directory and clear CODEMATE_* overrides."""
    for key in list(os.environ):
        if key.startswith("CODEMATE_"):
            monkeypatch.delenv(key)

    home = temp_dir / ".codemate"
    home.mkdir()
    monkeypatch.setenv("CODEMATE_HOME", str(home))
    return home


@pytest.fixture
def project_dir(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Provide a project directory with a .codemate/ folder as the cwd."""
    project = temp_dir / "test-project"
    (project / ".codemate").mkdir(parents=True)
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def registry() -> ToolRegistry:
    """Provide a registry with an ``echo`` tool."""
    registry = ToolRegistry()
    registry.register(
        "echo",
        lambda params: params["x"],
        description="Echo the x parameter",
        parameters={"x": {"type": "string", "description": "Text to echo"}},
        required=["x"],
    )
    return registry


@pytest.fixture
def fake_workspace() -> FakeWorkspace:
    return FakeWorkspace(files={"app.py": "def main():\n    return 1\n", "README.md": "# demo\n"})


@pytest.fixture
def make_backend() -> type[FakeBackend]:
    """Provide the scripted backend class: ``make_backend(replies=[...])``."""
    return FakeBackend
