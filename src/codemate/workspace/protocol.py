"""
Workspace capability protocol.

The host editor (or any other environment) supplies an object with these
async methods; the workspace tools forward to it. codemate itself does not
touch the file system, git, or a language server.
"""

from typing import Any, Optional, Protocol, runtime_checkable

from codemate.context.models import CurrentFile, Selection


@runtime_checkable
class WorkspaceCapability(Protocol):
    """Async operations a workspace must provide to back the built-in tools.

    Paths passed in are as the model wrote them; implementations decide how
    ``resolve_path`` maps them onto the workspace. Any method may raise to
    signal failure; the registry turns the exception into an inline tool
    error.
    """

    # File system

    async def resolve_path(self, path: str) -> str:
        """Map a model-supplied path to a workspace path."""
        ...

    async def read_file(self, path: str) -> str:
        ...

    async def write_file(self, path: str, content: str) -> None:
        ...

    async def list_directory(self, path: str) -> list[dict[str, Any]]:
        """Entries of a directory as ``{"name", "type"}`` mappings."""
        ...

    async def search_files(
        self,
        pattern: str,
        directory: Optional[str] = None,
        include_hidden: bool = False,
    ) -> list[str]:
        """Paths matching a glob pattern."""
        ...

    async def create_file(self, path: str, content: str) -> None:
        ...

    async def get_project_structure(self, max_depth: int = 3) -> dict[str, Any]:
        ...

    # Code search and language intelligence

    async def search_text(
        self,
        query: str,
        include: Optional[str] = None,
        exclude: Optional[str] = None,
        case_sensitive: bool = False,
        whole_word: bool = False,
        regex: bool = False,
    ) -> list[dict[str, Any]]:
        """Text matches as ``{"path", "line", "text"}`` mappings."""
        ...

    async def find_symbols(
        self,
        query: str,
        kind: Optional[str] = None,
        path: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Workspace symbols, or the symbols of one document when ``path`` is set."""
        ...

    async def get_diagnostics(self, path: Optional[str] = None) -> list[dict[str, Any]]:
        ...

    async def get_code_actions(self, path: str, line: int, column: int) -> list[dict[str, Any]]:
        ...

    async def apply_code_action(self, path: str, line: int, column: int, title: str) -> bool:
        ...

    # Version control

    async def run_git(self, operation: str, **options: Any) -> Any:
        """Run a git operation.

        Options by operation: log ``limit``, ``branch``; diff ``file_path``,
        ``staged``; branches ``include_remote``; create_branch ``branch_name``,
        ``checkout``; checkout ``branch_name``; delete_branch ``branch_name``,
        ``force``; add ``files`` (paths or ``["."]``); commit ``message``,
        ``add_all``; push and pull ``remote``, ``branch``.
        """
        ...

    # Active editor

    async def get_current_file(self) -> Optional[CurrentFile]:
        ...

    async def get_selection(self) -> Optional[Selection]:
        ...

    async def insert_code(self, code: str) -> None:
        """Insert code at the cursor of the active editor."""
        ...

    async def replace_selection(self, code: str) -> None:
        ...
