"""Built-in tools that forward to a workspace capability."""

import logging
from typing import Any, Optional

from codemate.tools.base import Tool, ToolExecutionError
from codemate.tools.models import ToolParameter, parse_bool
from codemate.tools.registry import ToolRegistry
from codemate.workspace.protocol import WorkspaceCapability

logger = logging.getLogger(__name__)

GIT_OPERATIONS = (
    "status",
    "log",
    "diff",
    "branches",
    "create_branch",
    "checkout",
    "delete_branch",
    "add",
    "commit",
    "push",
    "pull",
)

_BRANCH_OPERATIONS = {"create_branch", "checkout", "delete_branch"}


def _as_bool(value: Optional[str], default: bool = False) -> bool:
    if value is None or not value.strip():
        return default
    parsed = parse_bool(value)
    return default if parsed is None else parsed


def _as_int(value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    return int(value)


def _optional(params: dict[str, str], name: str) -> Optional[str]:
    """Parameter value, or None when absent or blank."""
    value = params.get(name)
    if value is None or not value.strip():
        return None
    return value


class WorkspaceTool(Tool):
    """Base for tools backed by a workspace capability."""

    def __init__(self, workspace: WorkspaceCapability):
        self.workspace = workspace
        super().__init__()

    async def _resolve(self, path: str) -> str:
        return await self.workspace.resolve_path(path)


# =============================================================================
# File tools
# =============================================================================


class ReadFileTool(WorkspaceTool):
    """Read a file from the workspace."""

    @property
    def name(self) -> str:
        return "read_file"

    @property
    def description(self) -> str:
        return (
            "Read the contents of a file in the workspace. "
            "Use this to examine source code or configuration before changing it."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="file_path",
                description="Path to the file, relative to the workspace root",
            ),
        ]

    async def execute(self, params: dict[str, str]) -> str:
        path = await self._resolve(params["file_path"])
        logger.info(f"Reading file: {path}")
        return await self.workspace.read_file(path)


class WriteFileTool(WorkspaceTool):
    """Overwrite a file in the workspace."""

    @property
    def name(self) -> str:
        return "write_file"

    @property
    def description(self) -> str:
        return "Write content to a file in the workspace, replacing what is there."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="file_path", description="Path to the file"),
            ToolParameter(name="content", description="Full new content of the file"),
        ]

    async def execute(self, params: dict[str, str]) -> str:
        path = await self._resolve(params["file_path"])
        content = params["content"]
        logger.info(f"Writing file: {path}")
        await self.workspace.write_file(path, content)
        return f"Wrote {len(content)} characters to {path}"


class ListDirectoryTool(WorkspaceTool):
    """List a directory's entries."""

    @property
    def name(self) -> str:
        return "list_directory"

    @property
    def description(self) -> str:
        return "List the files and subdirectories of a workspace directory."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="directory_path",
                description="Directory to list (default: workspace root)",
                required=False,
            ),
        ]

    async def execute(self, params: dict[str, str]) -> list[dict[str, Any]]:
        path = await self._resolve(_optional(params, "directory_path") or ".")
        return await self.workspace.list_directory(path)


class SearchFilesTool(WorkspaceTool):
    """Find files by glob pattern."""

    @property
    def name(self) -> str:
        return "search_files"

    @property
    def description(self) -> str:
        return (
            "Find files whose paths match a glob pattern, e.g. '**/*.py' or 'src/**/test_*'."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="pattern", description="Glob pattern to match"),
            ToolParameter(
                name="directory_path",
                description="Directory to search in (default: workspace root)",
                required=False,
            ),
            ToolParameter(
                name="include_hidden",
                type="boolean",
                description="Include hidden files and directories",
                required=False,
            ),
        ]

    async def execute(self, params: dict[str, str]) -> list[str]:
        directory = _optional(params, "directory_path")
        if directory is not None:
            directory = await self._resolve(directory)
        return await self.workspace.search_files(
            params["pattern"],
            directory=directory,
            include_hidden=_as_bool(params.get("include_hidden")),
        )


class CreateFileTool(WorkspaceTool):
    """Create a new file."""

    @property
    def name(self) -> str:
        return "create_file"

    @property
    def description(self) -> str:
        return "Create a new file in the workspace with the given content."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="file_path", description="Path of the new file"),
            ToolParameter(
                name="content",
                description="Initial content (default: empty)",
                required=False,
            ),
        ]

    async def execute(self, params: dict[str, str]) -> str:
        path = await self._resolve(params["file_path"])
        await self.workspace.create_file(path, params.get("content", ""))
        return f"Created {path}"


class GetProjectStructureTool(WorkspaceTool):
    """Directory tree of the workspace."""

    @property
    def name(self) -> str:
        return "get_project_structure"

    @property
    def description(self) -> str:
        return "Get the directory tree of the workspace, down to a maximum depth."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="max_depth",
                type="integer",
                description="How many directory levels to include (default: 3)",
                required=False,
            ),
        ]

    async def execute(self, params: dict[str, str]) -> dict[str, Any]:
        return await self.workspace.get_project_structure(_as_int(params.get("max_depth"), 3))


# =============================================================================
# Code search
# =============================================================================


class SearchCodeTool(WorkspaceTool):
    """Full-text search across the workspace."""

    @property
    def name(self) -> str:
        return "search_code"

    @property
    def description(self) -> str:
        return (
            "Search the text of workspace files. Returns matching lines with "
            "their file path and line number."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="query", description="Text or pattern to search for"),
            ToolParameter(
                name="include",
                description="Glob of files to include, e.g. '**/*.ts'",
                required=False,
            ),
            ToolParameter(
                name="exclude",
                description="Glob of files to exclude, e.g. '**/node_modules/**'",
                required=False,
            ),
            ToolParameter(
                name="case_sensitive",
                type="boolean",
                description="Match case exactly",
                required=False,
            ),
            ToolParameter(
                name="whole_word",
                type="boolean",
                description="Match whole words only",
                required=False,
            ),
            ToolParameter(
                name="regex",
                type="boolean",
                description="Treat the query as a regular expression",
                required=False,
            ),
        ]

    async def execute(self, params: dict[str, str]) -> list[dict[str, Any]]:
        return await self.workspace.search_text(
            params["query"],
            include=_optional(params, "include"),
            exclude=_optional(params, "exclude"),
            case_sensitive=_as_bool(params.get("case_sensitive")),
            whole_word=_as_bool(params.get("whole_word")),
            regex=_as_bool(params.get("regex")),
        )


class FindSymbolsTool(WorkspaceTool):
    """Workspace symbol lookup."""

    @property
    def name(self) -> str:
        return "find_symbols"

    @property
    def description(self) -> str:
        return "Find classes, functions and other symbols in the workspace by name."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="query", description="Symbol name or part of it"),
            ToolParameter(
                name="kind",
                description="Restrict to a symbol kind, e.g. 'class' or 'function'",
                required=False,
            ),
        ]

    async def execute(self, params: dict[str, str]) -> list[dict[str, Any]]:
        return await self.workspace.find_symbols(params["query"], kind=_optional(params, "kind"))


class GetDocumentSymbolsTool(WorkspaceTool):
    """Outline of a single file."""

    @property
    def name(self) -> str:
        return "get_document_symbols"

    @property
    def description(self) -> str:
        return "List the symbols (classes, functions, variables) defined in one file."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [ToolParameter(name="file_path", description="Path to the file")]

    async def execute(self, params: dict[str, str]) -> list[dict[str, Any]]:
        path = await self._resolve(params["file_path"])
        return await self.workspace.find_symbols("", path=path)


# =============================================================================
# Diagnostics
# =============================================================================


class GetDiagnosticsTool(WorkspaceTool):
    """Errors and warnings reported by the editor."""

    @property
    def name(self) -> str:
        return "get_diagnostics"

    @property
    def description(self) -> str:
        return (
            "Get compiler and linter diagnostics (errors, warnings) for one file, "
            "or for the whole workspace when no file is given."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="file_path",
                description="File to check (default: all files)",
                required=False,
            ),
        ]

    async def execute(self, params: dict[str, str]) -> list[dict[str, Any]]:
        path = _optional(params, "file_path")
        if path is not None:
            path = await self._resolve(path)
        return await self.workspace.get_diagnostics(path)


def _position_parameters() -> list[ToolParameter]:
    return [
        ToolParameter(name="file_path", description="Path to the file"),
        ToolParameter(name="line", type="integer", description="Line number (1-based)"),
        ToolParameter(name="column", type="integer", description="Column number (1-based)"),
    ]


class GetCodeActionsTool(WorkspaceTool):
    """Quick fixes and refactorings available at a position."""

    @property
    def name(self) -> str:
        return "get_code_actions"

    @property
    def description(self) -> str:
        return "List the quick fixes and refactorings available at a position in a file."

    @property
    def parameters(self) -> list[ToolParameter]:
        return _position_parameters()

    async def execute(self, params: dict[str, str]) -> list[dict[str, Any]]:
        path = await self._resolve(params["file_path"])
        return await self.workspace.get_code_actions(path, int(params["line"]), int(params["column"]))


class ApplyCodeActionTool(WorkspaceTool):
    """Apply a code action by title."""

    @property
    def name(self) -> str:
        return "apply_code_action"

    @property
    def description(self) -> str:
        return (
            "Apply a quick fix or refactoring at a position in a file. "
            "Use get_code_actions first to see the available titles."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return _position_parameters() + [
            ToolParameter(name="action_title", description="Title of the code action to apply"),
        ]

    async def execute(self, params: dict[str, str]) -> str:
        path = await self._resolve(params["file_path"])
        line, column = int(params["line"]), int(params["column"])
        title = params["action_title"]

        applied = await self.workspace.apply_code_action(path, line, column, title)
        if not applied:
            raise ToolExecutionError(f"Code action '{title}' is not available at {path}:{line}:{column}")
        return f"Applied '{title}'"


# =============================================================================
# Git
# =============================================================================


class GitOperationTool(WorkspaceTool):
    """Run git operations through the workspace."""

    @property
    def name(self) -> str:
        return "git_operation"

    @property
    def description(self) -> str:
        return (
            "Perform git version control operations on the workspace repository. "
            f"Supported operations: {', '.join(GIT_OPERATIONS)}."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(name="operation", description="Git operation to perform"),
            ToolParameter(
                name="limit",
                type="integer",
                description="Number of commits to show for log (default: 10)",
                required=False,
            ),
            ToolParameter(
                name="branch",
                description="Branch for log, push and pull (default: the current branch)",
                required=False,
            ),
            ToolParameter(
                name="file_path",
                description="File to diff (default: all changes)",
                required=False,
            ),
            ToolParameter(
                name="staged",
                type="boolean",
                description="Diff staged changes instead of the working tree (default: false)",
                required=False,
            ),
            ToolParameter(
                name="include_remote",
                type="boolean",
                description="Include remote branches when listing branches (default: false)",
                required=False,
            ),
            ToolParameter(
                name="branch_name",
                description="Branch for create_branch/checkout/delete_branch",
                required=False,
            ),
            ToolParameter(
                name="checkout",
                type="boolean",
                description="Switch to the branch after create_branch (default: true)",
                required=False,
            ),
            ToolParameter(
                name="force",
                type="boolean",
                description="Force delete_branch (default: false)",
                required=False,
            ),
            ToolParameter(
                name="files",
                description="Files to add, comma separated, or '.' for all (required for add)",
                required=False,
            ),
            ToolParameter(
                name="message",
                description="Commit message (required for commit)",
                required=False,
            ),
            ToolParameter(
                name="add_all",
                type="boolean",
                description="Stage all modified files before commit (default: false)",
                required=False,
            ),
            ToolParameter(
                name="remote",
                description="Remote for push/pull (default: origin)",
                required=False,
            ),
        ]

    async def _files(self, value: str) -> list[str]:
        names = [name.strip() for name in value.split(",") if name.strip()]
        return [name if name == "." else await self._resolve(name) for name in names]

    async def execute(self, params: dict[str, str]) -> Any:
        operation = params["operation"].strip()
        if operation not in GIT_OPERATIONS:
            raise ToolExecutionError(
                f"Unknown git operation '{operation}'. Expected one of: {', '.join(GIT_OPERATIONS)}"
            )

        options: dict[str, Any] = {}
        branch = _optional(params, "branch")

        if operation == "log":
            options["limit"] = _as_int(params.get("limit"), 10)
            if branch is not None:
                options["branch"] = branch

        elif operation == "diff":
            file_path = _optional(params, "file_path")
            if file_path is not None:
                options["file_path"] = await self._resolve(file_path)
            options["staged"] = _as_bool(params.get("staged"))

        elif operation == "branches":
            options["include_remote"] = _as_bool(params.get("include_remote"))

        elif operation == "add":
            files = _optional(params, "files")
            if files is None:
                raise ToolExecutionError("Files are required for add")
            options["files"] = await self._files(files)

        elif operation == "commit":
            message = _optional(params, "message")
            if message is None:
                raise ToolExecutionError("Commit message is required for commit")
            options["message"] = message
            options["add_all"] = _as_bool(params.get("add_all"))

        elif operation in ("push", "pull"):
            remote = _optional(params, "remote")
            if remote is not None:
                options["remote"] = remote
            if branch is not None:
                options["branch"] = branch

        if operation in _BRANCH_OPERATIONS:
            branch_name = _optional(params, "branch_name")
            if branch_name is None:
                raise ToolExecutionError(f"Branch name is required for {operation}")
            options["branch_name"] = branch_name
            if operation == "create_branch":
                options["checkout"] = _as_bool(params.get("checkout"), default=True)
            elif operation == "delete_branch":
                options["force"] = _as_bool(params.get("force"))

        logger.info(f"Running git {operation}")
        return await self.workspace.run_git(operation, **options)


# =============================================================================
# Editor
# =============================================================================


class GetCurrentFileTool(WorkspaceTool):
    """The file open in the active editor."""

    @property
    def name(self) -> str:
        return "get_current_file"

    @property
    def description(self) -> str:
        return "Get the path, language, content and selection of the file open in the editor."

    async def execute(self, params: dict[str, str]) -> dict[str, Any]:
        current = await self.workspace.get_current_file()
        if current is None:
            raise ToolExecutionError("No file is open in the editor")
        return current.model_dump(exclude_none=True)


class InsertCodeTool(WorkspaceTool):
    """Insert code at the cursor."""

    @property
    def name(self) -> str:
        return "insert_code"

    @property
    def description(self) -> str:
        return "Insert code at the cursor position in the active editor."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [ToolParameter(name="code", description="Code to insert")]

    async def execute(self, params: dict[str, str]) -> str:
        await self.workspace.insert_code(params["code"])
        return "Code inserted"


class ReplaceSelectedCodeTool(WorkspaceTool):
    """Replace the editor selection."""

    @property
    def name(self) -> str:
        return "replace_selected_code"

    @property
    def description(self) -> str:
        return "Replace the code currently selected in the active editor."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [ToolParameter(name="code", description="Replacement code")]

    async def execute(self, params: dict[str, str]) -> str:
        selection = await self.workspace.get_selection()
        if selection is None or not selection.text:
            raise ToolExecutionError("No code is selected in the editor")
        await self.workspace.replace_selection(params["code"])
        return "Selection replaced"


# =============================================================================
# Registration
# =============================================================================


def workspace_tools(workspace: WorkspaceCapability, include_git: bool = True) -> list[Tool]:
    """Instantiate the built-in workspace tools.

    Args:
        workspace: Capability the tools forward to
        include_git: Whether to include the git tool

    Returns:
        Tool instances in catalog order
    """
    tools: list[Tool] = [
        ReadFileTool(workspace),
        WriteFileTool(workspace),
        ListDirectoryTool(workspace),
        SearchFilesTool(workspace),
        CreateFileTool(workspace),
        GetProjectStructureTool(workspace),
        SearchCodeTool(workspace),
        FindSymbolsTool(workspace),
        GetDocumentSymbolsTool(workspace),
        GetDiagnosticsTool(workspace),
        GetCodeActionsTool(workspace),
        ApplyCodeActionTool(workspace),
        GetCurrentFileTool(workspace),
        InsertCodeTool(workspace),
        ReplaceSelectedCodeTool(workspace),
    ]
    if include_git:
        tools.append(GitOperationTool(workspace))
    return tools


def register_workspace_tools(
    registry: ToolRegistry,
    workspace: WorkspaceCapability,
    include_git: bool = True,
) -> int:
    """Register all built-in workspace tools.

    Args:
        registry: ToolRegistry to register tools in
        workspace: Capability the tools forward to
        include_git: Whether to register the git tool

    Returns:
        Number of tools registered
    """
    tools = workspace_tools(workspace, include_git=include_git)
    for tool in tools:
        registry.register_tool(tool)

    logger.info(f"Registered {len(tools)} workspace tools")
    return len(tools)
