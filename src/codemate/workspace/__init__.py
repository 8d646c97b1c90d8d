"""Workspace capability and the built-in tools backed by it."""

from codemate.workspace.protocol import WorkspaceCapability
from codemate.workspace.tools import (
    GIT_OPERATIONS,
    WorkspaceTool,
    register_workspace_tools,
    workspace_tools,
)

__all__ = [
    "GIT_OPERATIONS",
    "WorkspaceCapability",
    "WorkspaceTool",
    "register_workspace_tools",
    "workspace_tools",
]
