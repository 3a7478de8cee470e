"""Workspace handles: explicit, caller-held references to per-repository engines."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from pathlib import Path

from ..core.engine import TestIntelligence
from .base import ErrorCode, ServiceResult


@dataclass(frozen=True)
class Workspace:
    """An opened repository and the engine that holds its history."""
    workspace_id: str
    root: Path
    intelligence: TestIntelligence


class WorkspaceRegistry:
    """
    Opened workspaces, keyed by opaque handle ids.

    Opening the same path twice yields two independent workspaces; callers
    keep the handle they were given.
    """

    def __init__(self):
        self._workspaces: dict[str, Workspace] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._workspaces)

    def open(self, repo_path: str | None) -> ServiceResult[Workspace]:
        if not repo_path:
            return ServiceResult.fail(
                ErrorCode.MISSING_INPUT,
                "'repo_path' is required"
            )

        root = Path(repo_path).expanduser()
        if not root.is_dir():
            return ServiceResult.fail(
                ErrorCode.REPOSITORY_NOT_FOUND,
                f"Repository directory not found: {repo_path}",
                details={"repo_path": repo_path}
            )

        workspace = Workspace(
            workspace_id=uuid.uuid4().hex,
            root=root.resolve(),
            intelligence=TestIntelligence(root.resolve()),
        )
        with self._lock:
            self._workspaces[workspace.workspace_id] = workspace
        return ServiceResult.ok(workspace)

    def get(self, workspace_id: str | None) -> ServiceResult[Workspace]:
        if not workspace_id:
            return ServiceResult.fail(
                ErrorCode.MISSING_INPUT,
                "'workspace_id' is required (call open_workspace first)"
            )

        with self._lock:
            workspace = self._workspaces.get(workspace_id)

        if workspace is None:
            return ServiceResult.fail(
                ErrorCode.WORKSPACE_NOT_FOUND,
                f"Unknown workspace: {workspace_id}"
            )
        return ServiceResult.ok(workspace)

    def close(self, workspace_id: str | None) -> ServiceResult[bool]:
        with self._lock:
            removed = self._workspaces.pop(workspace_id or "", None)

        if removed is None:
            return ServiceResult.fail(
                ErrorCode.WORKSPACE_NOT_FOUND,
                f"Unknown workspace: {workspace_id}"
            )
        return ServiceResult.ok(True)
