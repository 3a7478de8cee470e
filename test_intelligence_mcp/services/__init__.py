"""Services package.

Exposes the service classes and shared result types used by the MCP handlers.
"""

from .base import (
    ErrorCode,
    ServiceError,
    ServiceResult,
)
from .git_changes import GitChangeService
from .intelligence import IntelligenceService, parse_timestamp
from .workspace import Workspace, WorkspaceRegistry

__all__ = [
    # Base
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    # Workspaces
    "Workspace",
    "WorkspaceRegistry",
    # Services
    "IntelligenceService",
    "GitChangeService",
    "parse_timestamp",
]


# =============================================================================
# Convenience factory functions
# =============================================================================

def create_intelligence_service(
    workspaces: WorkspaceRegistry,
    workspace_id: str | None
) -> ServiceResult[IntelligenceService]:
    """Resolve a workspace handle to an IntelligenceService."""

    return workspaces.get(workspace_id).map(
        lambda workspace: IntelligenceService(workspace.intelligence)
    )


def create_git_change_service(
    workspaces: WorkspaceRegistry,
    workspace_id: str | None
) -> ServiceResult[GitChangeService]:
    """Resolve a workspace handle to a GitChangeService for its root."""

    return workspaces.get(workspace_id).map(
        lambda workspace: GitChangeService(workspace.root)
    )
