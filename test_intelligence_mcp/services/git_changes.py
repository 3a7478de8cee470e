"""Changed-file lookup through git (GitPython)."""

from __future__ import annotations

import logging
from pathlib import Path

from .base import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)


class GitChangeService:
    """List files changed in a working tree relative to a base ref."""

    def __init__(self, root: str | Path):
        self._root = Path(root)

    def changed_files(
        self,
        base_ref: str = "HEAD",
        include_untracked: bool = True
    ) -> ServiceResult[list[str]]:
        """
        Paths (relative to the workspace root) that differ from ``base_ref``.

        Covers staged and unstaged edits, plus untracked files when asked.
        Files outside the workspace root are left out.
        """
        try:
            from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
        except ImportError:
            return ServiceResult.fail(
                ErrorCode.GIT_UNAVAILABLE,
                "GitPython not installed. Run: pip install gitpython"
            )

        try:
            repo = Repo(self._root, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError):
            return ServiceResult.fail(
                ErrorCode.GIT_ERROR,
                f"Not a git repository: {self._root}"
            )

        try:
            diff_output = repo.git.diff("--name-only", base_ref)
            untracked = repo.untracked_files if include_untracked else []
        except GitCommandError as e:
            return ServiceResult.fail(
                ErrorCode.GIT_ERROR,
                f"git diff against '{base_ref}' failed: {e.stderr.strip() or e}",
                details={"base_ref": base_ref}
            )

        repo_paths = {p for p in diff_output.splitlines() if p.strip()} | set(untracked)
        prefix = self._root.resolve().relative_to(Path(repo.working_tree_dir).resolve()).as_posix()

        changed = []
        for path in sorted(repo_paths):
            if prefix in ("", "."):
                changed.append(path)
            elif path.startswith(prefix + "/"):
                changed.append(path[len(prefix) + 1:])

        logger.debug("%d files changed against %s", len(changed), base_ref)
        return ServiceResult.ok(changed)
