"""Read-only view of a repository: file listing, file content, coverage lookup."""

from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from ..constants import (
    COVERAGE_REPORT_PATHS,
    EXCLUDED_DIRECTORIES,
    FILE_READ_WORKERS,
    MAX_ENUMERATED_FILES,
    MAX_FILE_SIZE,
)

logger = logging.getLogger(__name__)


class Repository:
    """
    Filesystem-backed repository access.

    All paths handed out and accepted are POSIX-style and relative to the
    root. The file list is walked once per instance and then reused, so one
    Repository is one immutable snapshot of the tree.
    """

    def __init__(
        self,
        root: str | Path,
        max_files: int = MAX_ENUMERATED_FILES,
        excluded_dirs: frozenset[str] = EXCLUDED_DIRECTORIES,
    ):
        self.root = Path(root)
        self._max_files = max_files
        self._excluded_dirs = excluded_dirs
        self._files: list[str] | None = None

    def resolve(self, relative_path: str) -> Path | None:
        """Absolute path for a repository path, or None if it escapes the root."""
        root = self.root.resolve()
        path = (root / relative_path).resolve()
        if path != root and root not in path.parents:
            return None
        return path

    def exists(self, relative_path: str) -> bool:
        path = self.resolve(relative_path)
        return path is not None and path.is_file()

    def list_files(self) -> list[str]:
        """Return every file under the root, sorted, minus excluded directories."""
        if self._files is None:
            self._files = self._walk()
        return self._files

    def _walk(self) -> list[str]:
        files: list[str] = []

        for dirpath, dirnames, filenames in os.walk(self.root):
            # Prune in place so os.walk never descends into build output
            dirnames[:] = sorted(d for d in dirnames if d not in self._excluded_dirs)
            rel_dir = Path(dirpath).relative_to(self.root)

            for filename in sorted(filenames):
                files.append((rel_dir / filename).as_posix())
                if len(files) >= self._max_files:
                    logger.warning(
                        "File enumeration capped at %d files under %s",
                        self._max_files, self.root
                    )
                    return sorted(files)

        return sorted(files)

    def read_text(self, relative_path: str) -> str | None:
        """Return file content, or None when the file cannot be read."""
        path = self.resolve(relative_path)
        if path is None:
            logger.warning("Refusing to read outside the repository: %s", relative_path)
            return None
        try:
            if path.stat().st_size > MAX_FILE_SIZE:
                logger.debug("Skipping oversized file: %s", relative_path)
                return None
            return path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug("Skipping unreadable file %s: %s", relative_path, e)
            return None

    def read_many(self, relative_paths: list[str]) -> dict[str, str | None]:
        """Read several files concurrently; the result is keyed by path."""
        if not relative_paths:
            return {}

        with ThreadPoolExecutor(max_workers=FILE_READ_WORKERS) as pool:
            contents = list(pool.map(self.read_text, relative_paths))

        return dict(zip(relative_paths, contents))

    def locate_coverage_report(self) -> str | None:
        """Return the first known coverage report location that exists."""
        for candidate in COVERAGE_REPORT_PATHS:
            if self.exists(candidate):
                return candidate
        return None
