"""Local directory source provider."""

import logging
import os
from pathlib import Path

from codeprint.errors import SourceError
from codeprint.sources.base import CODE_EXTENSIONS, SourceProvider, is_code_file

logger = logging.getLogger(__name__)

# Directory names never descended into
DEFAULT_EXCLUDE_DIRS: frozenset[str] = frozenset(
    {
        ".git",
        ".hg",
        ".svn",
        "node_modules",
        "dist",
        "build",
        "out",
        "coverage",
        "__pycache__",
        ".venv",
        "venv",
        ".tox",
        ".mypy_cache",
        ".pytest_cache",
    }
)

DEFAULT_MAX_FILE_BYTES = 1_000_000


class LocalSourceProvider(SourceProvider):
    """Yields source files from a directory tree.

    File identifiers are POSIX paths relative to the project directory,
    listed in sorted order.
    """

    name = "local"

    def __init__(
        self,
        exclude_dirs: frozenset[str] | set[str] | None = None,
        extensions: frozenset[str] | set[str] | None = None,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    ) -> None:
        """Initialize the provider.

        Args:
            exclude_dirs: Directory names to skip (defaults to DEFAULT_EXCLUDE_DIRS)
            extensions: Source extensions without the dot (defaults to CODE_EXTENSIONS)
            max_file_bytes: Files larger than this are not listed
        """
        self.exclude_dirs = frozenset(DEFAULT_EXCLUDE_DIRS if exclude_dirs is None else exclude_dirs)
        self.extensions = frozenset(
            ext.lower().lstrip(".") for ext in (CODE_EXTENSIONS if extensions is None else extensions)
        )
        self.max_file_bytes = max_file_bytes

    def _root(self, project: str) -> Path:
        root = Path(project).expanduser().resolve()
        if not root.is_dir():
            raise SourceError(f"Not a directory: {project}", project=project)
        return root

    def list_files(self, project: str) -> list[str]:
        root = self._root(project)
        found: list[str] = []

        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in self.exclude_dirs)
            for filename in filenames:
                if not is_code_file(filename, self.extensions):
                    continue
                full_path = Path(dirpath) / filename
                try:
                    size = full_path.stat().st_size
                except OSError as e:
                    logger.debug("Cannot stat %s: %s", full_path, e)
                    continue
                if size > self.max_file_bytes:
                    logger.debug("Skipping %s: %d bytes exceeds limit", full_path, size)
                    continue
                found.append(full_path.relative_to(root).as_posix())

        found.sort()
        logger.debug("Listed %d source files under %s", len(found), root)
        return found

    def read_file(self, project: str, path: str) -> str:
        full_path = self._root(project) / path
        try:
            return full_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise SourceError(f"Cannot read {path}: {e}", project=project, path=path) from e
