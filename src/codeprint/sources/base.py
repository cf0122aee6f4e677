"""Abstract base class for source providers.

A provider turns a project identifier (a directory, a GitHub repository, a
GitHub user) into an ordered list of file identifiers and the raw text of
each file. Providers hold connection state only; they never see fingerprints
or profiles.
"""

from abc import ABC, abstractmethod
from pathlib import PurePosixPath

# File extensions considered source code (without the leading dot)
CODE_EXTENSIONS: frozenset[str] = frozenset(
    {"js", "ts", "jsx", "tsx", "mjs", "cjs", "py", "java", "c", "cpp", "cs"}
)


def is_code_file(path: str, extensions: frozenset[str] | set[str] = CODE_EXTENSIONS) -> bool:
    """Check whether a path has one of the given source extensions.

    Args:
        path: File path or identifier (POSIX separators)
        extensions: Extensions without the leading dot

    Returns:
        True if the suffix (case-insensitive) is in ``extensions``
    """
    suffix = PurePosixPath(path).suffix.lower().lstrip(".")
    return bool(suffix) and suffix in extensions


class SourceProvider(ABC):
    """Abstract interface for anything that yields (path, text) pairs.

    Attributes:
        name: Provider identifier (e.g., "local", "github")
    """

    name: str = "source"

    @abstractmethod
    def list_files(self, project: str) -> list[str]:
        """List the file identifiers of a project.

        Args:
            project: Project identifier

        Returns:
            File identifiers in a deterministic order

        Raises:
            SourceError: If the project cannot be listed
        """
        pass

    @abstractmethod
    def read_file(self, project: str, path: str) -> str:
        """Read the raw text of one file.

        Args:
            project: Project identifier
            path: File identifier returned by ``list_files``

        Returns:
            File content

        Raises:
            SourceError: If the file cannot be read
        """
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass

    def __enter__(self) -> "SourceProvider":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
