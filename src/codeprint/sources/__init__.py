"""Source providers yielding (path, text) pairs for a project."""

from codeprint.errors import SourceError
from codeprint.sources.base import CODE_EXTENSIONS, SourceProvider, is_code_file
from codeprint.sources.github import GitHubSourceProvider, parse_repo_url, split_file_id
from codeprint.sources.local import DEFAULT_EXCLUDE_DIRS, LocalSourceProvider

__all__ = [
    "CODE_EXTENSIONS",
    "DEFAULT_EXCLUDE_DIRS",
    "GitHubSourceProvider",
    "LocalSourceProvider",
    "SourceError",
    "SourceProvider",
    "is_code_file",
    "parse_repo_url",
    "split_file_id",
]
