"""Exception hierarchy shared across codeprint.

Configuration problems are reported with the builtin ValueError and
FileNotFoundError; everything raised by codeprint's own I/O layers derives
from CodeprintError.
"""


class CodeprintError(Exception):
    """Base class for codeprint errors."""

    pass


class SourceError(CodeprintError):
    """A source provider could not list or read a file.

    Attributes:
        project: Project identifier the provider was asked about
        path: File identifier, if the failure concerns a single file
    """

    def __init__(self, message: str, project: str | None = None, path: str | None = None) -> None:
        self.project = project
        self.path = path
        super().__init__(message)
