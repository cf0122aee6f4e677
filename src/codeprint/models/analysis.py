"""Analysis result entities.

This module contains entities related to a pipeline run:
- AnalysisStatus: Outcome of a run
- AnalysisError: Non-fatal per-file errors encountered during analysis
- AnalysisResult: The finalized profile plus run metadata
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from codeprint.models.profile import AggregateProfile


class AnalysisStatus(Enum):
    """Status of an analysis run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class AnalysisError:
    """Non-fatal error encountered during analysis.

    Attributes:
        component: Component that failed (source, extractor)
        message: Error description
        file_path: File that caused the error (if applicable)
        recoverable: Whether analysis continued after this error
    """

    component: str
    message: str
    file_path: str | None = None
    recoverable: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "component": self.component,
            "message": self.message,
            "file_path": self.file_path,
            "recoverable": self.recoverable,
        }


@dataclass
class AnalysisResult:
    """Outcome of analyzing one project.

    Attributes:
        project: Project identifier handed to the source provider
        timestamp: Analysis start time (UTC)
        status: Current analysis status
        profile: Finalized aggregate profile
        files_analyzed: File identifiers folded into the profile, in fold order
        errors: Files skipped and why
        duration_seconds: Wall-clock duration of the run
    """

    project: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    status: AnalysisStatus = AnalysisStatus.PENDING
    profile: AggregateProfile = field(default_factory=AggregateProfile)
    files_analyzed: list[str] = field(default_factory=list)
    errors: list[AnalysisError] = field(default_factory=list)
    duration_seconds: float = 0.0

    def add_error(self, error: AnalysisError) -> None:
        """Add an analysis error."""
        self.errors.append(error)

    def has_errors(self) -> bool:
        """Check if any errors were recorded."""
        return len(self.errors) > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "project": self.project,
            "timestamp": self.timestamp.isoformat(),
            "status": self.status.value,
            "profile": self.profile.to_dict(),
            "files_analyzed": list(self.files_analyzed),
            "errors": [e.to_dict() for e in self.errors],
            "duration_seconds": round(self.duration_seconds, 3),
        }
