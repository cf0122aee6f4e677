"""codeprint data models.

This module exports all core entities used throughout the application:
- FileFingerprint: Style signals of a single file
- AggregateProfile: Fingerprints folded across a file set
- Confidence / ConfidenceLevel: Reliability annotation of a profile
- AnalysisResult: A finalized profile plus run metadata
- AnalysisError: Non-fatal errors encountered during analysis
"""

from codeprint.models.analysis import AnalysisError, AnalysisResult, AnalysisStatus
from codeprint.models.fingerprint import (
    ClassInfo,
    DependencyUsage,
    FileFingerprint,
    FileStructure,
    FormattingPatterns,
    FunctionInfo,
    NamingConventions,
)
from codeprint.models.profile import AggregateProfile, Confidence, ConfidenceLevel

__all__ = [
    "AggregateProfile",
    "AnalysisError",
    "AnalysisResult",
    "AnalysisStatus",
    "ClassInfo",
    "Confidence",
    "ConfidenceLevel",
    "DependencyUsage",
    "FileFingerprint",
    "FileStructure",
    "FormattingPatterns",
    "FunctionInfo",
    "NamingConventions",
]
