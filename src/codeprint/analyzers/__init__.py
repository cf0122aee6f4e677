"""Style analyzers.

Leaves first:
- scanning: Hard caps and bounded regex helpers
- dependencies: Import extraction and framework / library / test tool buckets
- extractor: One file's text to a FileFingerprint
- confidence: Reliability estimate of an aggregate profile
- aggregator: Ordered fold of fingerprints into an AggregateProfile
"""

from codeprint.analyzers.aggregator import NumericMerge, fold, merge
from codeprint.analyzers.confidence import (
    CONFIDENCE_THRESHOLDS,
    categorical_agreement,
    estimate_confidence,
    finalize_profile,
)
from codeprint.analyzers.dependencies import (
    KNOWN_FRAMEWORKS,
    KNOWN_TESTING_TOOLS,
    classify_import,
    detect_testing_tools,
    extract_imports,
    identify_frameworks,
    identify_libraries,
    is_relative_import,
)
from codeprint.analyzers.extractor import StyleExtractor, extract_fingerprint
from codeprint.analyzers.scanning import DEFAULT_LIMITS, ScanLimits

__all__ = [
    "CONFIDENCE_THRESHOLDS",
    "DEFAULT_LIMITS",
    "KNOWN_FRAMEWORKS",
    "KNOWN_TESTING_TOOLS",
    "NumericMerge",
    "ScanLimits",
    "StyleExtractor",
    "categorical_agreement",
    "classify_import",
    "detect_testing_tools",
    "estimate_confidence",
    "extract_fingerprint",
    "extract_imports",
    "finalize_profile",
    "fold",
    "identify_frameworks",
    "identify_libraries",
    "is_relative_import",
    "merge",
]
