"""Confidence estimation for aggregate profiles.

Maps an agreement ratio (samples agreeing with the chosen categorical values
over samples considered) to a percentage and a level:
- >= 80: high
- >= 60: medium
- >= 40: low
- otherwise (or no samples): very-low
"""

import logging

from codeprint.models.profile import AggregateProfile, Confidence, ConfidenceLevel

logger = logging.getLogger(__name__)

# Lower bounds, inclusive, checked in order
CONFIDENCE_THRESHOLDS: tuple[tuple[int, ConfidenceLevel], ...] = (
    (80, ConfidenceLevel.HIGH),
    (60, ConfidenceLevel.MEDIUM),
    (40, ConfidenceLevel.LOW),
)


def estimate_confidence(metric: float, total: float) -> Confidence:
    """Estimate confidence from an agreement ratio.

    Args:
        metric: Samples that agreed with the chosen value
        total: Samples considered

    Returns:
        Confidence with the percentage rounded half-up to an integer
    """
    if total <= 0:
        return Confidence(level=ConfidenceLevel.VERY_LOW, percentage=0)

    percentage = int(metric / total * 100 + 0.5)
    percentage = max(0, min(100, percentage))

    for lower_bound, level in CONFIDENCE_THRESHOLDS:
        if percentage >= lower_bound:
            return Confidence(level=level, percentage=percentage)
    return Confidence(level=ConfidenceLevel.VERY_LOW, percentage=percentage)


def categorical_agreement(profile: AggregateProfile) -> tuple[int, int]:
    """Sum agreement over every categorical field of a profile.

    Args:
        profile: Aggregate profile with tallies

    Returns:
        Tuple of (agreeing samples, total samples)
    """
    metric = 0
    total = 0
    for path in profile.tallies:
        agreeing, reported = profile.agreement(path)
        metric += agreeing
        total += reported
    return metric, total


def finalize_profile(profile: AggregateProfile) -> AggregateProfile:
    """Attach a confidence estimate to a copy of the profile.

    Args:
        profile: Profile after the last fold

    Returns:
        Finalized profile
    """
    finalized = profile.copy()
    if profile.is_empty:
        metric, total = 0, 0
    else:
        metric, total = categorical_agreement(profile)
    finalized.confidence = estimate_confidence(metric, total)

    logger.debug(
        "Profile confidence %s (%d%%) from %d/%d agreeing samples over %d files",
        finalized.confidence.level.value,
        finalized.confidence.percentage,
        metric,
        total,
        profile.file_count,
    )
    return finalized
