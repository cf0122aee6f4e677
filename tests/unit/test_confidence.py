"""Unit tests for confidence estimation."""

import pytest

from codeprint.analyzers.aggregator import fold
from codeprint.analyzers.confidence import (
    categorical_agreement,
    estimate_confidence,
    finalize_profile,
)
from codeprint.models import AggregateProfile, ConfidenceLevel


class TestEstimateConfidence:
    """Tests for the ratio to level mapping."""

    @pytest.mark.parametrize(
        ("metric", "total", "level", "percentage"),
        [
            (80, 100, ConfidenceLevel.HIGH, 80),
            (79, 100, ConfidenceLevel.MEDIUM, 79),
            (60, 100, ConfidenceLevel.MEDIUM, 60),
            (59, 100, ConfidenceLevel.LOW, 59),
            (40, 100, ConfidenceLevel.LOW, 40),
            (39, 100, ConfidenceLevel.VERY_LOW, 39),
            (14, 18, ConfidenceLevel.MEDIUM, 78),
            (1, 1, ConfidenceLevel.HIGH, 100),
        ],
    )
    def test_thresholds(
        self, metric: int, total: int, level: ConfidenceLevel, percentage: int
    ) -> None:
        """Test inclusive lower bounds at 80, 60 and 40."""
        confidence = estimate_confidence(metric, total)

        assert confidence.level == level
        assert confidence.percentage == percentage

    def test_rounds_half_up(self) -> None:
        """Test 79.75% rounds up into the high band."""
        confidence = estimate_confidence(319, 400)

        assert confidence.percentage == 80
        assert confidence.level == ConfidenceLevel.HIGH

    def test_no_samples(self) -> None:
        """Test 0/0 is very-low with 0%."""
        confidence = estimate_confidence(0, 0)

        assert confidence.level == ConfidenceLevel.VERY_LOW
        assert confidence.percentage == 0

    def test_clamped(self) -> None:
        """Test out-of-range ratios are clamped to 0..100."""
        assert estimate_confidence(150, 100).percentage == 100
        assert estimate_confidence(-5, 100).percentage == 0


class TestProfileConfidence:
    """Tests for profile-level agreement."""

    def test_full_agreement(self) -> None:
        """Test identical categorical values give 100%."""
        profile = fold([{"style": "a"}, {"style": "a"}], finalize=False)

        assert categorical_agreement(profile) == (2, 2)
        assert finalize_profile(profile).confidence.percentage == 100

    def test_last_value_disagreeing_with_majority(self) -> None:
        """Test agreement is counted against the value the profile holds."""
        profile = fold([{"style": "a"}, {"style": "a"}, {"style": "b"}], finalize=False)

        assert categorical_agreement(profile) == (1, 3)

    def test_finalize_empty_profile(self) -> None:
        """Test an empty profile is very-low."""
        finalized = finalize_profile(AggregateProfile())

        assert finalized.confidence is not None
        assert finalized.confidence.level == ConfidenceLevel.VERY_LOW
        assert finalized.confidence.percentage == 0

    def test_finalize_does_not_mutate(self) -> None:
        """Test finalizing returns a copy."""
        profile = fold([{"style": "a"}], finalize=False)
        finalize_profile(profile)

        assert profile.confidence is None

    def test_numeric_only_profile(self) -> None:
        """Test a profile without categorical fields has no samples."""
        finalized = fold([{"n": 1}, {"n": 2}])

        assert finalized.confidence.level == ConfidenceLevel.VERY_LOW
        assert finalized.confidence.percentage == 0
