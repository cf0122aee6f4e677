"""Repository-level style profile entities.

This module contains:
- ConfidenceLevel: Categorical reliability label
- Confidence: Reliability level plus percentage
- AggregateProfile: Fingerprints folded across an entire file set
"""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ConfidenceLevel(Enum):
    """Reliability label derived from a percentage."""

    VERY_LOW = "very-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Confidence:
    """How strongly the sampled files support a profile.

    Attributes:
        level: Categorical label
        percentage: Integer in 0..100
    """

    level: ConfidenceLevel
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"level": self.level.value, "percentage": self.percentage}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Confidence":
        """Create Confidence from dictionary."""
        return cls(
            level=ConfidenceLevel(data.get("level", ConfidenceLevel.VERY_LOW.value)),
            percentage=int(data.get("percentage", 0)),
        )


# Keys of a serialized profile that are not fingerprint fields
_METADATA_KEYS = frozenset({"file_count", "confidence", "tallies", "samples"})


def join_path(parent: str, key: str) -> str:
    """Build a dotted field path ("formatting" + "indentation")."""
    return f"{parent}.{key}" if parent else key


@dataclass
class AggregateProfile:
    """Style profile aggregated over many files.

    ``fields`` has the same nested shape as ``FileFingerprint.to_dict()``.
    Only the aggregator produces new profiles; a finalized profile (one with
    ``confidence`` set) is read-only by convention.

    Attributes:
        fields: Merged fingerprint fields
        file_count: Number of fingerprints folded so far
        confidence: Reliability annotation, set when finalized
        tallies: Per categorical path, how many files reported each value
        samples: Per numeric path, how many values were folded
    """

    fields: dict[str, Any] = field(default_factory=dict)
    file_count: int = 0
    confidence: Confidence | None = None
    tallies: dict[str, dict[str, int]] = field(default_factory=dict)
    samples: dict[str, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        """Return True if no fingerprint has been folded."""
        return self.file_count == 0

    def get(self, path: str, default: Any = None) -> Any:
        """Look up a dotted field path such as ``"naming.variables"``."""
        node: Any = self.fields
        for key in path.split("."):
            if not isinstance(node, dict) or key not in node:
                return default
            node = node[key]
        return node

    def dominant(self, path: str) -> str | None:
        """Return the value most files agreed on for a categorical path.

        Ties resolve to the value seen first.
        """
        tally = self.tallies.get(path)
        if not tally:
            return None
        best_value, best_count = None, -1
        for value, count in tally.items():
            if count > best_count:
                best_value, best_count = value, count
        return best_value

    def agreement(self, path: str) -> tuple[int, int]:
        """Return (files agreeing with the current value, files reporting) for a path."""
        tally = self.tallies.get(path, {})
        current = self.get(path)
        return tally.get(str(current), 0), sum(tally.values())

    def copy(self) -> "AggregateProfile":
        """Return a deep copy safe to mutate."""
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = copy.deepcopy(self.fields)
        data["file_count"] = self.file_count
        data["confidence"] = self.confidence.to_dict() if self.confidence else None
        data["tallies"] = copy.deepcopy(self.tallies)
        data["samples"] = dict(self.samples)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AggregateProfile":
        """Create AggregateProfile from a dictionary produced by ``to_dict``.

        Args:
            data: Serialized profile

        Returns:
            AggregateProfile instance
        """
        fields = {
            key: copy.deepcopy(value)
            for key, value in data.items()
            if key not in _METADATA_KEYS
        }
        confidence_data = data.get("confidence")
        return cls(
            fields=fields,
            file_count=int(data.get("file_count", 0)),
            confidence=Confidence.from_dict(confidence_data) if confidence_data else None,
            tallies=copy.deepcopy(data.get("tallies") or {}),
            samples=dict(data.get("samples") or {}),
        )
