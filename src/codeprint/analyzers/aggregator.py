"""Fold per-file fingerprints into a repository-level profile.

Merge rules, applied recursively through the nested fingerprint shape:
- Absent or None values in the incoming fingerprint are skipped
- A field the accumulator has never seen takes the incoming value verbatim
- Lists are concatenated (order preserved, duplicates kept)
- Mappings are merged key by key
- Numbers are averaged pairwise, (old + new) / 2, or as a true running mean
- Any other scalar is categorical: the last folded value wins
- A field whose kind differs between accumulator and fingerprint is skipped

Pairwise averaging (the default) weights later files more heavily and is
order-dependent: folding 10, 20, 30 yields 22.5. NumericMerge.CUMULATIVE
yields the true running mean (20).
"""

import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any

from codeprint.analyzers.confidence import finalize_profile
from codeprint.models.fingerprint import FileFingerprint
from codeprint.models.profile import AggregateProfile, join_path

logger = logging.getLogger(__name__)


class NumericMerge(Enum):
    """How numeric leaves are combined across files."""

    PAIRWISE = "pairwise"
    CUMULATIVE = "cumulative"


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _kind(value: Any) -> str:
    if isinstance(value, Mapping):
        return "mapping"
    if isinstance(value, list | tuple):
        return "list"
    if _is_number(value):
        return "number"
    return "scalar"


def _as_mapping(fingerprint: Any) -> Mapping[str, Any] | None:
    if isinstance(fingerprint, FileFingerprint):
        return fingerprint.to_dict()
    if isinstance(fingerprint, Mapping):
        return fingerprint
    return None


def _merge_fields(
    profile: AggregateProfile,
    target: dict[str, Any],
    source: Mapping[str, Any],
    path: str,
    numeric_merge: NumericMerge,
) -> None:
    """Merge ``source`` into ``target`` in place, updating tallies and samples."""
    for key, value in source.items():
        if value is None:
            continue

        field_path = join_path(path, str(key))
        kind = _kind(value)
        existing = target.get(key)

        if existing is not None and _kind(existing) != kind:
            logger.debug(
                "Skipping field %s: cannot merge %s into %s",
                field_path,
                kind,
                _kind(existing),
            )
            continue

        if kind == "mapping":
            if existing is None:
                existing = target[key] = {}
            _merge_fields(profile, existing, value, field_path, numeric_merge)

        elif kind == "list":
            items = [_plain(item) for item in value]
            if existing is None:
                target[key] = items
            else:
                existing.extend(items)

        elif kind == "number":
            count = profile.samples.get(field_path, 0)
            if existing is None:
                target[key] = value
            elif numeric_merge is NumericMerge.CUMULATIVE:
                target[key] = existing + (value - existing) / (count + 1)
            else:
                target[key] = (existing + value) / 2
            profile.samples[field_path] = count + 1

        else:
            target[key] = value
            tally = profile.tallies.setdefault(field_path, {})
            tally[str(value)] = tally.get(str(value), 0) + 1


def _plain(value: Any) -> Any:
    """Copy a list item into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_plain(v) for v in value]
    return value


def _fold_into(
    profile: AggregateProfile,
    fingerprint: FileFingerprint | Mapping[str, Any],
    numeric_merge: NumericMerge,
) -> None:
    """Fold one fingerprint into a profile the caller owns."""
    data = _as_mapping(fingerprint)
    if data is None:
        logger.warning(
            "Skipping malformed fingerprint of type %s", type(fingerprint).__name__
        )
    else:
        _merge_fields(profile, profile.fields, data, "", numeric_merge)
    profile.file_count += 1


def merge(
    accumulator: AggregateProfile,
    fingerprint: FileFingerprint | Mapping[str, Any],
    numeric_merge: NumericMerge = NumericMerge.PAIRWISE,
) -> AggregateProfile:
    """Fold one fingerprint into a profile.

    The accumulator is not modified; a new profile is returned. Any
    confidence on the accumulator is dropped since it no longer applies.

    Args:
        accumulator: Profile folded so far
        fingerprint: Next fingerprint (FileFingerprint or equivalent mapping)
        numeric_merge: Averaging mode for numeric fields

    Returns:
        New AggregateProfile with file_count incremented by one
    """
    profile = accumulator.copy()
    profile.confidence = None
    _fold_into(profile, fingerprint, numeric_merge)
    return profile


def fold(
    fingerprints: Iterable[FileFingerprint | Mapping[str, Any]],
    numeric_merge: NumericMerge = NumericMerge.PAIRWISE,
    finalize: bool = True,
    initial: AggregateProfile | None = None,
) -> AggregateProfile:
    """Fold fingerprints left to right into one profile.

    Args:
        fingerprints: Fingerprints in file arrival order
        numeric_merge: Averaging mode for numeric fields
        finalize: Attach a confidence estimate after the last fingerprint
        initial: Profile to continue from (not modified)

    Returns:
        Aggregate profile
    """
    profile = initial.copy() if initial is not None else AggregateProfile()
    profile.confidence = None

    for fingerprint in fingerprints:
        _fold_into(profile, fingerprint, numeric_merge)

    logger.debug("Folded %d fingerprints (%s averaging)", profile.file_count, numeric_merge.value)
    return finalize_profile(profile) if finalize else profile
