"""Bounded text scanning primitives.

Every heuristic scan in the extractor goes through these helpers so that no
single file, however large or adversarial, can produce an unbounded number of
matches or an unbounded match fragment. The caps are a safety requirement:
they keep regex scans from degrading into catastrophic backtracking.
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass
from itertools import islice


@dataclass(frozen=True)
class ScanLimits:
    """Hard caps applied to every scan.

    Attributes:
        max_matches: Maximum matches collected by a single scan
        max_identifier: Maximum characters in a captured identifier
        max_params: Maximum characters in a parameter list
        max_function_body: Maximum characters scanned for a function body
        max_class_header: Maximum characters between a class name and its brace
        max_class_body: Maximum characters scanned for a class body
        max_import_clause: Maximum characters in an import clause
        max_import_target: Maximum characters in an import target
    """

    max_matches: int = 1000
    max_identifier: int = 100
    max_params: int = 200
    max_function_body: int = 5000
    max_class_header: int = 500
    max_class_body: int = 10000
    max_import_clause: int = 500
    max_import_target: int = 200

    def __post_init__(self) -> None:
        """Validate that every cap is positive."""
        for name, value in self.__dict__.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive (got {value})")


DEFAULT_LIMITS = ScanLimits()


def bounded_finditer(pattern: re.Pattern[str], text: str, limit: int) -> Iterator[re.Match[str]]:
    """Yield at most ``limit`` matches of ``pattern`` in ``text``."""
    return islice(pattern.finditer(text), max(limit, 0))


def bounded_count(pattern: re.Pattern[str], text: str, limit: int) -> int:
    """Count matches of ``pattern`` in ``text``, stopping at ``limit``."""
    return sum(1 for _ in bounded_finditer(pattern, text, limit))


def match_braces(text: str, open_index: int, max_span: int) -> str:
    """Return the fragment between a ``{`` and its matching ``}``.

    The scan never looks further than ``max_span`` characters past the
    opening brace. When the closing brace is not found within that span, the
    fragment seen so far is returned.

    Args:
        text: Full text
        open_index: Index of the opening brace
        max_span: Maximum characters to scan

    Returns:
        Text strictly between the braces (possibly truncated)
    """
    start = open_index + 1
    end = min(len(text), start + max_span)
    depth = 1
    for index in range(start, end):
        char = text[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start:index]
    return text[start:end]


def top_level_offsets(fragment: str) -> list[bool]:
    """Mark which offsets of a brace-delimited fragment sit at nesting depth zero."""
    marks: list[bool] = []
    depth = 0
    for char in fragment:
        if char == "}":
            depth = max(depth - 1, 0)
        marks.append(depth == 0)
        if char == "{":
            depth += 1
    return marks
