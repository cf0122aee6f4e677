"""Import extraction and dependency classification.

Buckets detected import targets into frameworks and libraries using a fixed
framework vocabulary, and detects test tooling anywhere in a file's text:
- Frameworks: case-insensitive substring match against KNOWN_FRAMEWORKS
- Libraries: every other import target that is not a relative path
- Testing tools: case-insensitive substring match against KNOWN_TESTING_TOOLS
"""

import re

from codeprint.analyzers.scanning import DEFAULT_LIMITS, ScanLimits, bounded_finditer

# Closed framework vocabulary, matched by substring ("react-dom" is React)
KNOWN_FRAMEWORKS: tuple[str, ...] = (
    "react",
    "vue",
    "angular",
    "next",
    "nuxt",
    "express",
    "koa",
    "nest",
    "svelte",
    "django",
    "flask",
    "fastapi",
)

# Test tool needle -> display name
KNOWN_TESTING_TOOLS: dict[str, str] = {
    "jest": "Jest",
    "mocha": "Mocha",
    "chai": "Chai",
    "enzyme": "Enzyme",
    "testing-library": "Testing Library",
    "vitest": "Vitest",
    "jasmine": "Jasmine",
    "cypress": "Cypress",
    "playwright": "Playwright",
    "pytest": "pytest",
}

RELATIVE_IMPORT_MARKER = "."

FRAMEWORK = "framework"
LIBRARY = "library"


def _compile_import_patterns(limits: ScanLimits) -> tuple[re.Pattern[str], re.Pattern[str]]:
    """Build the quoted-module and Python import patterns for the given caps."""
    target = rf"[^'\"\n]{{1,{limits.max_import_target}}}"
    quoted = re.compile(
        r"(?:\bfrom\s+|\bimport\s*\(?\s*|\brequire\s*\(\s*)"
        rf"(['\"])({target})\1"
    )
    # Possessive so a failed lookahead never backtracks into the module name
    dotted = rf"[\w.]{{1,{limits.max_import_target}}}+"
    python = re.compile(
        rf"^[ \t]*from[ \t]+({dotted})[ \t]+import\b"
        rf"|^[ \t]*import[ \t]+({dotted})(?![^\n]{{0,{limits.max_import_clause}}}?\bfrom\b)",
        re.MULTILINE,
    )
    return quoted, python


_DEFAULT_PATTERNS = _compile_import_patterns(DEFAULT_LIMITS)


def extract_imports(content: str, limits: ScanLimits = DEFAULT_LIMITS) -> list[str]:
    """Extract import targets in source order.

    Recognizes ES module imports and re-exports, dynamic ``import()``,
    CommonJS ``require()`` and Python ``import`` / ``from ... import``.

    Args:
        content: File content
        limits: Scan caps

    Returns:
        Import target strings, duplicates preserved
    """
    if limits == DEFAULT_LIMITS:
        quoted, python = _DEFAULT_PATTERNS
    else:
        quoted, python = _compile_import_patterns(limits)

    found: list[tuple[int, str]] = []
    for match in bounded_finditer(quoted, content, limits.max_matches):
        found.append((match.start(), match.group(2)))
    for match in bounded_finditer(python, content, limits.max_matches):
        found.append((match.start(), match.group(1) or match.group(2)))

    found.sort(key=lambda item: item[0])
    return [target for _, target in found[: limits.max_matches]]


def is_framework(target: str) -> bool:
    """Check whether an import target names a known framework."""
    lowered = target.lower()
    return any(framework in lowered for framework in KNOWN_FRAMEWORKS)


def is_relative_import(target: str) -> bool:
    """Check whether an import target is a relative path."""
    return target.startswith(RELATIVE_IMPORT_MARKER)


def classify_import(target: str) -> str | None:
    """Classify an import target.

    Args:
        target: Import target string (e.g. "react-dom", "./utils")

    Returns:
        "framework", "library", or None for relative imports
    """
    if is_framework(target):
        return FRAMEWORK
    if is_relative_import(target):
        return None
    return LIBRARY


def identify_frameworks(imports: list[str]) -> list[str]:
    """Return the imports that match the framework vocabulary."""
    return [imp for imp in imports if classify_import(imp) == FRAMEWORK]


def identify_libraries(imports: list[str]) -> list[str]:
    """Return non-relative imports that are not frameworks."""
    return [imp for imp in imports if classify_import(imp) == LIBRARY]


def detect_testing_tools(content: str) -> list[str]:
    """Detect test tooling mentioned anywhere in the text.

    Args:
        content: File content

    Returns:
        Display names of detected tools, in vocabulary order
    """
    lowered = content.lower()
    return [name for needle, name in KNOWN_TESTING_TOOLS.items() if needle in lowered]
