"""Prompt construction for style-conformant code generation.

Translates an aggregate profile into concrete style preferences and embeds
them, with the user's specification, in a generation prompt.
"""

from typing import Any

from codeprint.models.fingerprint import (
    CAMEL_CASE,
    COMMENT_SINGLE_LINE,
    DEFAULT_INDENTATION,
    ERRORS_TRY_CATCH_THROW,
    PASCAL_CASE,
    UNKNOWN,
)
from codeprint.models.profile import AggregateProfile

SYSTEM_PROMPT = (
    "You are an expert code generator that follows specific coding styles and patterns.\n"
    "Return only code. Do not wrap it in explanations."
)

# Used for any preference the profile does not provide
DEFAULT_PREFERENCES: dict[str, Any] = {
    "naming": {
        "variables": CAMEL_CASE,
        "functions": CAMEL_CASE,
        "classes": PASCAL_CASE,
    },
    "formatting": {
        "indentation": DEFAULT_INDENTATION,
        "line_spacing": 1,
        "comment_style": COMMENT_SINGLE_LINE,
    },
    "structure": {
        "function_length": 20,
        "class_structure": "modular",
        "error_handling": ERRORS_TRY_CATCH_THROW,
    },
    "dependencies": {
        "frameworks": [],
        "libraries": [],
        "testing_tools": [],
    },
}

_GENERATION_TEMPLATE = """Please generate code following these specifications and style guidelines:

Specification:
{specification}

Style Guidelines:
1. Naming Conventions:
   - Variables: {variables}
   - Functions: {functions}
   - Classes: {classes}

2. Code Style:
   - Indentation: {indentation}
   - Line Spacing: {line_spacing} blank line(s) between blocks
   - Comments: {comment_style}

3. Structural Preferences:
   - Function Length: ~{function_length} lines
   - Error Handling: {error_handling}
   - Class Structure: {class_structure}

4. Dependencies:
   - Frameworks: {frameworks}
   - Libraries: {libraries}
   - Testing Tools: {testing_tools}

Please generate the code following these guidelines exactly."""


def _round_half_up(value: float) -> int:
    return int(value + 0.5)


def _unique(values: Any) -> list[str]:
    """Deduplicate a list of strings, keeping first occurrences in order."""
    if not isinstance(values, list):
        return []
    return list(dict.fromkeys(str(value) for value in values))


def _mean(values: list[int | float]) -> float | None:
    return sum(values) / len(values) if values else None


def _categorical(profile: AggregateProfile, path: str, default: str) -> str:
    value = profile.get(path)
    if not isinstance(value, str) or not value or value == UNKNOWN:
        return default
    return value


def style_preferences(profile: AggregateProfile) -> dict[str, Any]:
    """Derive generation preferences from an aggregate profile.

    Categorical fields use the profile's value; missing or unknown values
    fall back to DEFAULT_PREFERENCES. Function length is the mean body length
    of all folded functions. Dependency lists are deduplicated in order.

    Args:
        profile: Aggregate (ideally finalized) profile

    Returns:
        Nested preference dictionary with the DEFAULT_PREFERENCES shape
    """
    defaults = DEFAULT_PREFERENCES

    functions = profile.get("structure.functions") or []
    body_lengths = [
        fn["body_length"]
        for fn in functions
        if isinstance(fn, dict) and isinstance(fn.get("body_length"), int | float)
    ]
    mean_length = _mean(body_lengths)

    classes = profile.get("structure.classes") or []
    method_counts = [
        len(cls["method_names"])
        for cls in classes
        if isinstance(cls, dict) and isinstance(cls.get("method_names"), list)
    ]
    mean_methods = _mean(method_counts)

    line_spacing = profile.get("formatting.line_spacing_blocks")
    if isinstance(line_spacing, bool) or not isinstance(line_spacing, int | float):
        line_spacing = defaults["formatting"]["line_spacing"]

    return {
        "naming": {
            key: _categorical(profile, f"naming.{key}", default)
            for key, default in defaults["naming"].items()
        },
        "formatting": {
            "indentation": _categorical(
                profile, "formatting.indentation", defaults["formatting"]["indentation"]
            ),
            "line_spacing": _round_half_up(line_spacing),
            "comment_style": _categorical(
                profile, "formatting.comment_style", defaults["formatting"]["comment_style"]
            ),
        },
        "structure": {
            "function_length": (
                max(1, _round_half_up(mean_length))
                if mean_length is not None
                else defaults["structure"]["function_length"]
            ),
            "class_structure": (
                f"{defaults['structure']['class_structure']}, "
                f"~{_round_half_up(mean_methods)} methods per class"
                if mean_methods is not None
                else defaults["structure"]["class_structure"]
            ),
            "error_handling": _categorical(
                profile, "error_handling", defaults["structure"]["error_handling"]
            ),
        },
        "dependencies": {
            key: _unique(profile.get(f"dependencies.{key}"))
            for key in defaults["dependencies"]
        },
    }


def _join(values: list[str]) -> str:
    return ", ".join(values) if values else "none"


def build_generation_prompt(profile: AggregateProfile, specification: str) -> str:
    """Build the user prompt for generating code in a profile's style.

    Args:
        profile: Aggregate profile of the target code base
        specification: Free-text description of the code to generate

    Returns:
        Prompt text

    Raises:
        ValueError: If the specification is empty
    """
    if not specification or not specification.strip():
        raise ValueError("Specification cannot be empty")

    prefs = style_preferences(profile)
    return _GENERATION_TEMPLATE.format(
        specification=specification.strip(),
        variables=prefs["naming"]["variables"],
        functions=prefs["naming"]["functions"],
        classes=prefs["naming"]["classes"],
        indentation=prefs["formatting"]["indentation"],
        line_spacing=prefs["formatting"]["line_spacing"],
        comment_style=prefs["formatting"]["comment_style"],
        function_length=prefs["structure"]["function_length"],
        error_handling=prefs["structure"]["error_handling"],
        class_structure=prefs["structure"]["class_structure"],
        frameworks=_join(prefs["dependencies"]["frameworks"]),
        libraries=_join(prefs["dependencies"]["libraries"]),
        testing_tools=_join(prefs["dependencies"]["testing_tools"]),
    )
