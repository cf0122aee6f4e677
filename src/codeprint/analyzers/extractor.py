"""Per-file style fingerprint extraction.

Derives a FileFingerprint from raw source text with line-oriented passes and
bounded regular-expression scans. No syntax tree is built: the heuristics
target brace-delimited languages (JavaScript, TypeScript, Java, C-family) and
recognize Python imports and error handling keywords.

Extraction never fails. Each section (structure, naming, formatting, error
handling, dependencies) degrades to its zero value on unexpected input.

Known limitation: comment and string delimiters are not tokenized, so comment
markers inside string literals (e.g. "http://") are counted as comments.
"""

import logging
import re
from collections import Counter
from collections.abc import Callable
from typing import Any, TypeVar

from codeprint.analyzers.dependencies import (
    detect_testing_tools,
    extract_imports,
    identify_frameworks,
    identify_libraries,
)
from codeprint.analyzers.scanning import (
    DEFAULT_LIMITS,
    ScanLimits,
    bounded_count,
    bounded_finditer,
    match_braces,
    top_level_offsets,
)
from codeprint.models.fingerprint import (
    CAMEL_CASE,
    COMMENT_JSDOC,
    COMMENT_MULTI_LINE,
    COMMENT_SINGLE_LINE,
    DEFAULT_INDENTATION,
    ERRORS_ERROR_FIRST,
    ERRORS_MINIMAL,
    ERRORS_TRY_CATCH_THROW,
    PASCAL_CASE,
    SNAKE_CASE,
    TABS,
    UNKNOWN,
    ClassInfo,
    DependencyUsage,
    FileFingerprint,
    FileStructure,
    FormattingPatterns,
    FunctionInfo,
    NamingConventions,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Member names that are control flow, not method declarations
_NON_METHOD_KEYWORDS = frozenset(
    {"if", "for", "while", "switch", "catch", "function", "return", "with", "do", "else"}
)

_TRY = re.compile(r"\btry\b")
_HANDLER = re.compile(r"\b(?:catch|except|finally)\b")
_RAISE = re.compile(r"\b(?:throw|raise)\b")
_ERROR_FIRST = re.compile(r"\(\s*(?:err|error)\s*,")
_SINGLE_LINE_COMMENT = re.compile(r"//[^\n]*")


class _Patterns:
    """Compiled scan patterns sized by a ScanLimits instance."""

    def __init__(self, limits: ScanLimits) -> None:
        ident = rf"[\w$]{{1,{limits.max_identifier}}}+"
        params = rf"\([^)]{{0,{limits.max_params}}}\)"
        returns = rf"(?:\s*:\s*[^{{}};=\n]{{1,{limits.max_params}}})?"
        name = rf"[a-zA-Z0-9]{{0,{limits.max_identifier}}}"

        self.function = re.compile(
            rf"(?:\bfunction\b\s*\*?\s*(?P<decl>{ident})\s*{params}{returns}"
            rf"|\b(?:const|let|var)\s+(?P<expr>{ident})\s*=\s*(?:async\s+)?function\b"
            rf"\s*\*?\s*(?:{ident})?\s*{params}{returns}"
            rf"|\b(?:const|let|var)\s+(?P<arrow>{ident})\s*=\s*(?:async\s*)?{params}"
            rf"{returns}\s*=>)\s*\{{"
        )
        self.klass = re.compile(
            rf"\bclass\s+(?P<name>{ident})[^{{}};]{{0,{limits.max_class_header}}}\{{"
        )
        self.method = re.compile(
            rf"(?:^[ \t]*|(?<=[{{}};])[ \t]*)"
            rf"(?:(?:public|private|protected|static|readonly|override|abstract|async|get|set)\s+){{0,6}}"
            rf"\*?(?P<name>{ident})\s*(?:<[^>\n]{{0,{limits.max_params}}}>)?\s*{params}"
            rf"{returns}\s*\{{",
            re.MULTILINE,
        )

        self.var_camel = re.compile(rf"\b(?:let|const|var)\s+[a-z]{name}[A-Z]")
        self.var_snake = re.compile(rf"\b(?:let|const|var)\s+[a-z][a-z0-9]{{0,{limits.max_identifier}}}_[a-z0-9]")
        self.func_camel = re.compile(r"\bfunction\s+[a-z]")
        self.func_pascal = re.compile(r"\bfunction\s+[A-Z]")
        self.class_pascal = re.compile(r"\bclass\s+[A-Z]")


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value + 0.5)


class StyleExtractor:
    """Converts one file's raw text into a FileFingerprint.

    Stateless apart from its compiled patterns, so one instance may be shared
    across threads.

    Usage:
        extractor = StyleExtractor()
        fingerprint = extractor.extract(source_text)
    """

    def __init__(self, limits: ScanLimits = DEFAULT_LIMITS) -> None:
        """Initialize the extractor.

        Args:
            limits: Hard caps applied to every scan
        """
        self.limits = limits
        self._patterns = _Patterns(limits)

    def extract(self, text: Any) -> FileFingerprint:
        """Extract the style fingerprint of one file.

        Args:
            text: Raw file content

        Returns:
            FileFingerprint; zero-valued sections for anything unparseable
        """
        if not isinstance(text, str):
            logger.debug("Cannot fingerprint non-text input of type %s", type(text).__name__)
            return FileFingerprint.empty()

        lines = text.split("\n")

        return FileFingerprint(
            structure=self._guarded(
                "structure",
                lambda: self._analyze_structure(text, lines),
                FileStructure(total_lines=len(lines)),
            ),
            naming=self._guarded("naming", lambda: self._analyze_naming(text), NamingConventions()),
            formatting=self._guarded(
                "formatting",
                lambda: self._analyze_formatting(text, lines),
                FormattingPatterns(),
            ),
            error_handling=self._guarded(
                "error handling", lambda: self._detect_error_handling(text), ERRORS_MINIMAL
            ),
            dependencies=self._guarded(
                "dependencies", lambda: self._analyze_dependencies(text), DependencyUsage()
            ),
        )

    def _guarded(self, section: str, analyze: Callable[[], T], default: T) -> T:
        """Run one analysis section, falling back to its zero value."""
        try:
            return analyze()
        except Exception as e:
            logger.debug("Degraded %s analysis: %s", section, e)
            return default

    # =========================================================================
    # Structure
    # =========================================================================

    def _analyze_structure(self, text: str, lines: list[str]) -> FileStructure:
        return FileStructure(
            total_lines=len(lines),
            blank_lines=sum(1 for line in lines if not line.strip()),
            comment_lines=self._count_comment_lines(lines),
            functions=tuple(self._extract_functions(text)),
            classes=tuple(self._extract_classes(text)),
        )

    def _count_comment_lines(self, lines: list[str]) -> int:
        """Count comment lines in a single pass with an in-block flag."""
        count = 0
        in_block = False
        for line in lines:
            stripped = line.strip()
            if in_block:
                count += 1
                if "*/" in stripped:
                    in_block = False
            elif stripped.startswith("//"):
                count += 1
            elif stripped.startswith("/*"):
                count += 1
                in_block = "*/" not in stripped[2:]
        return count

    def _extract_functions(self, text: str) -> list[FunctionInfo]:
        functions: list[FunctionInfo] = []
        for match in bounded_finditer(self._patterns.function, text, self.limits.max_matches):
            name = match.group("decl") or match.group("expr") or match.group("arrow")
            body = match_braces(text, match.end() - 1, self.limits.max_function_body)
            functions.append(FunctionInfo(name=name, body_length=body.count("\n") + 1))
        return functions

    def _extract_classes(self, text: str) -> list[ClassInfo]:
        classes: list[ClassInfo] = []
        for match in bounded_finditer(self._patterns.klass, text, self.limits.max_matches):
            body = match_braces(text, match.end() - 1, self.limits.max_class_body)
            classes.append(
                ClassInfo(name=match.group("name"), method_names=tuple(self._extract_methods(body)))
            )
        return classes

    def _extract_methods(self, class_body: str) -> list[str]:
        """Collect member declarations at the class body's top nesting level."""
        top_level = top_level_offsets(class_body)
        methods: list[str] = []
        for match in bounded_finditer(self._patterns.method, class_body, self.limits.max_matches):
            name = match.group("name")
            if name in _NON_METHOD_KEYWORDS or not top_level[match.start("name")]:
                continue
            methods.append(name)
        return methods

    # =========================================================================
    # Naming
    # =========================================================================

    def _analyze_naming(self, text: str) -> NamingConventions:
        limit = self.limits.max_matches
        patterns = self._patterns

        camel_vars = bounded_count(patterns.var_camel, text, limit)
        snake_vars = bounded_count(patterns.var_snake, text, limit)
        camel_funcs = bounded_count(patterns.func_camel, text, limit)
        pascal_funcs = bounded_count(patterns.func_pascal, text, limit)
        pascal_classes = bounded_count(patterns.class_pascal, text, limit)

        # Ties go to the first-listed style
        return NamingConventions(
            variables=SNAKE_CASE if snake_vars > camel_vars else CAMEL_CASE,
            functions=PASCAL_CASE if pascal_funcs > camel_funcs else CAMEL_CASE,
            classes=PASCAL_CASE if pascal_classes > 0 else UNKNOWN,
        )

    # =========================================================================
    # Formatting
    # =========================================================================

    def _analyze_formatting(self, text: str, lines: list[str]) -> FormattingPatterns:
        return FormattingPatterns(
            indentation=self._detect_indentation(lines),
            line_spacing_blocks=self._measure_line_spacing(lines),
            comment_style=self._detect_comment_style(text),
        )

    def _detect_indentation(self, lines: list[str]) -> str:
        """Pick spaces or tabs by majority of indented lines.

        The space width is the most common indentation step between
        consecutive lines (ties to the narrower step), or the narrowest
        indent when no step is observable.
        """
        space_samples = 0
        tab_samples = 0
        widths: list[int] = []
        steps: Counter[int] = Counter()
        previous: int | None = 0

        for line in lines:
            stripped = line.strip()
            if not stripped:
                continue
            if line.startswith("\t"):
                tab_samples += 1
                previous = None
                continue
            # Block comment continuation lines (" * ...") are aligned, not indented
            if stripped.startswith("*"):
                continue

            leading = len(line) - len(line.lstrip(" "))
            if leading >= 2:
                space_samples += 1
                widths.append(leading)
            if previous is not None and leading - previous >= 2:
                steps[leading - previous] += 1
            previous = leading

        if tab_samples > space_samples:
            return TABS
        if space_samples > tab_samples:
            if steps:
                width = min(steps.items(), key=lambda item: (-item[1], item[0]))[0]
            else:
                width = min(widths)
            return f"{width} spaces"
        return DEFAULT_INDENTATION

    def _measure_line_spacing(self, lines: list[str]) -> int:
        """Mean length of blank-line runs that precede a non-blank line."""
        runs: list[int] = []
        run = 0
        for line in lines:
            if not line.strip():
                run += 1
                continue
            if run:
                runs.append(run)
            run = 0
        if not runs:
            return 0
        return _round_half_up(sum(runs) / len(runs))

    def _detect_comment_style(self, text: str) -> str:
        single_line = bounded_count(_SINGLE_LINE_COMMENT, text, self.limits.max_matches)
        multi_line, jsdoc = self._count_block_comments(text)

        if jsdoc > 0:
            return COMMENT_JSDOC
        if multi_line > single_line:
            return COMMENT_MULTI_LINE
        return COMMENT_SINGLE_LINE

    def _count_block_comments(self, text: str) -> tuple[int, int]:
        """Count closed block comments and the doc-style subset in one linear pass.

        Returns:
            Tuple of (block comments, doc comments)
        """
        blocks = 0
        docs = 0
        index = 0
        while blocks < self.limits.max_matches:
            start = text.find("/*", index)
            if start == -1:
                break
            end = text.find("*/", start + 2)
            if end == -1:
                break
            blocks += 1
            if text.startswith("/**", start) and end >= start + 3:
                docs += 1
            index = end + 2
        return blocks, docs

    # =========================================================================
    # Error handling
    # =========================================================================

    def _detect_error_handling(self, text: str) -> str:
        guarded = bool(_TRY.search(text)) and bool(_HANDLER.search(text))
        if guarded and _RAISE.search(text):
            return ERRORS_TRY_CATCH_THROW
        if _ERROR_FIRST.search(text):
            return ERRORS_ERROR_FIRST
        return ERRORS_MINIMAL

    # =========================================================================
    # Dependencies
    # =========================================================================

    def _analyze_dependencies(self, text: str) -> DependencyUsage:
        imports = extract_imports(text, self.limits)
        return DependencyUsage(
            frameworks=tuple(identify_frameworks(imports)),
            libraries=tuple(identify_libraries(imports)),
            testing_tools=tuple(detect_testing_tools(text)),
        )


_DEFAULT_EXTRACTOR = StyleExtractor()


def extract_fingerprint(text: str, limits: ScanLimits | None = None) -> FileFingerprint:
    """Extract the style fingerprint of one file.

    Convenience function for style extraction.

    Args:
        text: Raw file content
        limits: Scan caps (defaults to DEFAULT_LIMITS)

    Returns:
        FileFingerprint for the text
    """
    if limits is None or limits == DEFAULT_LIMITS:
        return _DEFAULT_EXTRACTOR.extract(text)
    return StyleExtractor(limits).extract(text)
