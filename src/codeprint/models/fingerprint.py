"""Per-file style fingerprint entities.

This module contains the immutable result of analyzing one source file:
- FunctionInfo / ClassInfo: Structural descriptors
- FileStructure: Line counts and structural descriptors
- NamingConventions: Identifier naming guesses
- FormattingPatterns: Indentation, spacing and comment habits
- DependencyUsage: Frameworks, libraries and test tooling
- FileFingerprint: The complete self-contained fingerprint
"""

from dataclasses import dataclass, field
from typing import Any

# Categorical labels
CAMEL_CASE = "camelCase"
SNAKE_CASE = "snake_case"
PASCAL_CASE = "PascalCase"
UNKNOWN = "unknown"

TABS = "tabs"
DEFAULT_INDENTATION = "2 spaces"

COMMENT_JSDOC = "jsdoc"
COMMENT_MULTI_LINE = "multi_line"
COMMENT_SINGLE_LINE = "single_line"

ERRORS_TRY_CATCH_THROW = "try-catch-throw"
ERRORS_ERROR_FIRST = "error-first-callbacks"
ERRORS_MINIMAL = "minimal"


@dataclass(frozen=True)
class FunctionInfo:
    """A detected function and the line length of its body."""

    name: str
    body_length: int

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"name": self.name, "body_length": self.body_length}


@dataclass(frozen=True)
class ClassInfo:
    """A detected class and its top-level method names."""

    name: str
    method_names: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"name": self.name, "method_names": list(self.method_names)}


@dataclass(frozen=True)
class FileStructure:
    """Line counts and structural descriptors of a file.

    Attributes:
        total_lines: Number of newline characters plus one
        blank_lines: Lines containing only whitespace
        comment_lines: Lines inside or starting a comment
        functions: Function descriptors in source order
        classes: Class descriptors in source order
    """

    total_lines: int = 0
    blank_lines: int = 0
    comment_lines: int = 0
    functions: tuple[FunctionInfo, ...] = ()
    classes: tuple[ClassInfo, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_lines": self.total_lines,
            "blank_lines": self.blank_lines,
            "comment_lines": self.comment_lines,
            "functions": [f.to_dict() for f in self.functions],
            "classes": [c.to_dict() for c in self.classes],
        }


@dataclass(frozen=True)
class NamingConventions:
    """Majority naming style per identifier class."""

    variables: str = CAMEL_CASE
    functions: str = CAMEL_CASE
    classes: str = UNKNOWN

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "variables": self.variables,
            "functions": self.functions,
            "classes": self.classes,
        }


@dataclass(frozen=True)
class FormattingPatterns:
    """Formatting habits of a file.

    Attributes:
        indentation: "N spaces" or "tabs"
        line_spacing_blocks: Mean blank-line run preceding a non-blank line
        comment_style: jsdoc, multi_line or single_line
    """

    indentation: str = DEFAULT_INDENTATION
    line_spacing_blocks: int = 0
    comment_style: str = COMMENT_SINGLE_LINE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "indentation": self.indentation,
            "line_spacing_blocks": self.line_spacing_blocks,
            "comment_style": self.comment_style,
        }


@dataclass(frozen=True)
class DependencyUsage:
    """Import identifiers bucketed by kind. Duplicates are kept."""

    frameworks: tuple[str, ...] = ()
    libraries: tuple[str, ...] = ()
    testing_tools: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "frameworks": list(self.frameworks),
            "libraries": list(self.libraries),
            "testing_tools": list(self.testing_tools),
        }


@dataclass(frozen=True)
class FileFingerprint:
    """Style fingerprint of a single file.

    Self-contained: never references another file. Created once by the
    extractor and consumed once by the aggregator.
    """

    structure: FileStructure = field(default_factory=FileStructure)
    naming: NamingConventions = field(default_factory=NamingConventions)
    formatting: FormattingPatterns = field(default_factory=FormattingPatterns)
    error_handling: str = ERRORS_MINIMAL
    dependencies: DependencyUsage = field(default_factory=DependencyUsage)

    @classmethod
    def empty(cls, total_lines: int = 0) -> "FileFingerprint":
        """Create a zero-valued fingerprint for input that could not be analyzed."""
        return cls(structure=FileStructure(total_lines=total_lines))

    def to_dict(self) -> dict[str, Any]:
        """Convert to the nested dictionary shape folded by the aggregator."""
        return {
            "structure": self.structure.to_dict(),
            "naming": self.naming.to_dict(),
            "formatting": self.formatting.to_dict(),
            "error_handling": self.error_handling,
            "dependencies": self.dependencies.to_dict(),
        }
