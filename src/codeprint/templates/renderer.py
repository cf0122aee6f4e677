"""Markdown report rendering for analysis results.

Renders an AnalysisResult through Jinja2 templates bundled with the package.
The same result always renders to the same text.
"""

import logging
from collections import Counter
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from codeprint.llm.prompts import style_preferences
from codeprint.models.analysis import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = "profile.md.j2"

# Categorical paths shown in the agreement table, in display order
_CATEGORICAL_PATHS = (
    "naming.variables",
    "naming.functions",
    "naming.classes",
    "formatting.indentation",
    "formatting.comment_style",
    "error_handling",
)


def format_datetime(dt: datetime | str | None) -> str:
    """Format a datetime for display, e.g. ``2026-01-31 19:45:23 UTC``."""
    if dt is None:
        return "N/A"

    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt)
        except ValueError:
            return dt

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)

    return dt.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")


def _ranked(values: list[Any] | None, limit: int = 10) -> list[tuple[str, int]]:
    """Most common values with counts; ties keep first-seen order."""
    return Counter(str(v) for v in values or []).most_common(limit)


class ProfileRenderer:
    """Renders analysis results to a markdown style report.

    Usage:
        renderer = ProfileRenderer()
        markdown = renderer.render(analysis_result)
    """

    def __init__(self) -> None:
        self._env = Environment(
            loader=PackageLoader("codeprint", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["format_datetime"] = format_datetime

    def render(self, result: AnalysisResult, template_name: str = DEFAULT_TEMPLATE) -> str:
        """Render an analysis result to markdown.

        Args:
            result: Analysis result from the pipeline
            template_name: Template file to use

        Returns:
            Rendered markdown string

        Raises:
            ValueError: If the template cannot be loaded or rendered
        """
        try:
            template = self._env.get_template(template_name)
        except TemplateError as e:
            raise ValueError(f"Template not found: {template_name}") from e

        try:
            rendered = template.render(**self._build_context(result))
        except TemplateError as e:
            raise ValueError(f"Template rendering failed: {e}") from e

        logger.debug("Rendered profile report (%d characters)", len(rendered))
        return rendered

    def _build_context(self, result: AnalysisResult) -> dict[str, Any]:
        profile = result.profile
        agreement = []
        for path in _CATEGORICAL_PATHS:
            agreeing, reported = profile.agreement(path)
            if reported:
                agreement.append(
                    {
                        "field": path,
                        "value": profile.get(path),
                        "majority": profile.dominant(path),
                        "agreeing": agreeing,
                        "reported": reported,
                    }
                )

        return {
            "project": result.project,
            "timestamp": result.timestamp,
            "status": result.status.value,
            "duration_seconds": result.duration_seconds,
            "file_count": profile.file_count,
            "confidence": profile.confidence.to_dict() if profile.confidence else None,
            "preferences": style_preferences(profile),
            "agreement": agreement,
            "function_count": len(profile.get("structure.functions") or []),
            "class_count": len(profile.get("structure.classes") or []),
            "average_lines": profile.get("structure.total_lines"),
            "frameworks": _ranked(profile.get("dependencies.frameworks")),
            "libraries": _ranked(profile.get("dependencies.libraries")),
            "testing_tools": _ranked(profile.get("dependencies.testing_tools")),
            "errors": [e.to_dict() for e in result.errors],
        }

    def render_to_file(
        self,
        result: AnalysisResult,
        output_path: Path,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> Path:
        """Render an analysis result and write it to a file.

        Returns:
            Path to written file
        """
        content = self.render(result, template_name)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.info("Wrote profile report to %s", output_path)
        return output_path
