"""codeprint template rendering.

Jinja2-based markdown rendering of style profiles with deterministic output.
"""

from codeprint.templates.renderer import ProfileRenderer, format_datetime

__all__ = ["ProfileRenderer", "format_datetime"]
