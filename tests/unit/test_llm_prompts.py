"""Unit tests for generation prompt construction."""

import pytest

from codeprint.analyzers.aggregator import fold
from codeprint.analyzers.extractor import extract_fingerprint
from codeprint.llm.prompts import DEFAULT_PREFERENCES, build_generation_prompt, style_preferences
from codeprint.models import AggregateProfile


class TestStylePreferences:
    """Tests for style_preferences."""

    def test_empty_profile_uses_defaults(self) -> None:
        """Test an empty profile yields the default preferences."""
        assert style_preferences(AggregateProfile()) == DEFAULT_PREFERENCES

    def test_unknown_class_naming_falls_back(self) -> None:
        """Test unknown categorical values are replaced by defaults."""
        profile = fold([{"naming": {"variables": "snake_case", "classes": "unknown"}}])
        naming = style_preferences(profile)["naming"]

        assert naming == {
            "variables": "snake_case",
            "functions": "camelCase",
            "classes": "PascalCase",
        }

    def test_from_real_fingerprint(self, javascript_source: str) -> None:
        """Test preferences derived from an extracted fingerprint."""
        profile = fold([extract_fingerprint(javascript_source)])
        prefs = style_preferences(profile)

        assert prefs["formatting"] == {
            "indentation": "2 spaces",
            "line_spacing": 1,
            "comment_style": "jsdoc",
        }
        # bodies of 8 and 4 lines
        assert prefs["structure"]["function_length"] == 6
        assert prefs["structure"]["class_structure"] == "modular, ~2 methods per class"
        assert prefs["structure"]["error_handling"] == "try-catch-throw"
        assert prefs["dependencies"]["frameworks"] == ["react"]
        assert prefs["dependencies"]["libraries"] == ["axios"]

    def test_dependencies_deduplicated(self) -> None:
        """Test repeated dependencies collapse in first-seen order."""
        profile = fold(
            [
                {"dependencies": {"libraries": ["lodash", "axios"]}},
                {"dependencies": {"libraries": ["axios", "lodash", "chalk"]}},
            ]
        )

        assert style_preferences(profile)["dependencies"]["libraries"] == [
            "lodash",
            "axios",
            "chalk",
        ]

    def test_line_spacing_rounded(self) -> None:
        """Test averaged spacing is rounded half up."""
        profile = fold(
            [
                {"formatting": {"line_spacing_blocks": 1}},
                {"formatting": {"line_spacing_blocks": 2}},
            ]
        )

        assert style_preferences(profile)["formatting"]["line_spacing"] == 2

    def test_function_length_at_least_one(self) -> None:
        """Test empty function bodies still ask for one line."""
        profile = fold([{"structure": {"functions": [{"name": "f", "body_length": 0}]}}])

        assert style_preferences(profile)["structure"]["function_length"] == 1


class TestBuildGenerationPrompt:
    """Tests for build_generation_prompt."""

    def test_prompt_sections(self, javascript_source: str) -> None:
        """Test the specification and every guideline appear in the prompt."""
        profile = fold([extract_fingerprint(javascript_source)])

        prompt = build_generation_prompt(profile, "  A function that sums a list.  ")

        assert "Specification:\nA function that sums a list.\n" in prompt
        assert "- Variables: camelCase" in prompt
        assert "- Classes: PascalCase" in prompt
        assert "- Indentation: 2 spaces" in prompt
        assert "- Comments: jsdoc" in prompt
        assert "- Function Length: ~6 lines" in prompt
        assert "- Frameworks: react" in prompt
        assert "- Testing Tools: none" in prompt

    def test_empty_profile_prompt(self) -> None:
        """Test an empty profile still produces a complete prompt."""
        prompt = build_generation_prompt(AggregateProfile(), "Parse a CSV file")

        assert "- Error Handling: try-catch-throw" in prompt
        assert "- Libraries: none" in prompt

    @pytest.mark.parametrize("spec", ["", "   \n"])
    def test_empty_specification(self, spec: str) -> None:
        """Test blank specifications are rejected."""
        with pytest.raises(ValueError, match="Specification cannot be empty"):
            build_generation_prompt(AggregateProfile(), spec)
