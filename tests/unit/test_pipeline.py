"""Unit tests for the analysis pipeline."""

import pytest

from codeprint.analyzers.aggregator import NumericMerge
from codeprint.config import AnalysisConfig, CodeprintConfig
from codeprint.errors import SourceError
from codeprint.models import AnalysisResult, AnalysisStatus, ConfidenceLevel
from codeprint.pipeline import PipelineOptions, StylePipeline
from codeprint.sources.base import SourceProvider
from codeprint.sources.local import LocalSourceProvider
from tests.fixtures import JS_PROJECT_FILES, JS_PROJECT_PATH


class FakeProvider(SourceProvider):
    """In-memory provider; files mapped to None fail to read."""

    name = "fake"

    def __init__(self, files: dict[str, str | None]) -> None:
        self.files = files
        self.read_calls: list[str] = []

    def list_files(self, project: str) -> list[str]:
        if project == "missing":
            raise SourceError("no such project", project=project)
        return list(self.files)

    def read_file(self, project: str, path: str) -> str:
        self.read_calls.append(path)
        content = self.files[path]
        if content is None:
            raise SourceError(f"cannot read {path}", project=project, path=path)
        return content


class TestSampleProject:
    """Tests against the bundled JavaScript project."""

    @pytest.fixture
    def result(self) -> AnalysisResult:
        return StylePipeline().run(LocalSourceProvider(), str(JS_PROJECT_PATH))

    def test_status_and_files(self, result: AnalysisResult) -> None:
        """Test every file is analyzed in listing order."""
        assert result.status == AnalysisStatus.COMPLETED
        assert result.files_analyzed == JS_PROJECT_FILES
        assert result.profile.file_count == 3
        assert not result.has_errors()
        assert result.duration_seconds >= 0

    def test_profile_values(self, result: AnalysisResult) -> None:
        """Test the folded profile of the sample project."""
        profile = result.profile

        assert profile.get("naming.variables") == "camelCase"
        assert profile.get("naming.functions") == "camelCase"
        assert profile.get("formatting.indentation") == "4 spaces"
        assert profile.get("formatting.comment_style") == "single_line"
        assert profile.get("error_handling") == "minimal"

    def test_profile_tallies(self, result: AnalysisResult) -> None:
        """Test classes are found in one file only."""
        tally = result.profile.tallies["naming.classes"]

        assert tally == {"PascalCase": 1, "unknown": 2}
        assert result.profile.dominant("naming.classes") == "unknown"

    def test_dependencies(self, result: AnalysisResult) -> None:
        """Test dependency buckets across files."""
        profile = result.profile

        assert "express" in profile.get("dependencies.frameworks")
        assert "Jest" in profile.get("dependencies.testing_tools")
        assert "lodash" in profile.get("dependencies.libraries")

    def test_confidence(self, result: AnalysisResult) -> None:
        """Test the profile is finalized with a confidence estimate."""
        confidence = result.profile.confidence

        assert confidence is not None
        assert confidence.level == ConfidenceLevel.MEDIUM
        assert confidence.percentage == 78

    def test_max_files(self) -> None:
        """Test max_files truncates in listing order."""
        result = StylePipeline().run(
            LocalSourceProvider(), str(JS_PROJECT_PATH), PipelineOptions(max_files=1)
        )

        assert result.files_analyzed == JS_PROJECT_FILES[:1]
        assert result.profile.file_count == 1


class TestFailureHandling:
    """Tests for unreadable files and failing listings."""

    def test_unreadable_file_skipped(self) -> None:
        """Test one unreadable file is recorded and skipped."""
        provider = FakeProvider({"a.js": "const a = 1;", "b.js": None, "c.js": "let c = 2;"})

        result = StylePipeline().run(provider, "demo")

        assert result.status == AnalysisStatus.COMPLETED
        assert result.files_analyzed == ["a.js", "c.js"]
        assert len(result.errors) == 1
        assert result.errors[0].file_path == "b.js"
        assert result.errors[0].component == "source"
        assert result.errors[0].recoverable

    def test_all_files_unreadable(self) -> None:
        """Test a run where nothing could be read fails."""
        provider = FakeProvider({"a.js": None, "b.js": None})

        result = StylePipeline().run(provider, "demo")

        assert result.status == AnalysisStatus.FAILED
        assert result.profile.is_empty
        assert len(result.errors) == 2

    def test_empty_project_completes(self) -> None:
        """Test a project without files completes with an empty profile."""
        result = StylePipeline().run(FakeProvider({}), "demo")

        assert result.status == AnalysisStatus.COMPLETED
        assert result.profile.is_empty
        assert result.profile.confidence.level == ConfidenceLevel.VERY_LOW

    def test_listing_failure_propagates(self) -> None:
        """Test a listing failure is not swallowed."""
        with pytest.raises(SourceError, match="no such project"):
            StylePipeline().run(FakeProvider({}), "missing")

    def test_fail_fast(self) -> None:
        """Test fail_fast raises on the first unreadable file."""
        provider = FakeProvider({"a.js": None, "b.js": "let b = 1;"})

        with pytest.raises(SourceError, match="a.js") as exc_info:
            StylePipeline().run(provider, "demo", PipelineOptions(fail_fast=True, workers=1))

        assert exc_info.value.path == "a.js"


class TestOptions:
    """Tests for option and config precedence."""

    def test_numeric_merge_from_config(self) -> None:
        """Test the configured averaging mode is used."""
        config = CodeprintConfig(analysis=AnalysisConfig(numeric_merge="cumulative"))
        files = {f"{i}.js": "x\n" * n for i, n in enumerate([1, 2, 3])}

        result = StylePipeline(config).run(FakeProvider(files), "demo")

        # total_lines 2, 3, 4
        assert result.profile.get("structure.total_lines") == pytest.approx(3)

    def test_numeric_merge_option_overrides(self) -> None:
        """Test a per-run averaging mode wins over the config."""
        config = CodeprintConfig(analysis=AnalysisConfig(numeric_merge="cumulative"))
        files = {f"{i}.js": "x\n" * n for i, n in enumerate([1, 2, 3])}

        result = StylePipeline(config).run(
            FakeProvider(files), "demo", PipelineOptions(numeric_merge=NumericMerge.PAIRWISE)
        )

        assert result.profile.get("structure.total_lines") == pytest.approx(3.25)

    def test_max_files_from_config(self) -> None:
        """Test the configured file cap applies when no option is given."""
        config = CodeprintConfig(analysis=AnalysisConfig(max_files=2))
        provider = FakeProvider({"a.js": "a", "b.js": "b", "c.js": "c"})

        result = StylePipeline(config).run(provider, "demo")

        assert result.files_analyzed == ["a.js", "b.js"]
        assert sorted(provider.read_calls) == ["a.js", "b.js"]
