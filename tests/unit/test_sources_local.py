"""Unit tests for the local directory source provider."""

from pathlib import Path

import pytest

from codeprint.errors import SourceError
from codeprint.sources.base import is_code_file
from codeprint.sources.local import LocalSourceProvider
from tests.fixtures import JS_PROJECT_FILES, JS_PROJECT_PATH


class TestIsCodeFile:
    """Tests for extension matching."""

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("src/app.js", True),
            ("src/App.TSX", True),
            ("lib/util.py", True),
            ("README.md", False),
            ("Makefile", False),
            ("archive.js.bak", False),
        ],
    )
    def test_default_extensions(self, path: str, expected: bool) -> None:
        """Test the default source extensions."""
        assert is_code_file(path) is expected

    def test_custom_extensions(self) -> None:
        """Test a restricted extension set."""
        assert is_code_file("a.py", {"py"})
        assert not is_code_file("a.js", {"py"})


class TestListFiles:
    """Tests for LocalSourceProvider.list_files."""

    def test_sorted_and_filtered(self, temp_project: Path) -> None:
        """Test excluded directories and non-code files are skipped."""
        provider = LocalSourceProvider()

        assert provider.list_files(str(temp_project)) == ["src/helpers.py", "src/main.js"]

    def test_sample_project(self) -> None:
        """Test the bundled sample project listing."""
        assert LocalSourceProvider().list_files(str(JS_PROJECT_PATH)) == JS_PROJECT_FILES

    def test_custom_extensions(self, temp_project: Path) -> None:
        """Test extension filtering is configurable."""
        provider = LocalSourceProvider(extensions={".PY"})

        assert provider.list_files(str(temp_project)) == ["src/helpers.py"]

    def test_custom_exclude_dirs(self, temp_project: Path) -> None:
        """Test an explicit exclude set replaces the defaults."""
        provider = LocalSourceProvider(exclude_dirs={"src"})

        assert provider.list_files(str(temp_project)) == [
            ".git/hook.js",
            "node_modules/dep/index.js",
        ]

    def test_large_files_skipped(self, temp_project: Path) -> None:
        """Test files over max_file_bytes are not listed."""
        provider = LocalSourceProvider(max_file_bytes=30)

        assert provider.list_files(str(temp_project)) == ["src/main.js"]

    def test_missing_directory(self, tmp_path: Path) -> None:
        """Test a missing project raises SourceError."""
        with pytest.raises(SourceError, match="Not a directory") as exc_info:
            LocalSourceProvider().list_files(str(tmp_path / "absent"))

        assert exc_info.value.project == str(tmp_path / "absent")


class TestReadFile:
    """Tests for LocalSourceProvider.read_file."""

    def test_read(self, temp_project: Path) -> None:
        """Test reading a listed file."""
        text = LocalSourceProvider().read_file(str(temp_project), "src/main.js")

        assert text == "const appName = 'demo';\n"

    def test_invalid_utf8_replaced(self, tmp_path: Path) -> None:
        """Test undecodable bytes do not fail the read."""
        (tmp_path / "bad.js").write_bytes(b"const a = '\xff';\n")

        text = LocalSourceProvider().read_file(str(tmp_path), "bad.js")

        assert text.startswith("const a = '")

    def test_missing_file(self, temp_project: Path) -> None:
        """Test an unreadable file raises SourceError with its path."""
        with pytest.raises(SourceError) as exc_info:
            LocalSourceProvider().read_file(str(temp_project), "src/absent.js")

        assert exc_info.value.path == "src/absent.js"

    def test_context_manager(self, temp_project: Path) -> None:
        """Test providers work as context managers."""
        with LocalSourceProvider() as provider:
            assert provider.list_files(str(temp_project))
