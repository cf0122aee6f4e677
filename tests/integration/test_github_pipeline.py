"""Integration tests for analyzing GitHub projects end to end.

The GitHub API is served by httpx.MockTransport from the bundled sample
project, so the results must match a local analysis of the same files.
"""

import base64
from pathlib import Path

import httpx
import pytest

from codeprint.models import AnalysisStatus
from codeprint.pipeline import PipelineOptions, StylePipeline
from codeprint.sources.github import GitHubSourceProvider
from codeprint.sources.local import LocalSourceProvider
from tests.fixtures import JS_PROJECT_FILES, JS_PROJECT_PATH


def _serve_directory(root: Path, full_name: str) -> httpx.MockTransport:
    """Serve a directory as the HEAD tree of one repository."""
    tree_path = f"/repos/{full_name}/git/trees/HEAD"
    contents_prefix = f"/repos/{full_name}/contents/"

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path == tree_path:
            entries = [
                {"path": p.relative_to(root).as_posix(), "type": "blob"}
                for p in root.rglob("*")
                if p.is_file()
            ]
            return httpx.Response(200, json={"tree": entries, "truncated": False})
        if path.startswith(contents_prefix):
            file_path = root / path[len(contents_prefix) :]
            if not file_path.is_file():
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(
                200,
                json={
                    "type": "file",
                    "encoding": "base64",
                    "content": base64.b64encode(file_path.read_bytes()).decode(),
                },
            )
        return httpx.Response(404, json={"message": "Not Found"})

    return httpx.MockTransport(handler)


@pytest.fixture
def github_provider() -> GitHubSourceProvider:
    """GitHub provider backed by the sample project."""
    return GitHubSourceProvider(
        token="test-token",
        transport=_serve_directory(JS_PROJECT_PATH, "acme/js-project"),
        retry_base_delay=0,
        max_rate_limit_wait=0,
    )


class TestGitHubPipeline:
    """Tests for the pipeline over the GitHub provider."""

    def test_matches_local_analysis(self, github_provider: GitHubSourceProvider) -> None:
        """Test a GitHub analysis equals the local analysis of the same files."""
        with github_provider:
            remote = StylePipeline().run(github_provider, "https://github.com/acme/js-project")
        local = StylePipeline().run(LocalSourceProvider(), str(JS_PROJECT_PATH))

        assert remote.status == AnalysisStatus.COMPLETED
        assert remote.files_analyzed == [f"acme/js-project:{p}" for p in JS_PROJECT_FILES]
        assert remote.profile.fields == local.profile.fields
        assert remote.profile.confidence == local.profile.confidence

    def test_max_files(self, github_provider: GitHubSourceProvider) -> None:
        """Test max_files applies to remote listings."""
        with github_provider:
            result = StylePipeline().run(
                github_provider, "acme/js-project", PipelineOptions(max_files=2, workers=2)
            )

        assert len(result.files_analyzed) == 2
        assert result.profile.file_count == 2
