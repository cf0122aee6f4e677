"""GitHub source provider with pagination, rate-limit handling, and retries.

Project identifiers:
- ``owner/repo`` or a repository URL (https or ssh): one repository
- a bare ``username``: up to ``max_repos`` repositories of that user, with at
  most ``files_per_repo`` files taken from each

File identifiers are ``owner/repo:path/in/repo``.
"""

import base64
import logging
import os
import re
import time
from collections.abc import Iterator
from typing import Any
from urllib.parse import quote, urlparse

import httpx

from codeprint.errors import SourceError
from codeprint.sources.base import CODE_EXTENSIONS, SourceProvider, is_code_file

logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://api.github.com"

_NEXT_LINK_RE = re.compile(r'<([^>]+)>;\s*rel="next"')
_USERNAME_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,38})$")
_REPO_PART_RE = re.compile(r"^[\w.-]{1,100}$")


def parse_repo_url(repo_url: str) -> tuple[str, str]:
    """Extract (owner, repo) from a repository reference.

    Handles:
      - owner/repo
      - https://github.com/owner/repo (optionally .git or trailing path)
      - git@github.com:owner/repo.git

    Raises:
        ValueError: If the reference cannot be parsed
    """
    ref = repo_url.strip().rstrip("/")

    if ref.startswith("git@"):
        _, sep, path = ref.partition(":")
        parts = path.split("/") if sep else []
    elif "://" in ref or ref.startswith("github.com/"):
        if "://" not in ref:
            ref = f"https://{ref}"
        parts = [part for part in urlparse(ref).path.split("/") if part]
    else:
        parts = ref.split("/")

    if len(parts) < 2:
        raise ValueError(f"cannot parse GitHub repo reference: {repo_url!r}")

    owner, repo = parts[0], parts[1]
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not _REPO_PART_RE.match(owner) or not _REPO_PART_RE.match(repo):
        raise ValueError(f"cannot parse GitHub repo reference: {repo_url!r}")
    return owner, repo


def split_file_id(file_id: str) -> tuple[str, str]:
    """Split an ``owner/repo:path`` identifier into (full_name, path)."""
    full_name, sep, path = file_id.partition(":")
    if not sep or not path or "/" not in full_name:
        raise ValueError(f"invalid GitHub file identifier: {file_id!r}")
    return full_name, path


class GitHubSourceProvider(SourceProvider):
    """Thin synchronous wrapper around the GitHub REST API.

    Usage:
        with GitHubSourceProvider(token="...") as provider:
            for path in provider.list_files("octocat/hello-world"):
                text = provider.read_file("octocat/hello-world", path)
    """

    name = "github"

    def __init__(
        self,
        token: str | None = None,
        api_base: str = DEFAULT_API_BASE,
        max_repos: int = 10,
        files_per_repo: int = 10,
        timeout: float = 30.0,
        max_retries: int = 3,
        retry_base_delay: float = 1.0,
        max_rate_limit_wait: float = 60.0,
        extensions: frozenset[str] | set[str] | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the provider.

        Args:
            token: Personal access token (falls back to GITHUB_TOKEN)
            api_base: REST API base URL
            max_repos: Repositories scanned for a username project
            files_per_repo: Files taken per repository for a username project
            timeout: Per-request timeout in seconds
            max_retries: Attempts per request
            retry_base_delay: First backoff delay in seconds, doubled per attempt
            max_rate_limit_wait: Upper bound on a single rate-limit sleep
            extensions: Source extensions without the dot (defaults to CODE_EXTENSIONS)
            transport: Optional httpx transport (used for testing)
        """
        if max_retries <= 0:
            raise ValueError(f"max_retries must be positive (got {max_retries})")

        self.max_repos = max_repos
        self.files_per_repo = files_per_repo
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay
        self.max_rate_limit_wait = max_rate_limit_wait
        self.extensions = frozenset(
            ext.lower().lstrip(".") for ext in (CODE_EXTENSIONS if extensions is None else extensions)
        )

        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        resolved_token = token or os.environ.get("GITHUB_TOKEN")
        if resolved_token:
            headers["Authorization"] = f"Bearer {resolved_token}"

        self._client = httpx.Client(
            base_url=api_base,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    # =========================================================================
    # SourceProvider interface
    # =========================================================================

    def resolve_repositories(self, project: str) -> list[str]:
        """Resolve a project identifier to ``owner/repo`` full names.

        Raises:
            SourceError: If the identifier is invalid or the user listing fails
        """
        project = project.strip()
        if "/" in project or ":" in project:
            try:
                owner, repo = parse_repo_url(project)
            except ValueError as e:
                raise SourceError(str(e), project=project) from e
            return [f"{owner}/{repo}"]

        if not _USERNAME_RE.match(project):
            raise SourceError(f"Invalid GitHub username: {project!r}", project=project)

        repos: list[str] = []
        for item in self._get_paginated(f"/users/{project}/repos", {"sort": "updated"}):
            full_name = item.get("full_name") if isinstance(item, dict) else None
            if not full_name:
                continue
            repos.append(full_name)
            if len(repos) >= self.max_repos:
                break

        logger.debug("Resolved %d repositories for user %s", len(repos), project)
        return repos

    def list_files(self, project: str) -> list[str]:
        repos = self.resolve_repositories(project)
        single_repo = "/" in project or ":" in project

        file_ids: list[str] = []
        for full_name in repos:
            try:
                paths = self._list_tree(full_name)
            except SourceError as e:
                if single_repo:
                    raise
                logger.warning("Skipping repository %s: %s", full_name, e)
                continue

            if not single_repo:
                paths = paths[: self.files_per_repo]
            file_ids.extend(f"{full_name}:{path}" for path in paths)

        return file_ids

    def read_file(self, project: str, path: str) -> str:
        try:
            full_name, file_path = split_file_id(path)
        except ValueError as e:
            raise SourceError(str(e), project=project, path=path) from e

        data = self._get_json(f"/repos/{full_name}/contents/{quote(file_path)}")
        if not isinstance(data, dict) or data.get("type") != "file":
            raise SourceError(f"Not a file: {path}", project=project, path=path)

        content = data.get("content") or ""
        encoding = data.get("encoding")
        if encoding != "base64":
            raise SourceError(
                f"Unsupported content encoding {encoding!r} for {path}",
                project=project,
                path=path,
            )
        try:
            return base64.b64decode(content).decode("utf-8", errors="replace")
        except ValueError as e:
            raise SourceError(f"Cannot decode {path}: {e}", project=project, path=path) from e

    # =========================================================================
    # API helpers
    # =========================================================================

    def _list_tree(self, full_name: str) -> list[str]:
        """List source file paths in the HEAD tree of a repository."""
        data = self._get_json(f"/repos/{full_name}/git/trees/HEAD", {"recursive": "1"})
        if not isinstance(data, dict):
            raise SourceError(f"Unexpected tree response for {full_name}", project=full_name)
        if data.get("truncated"):
            logger.warning("Tree listing for %s was truncated by the API", full_name)

        paths = [
            entry["path"]
            for entry in data.get("tree") or []
            if entry.get("type") == "blob"
            and entry.get("path")
            and is_code_file(entry["path"], self.extensions)
        ]
        paths.sort()
        return paths

    def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        response = self._request_with_retry(url, params)
        self._check_rate_limit(response)
        try:
            return response.json()
        except ValueError as e:
            raise SourceError(f"Invalid JSON from {url}: {e}") from e

    def _get_paginated(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        max_pages: int = 10,
    ) -> Iterator[Any]:
        """Yield JSON items from a paginated endpoint, following ``Link`` headers."""
        url: str | None = path
        params = dict(params or {})
        params.setdefault("per_page", 100)
        page = 0

        while url and page < max_pages:
            response = self._request_with_retry(url, params if page == 0 else None)
            self._check_rate_limit(response)

            try:
                data = response.json()
            except ValueError as e:
                raise SourceError(f"Invalid JSON from {url}: {e}") from e
            if isinstance(data, list):
                yield from data
            else:
                yield data

            url = self._parse_next_link(response.headers.get("Link", ""))
            page += 1

    def _request_with_retry(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """GET with exponential backoff on 5xx, 403 rate-limit, and timeout errors."""
        last_error = "no attempt made"
        for attempt in range(self.max_retries):
            try:
                response = self._client.get(url, params=params)
            except httpx.TimeoutException as e:
                logger.warning(
                    "GitHub request timed out: %s (attempt %d/%d)",
                    url,
                    attempt + 1,
                    self.max_retries,
                )
                last_error = f"timeout: {e}"
            except httpx.HTTPError as e:
                raise SourceError(f"GitHub request failed for {url}: {e}") from e
            else:
                if response.status_code == 403 and self._is_rate_limited(response):
                    wait = self._get_rate_limit_wait(response)
                    logger.warning(
                        "GitHub rate limit hit for %s, waiting %.0fs (attempt %d/%d)",
                        url,
                        wait,
                        attempt + 1,
                        self.max_retries,
                    )
                    time.sleep(wait)
                    last_error = "rate limit exceeded"
                    continue

                if response.status_code < 500:
                    if response.is_error:
                        raise SourceError(
                            f"GitHub API returned {response.status_code} for {url}"
                        )
                    return response

                logger.warning(
                    "GitHub server error %d for %s (attempt %d/%d)",
                    response.status_code,
                    url,
                    attempt + 1,
                    self.max_retries,
                )
                last_error = f"server error {response.status_code}"

            if attempt < self.max_retries - 1:
                time.sleep(self.retry_base_delay * (2**attempt))

        raise SourceError(
            f"GitHub request failed after {self.max_retries} attempts for {url}: {last_error}"
        )

    def _check_rate_limit(self, response: httpx.Response) -> None:
        """Sleep until the rate limit resets if no requests remain."""
        remaining = self._parse_header_int(response.headers.get("X-RateLimit-Remaining"))
        if remaining == 0:
            wait = self._get_rate_limit_wait(response)
            logger.warning("GitHub rate limit exhausted, waiting %.0fs", wait)
            time.sleep(wait)

    @staticmethod
    def _is_rate_limited(response: httpx.Response) -> bool:
        """Check if a 403 response is due to rate limiting."""
        remaining = GitHubSourceProvider._parse_header_int(
            response.headers.get("X-RateLimit-Remaining")
        )
        if remaining is not None:
            return remaining == 0
        # Secondary rate limits only carry Retry-After
        return "Retry-After" in response.headers

    def _get_rate_limit_wait(self, response: httpx.Response) -> float:
        """Seconds to wait based on rate-limit headers, capped by max_rate_limit_wait."""
        wait = 60.0
        retry_after = self._parse_header_int(response.headers.get("Retry-After"))
        reset_ts = self._parse_header_int(response.headers.get("X-RateLimit-Reset"))
        if retry_after is not None:
            wait = float(max(retry_after, 1))
        elif reset_ts is not None:
            wait = float(max(reset_ts - int(time.time()), 1))
        return max(0.0, min(wait, self.max_rate_limit_wait))

    @staticmethod
    def _parse_header_int(value: str | None) -> int | None:
        """Safely parse an integer header value."""
        if value is None:
            return None
        try:
            return int(value)
        except (ValueError, TypeError):
            return None

    @staticmethod
    def _parse_next_link(link_header: str) -> str | None:
        """Extract the ``next`` URL from a ``Link`` header."""
        match = _NEXT_LINK_RE.search(link_header)
        return match.group(1) if match else None
