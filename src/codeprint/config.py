"""codeprint configuration system.

Configuration is YAML-based with per-run CLI overrides (--max-files,
--workers, --numeric-merge, --output, --format).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.codeprint/config.yaml
3. ./codeprint.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from codeprint.analyzers.aggregator import NumericMerge
from codeprint.analyzers.scanning import ScanLimits
from codeprint.models.llm_config import LLMConfig
from codeprint.sources.base import CODE_EXTENSIONS
from codeprint.sources.github import DEFAULT_API_BASE
from codeprint.sources.local import DEFAULT_EXCLUDE_DIRS, DEFAULT_MAX_FILE_BYTES

VALID_OUTPUT_FORMATS = frozenset({"json", "markdown"})

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class SourceConfig:
    """Local source listing configuration.

    Attributes:
        extensions: File extensions treated as source code (without the dot)
        exclude_dirs: Directory names never descended into
        max_file_bytes: Larger files are not analyzed
    """

    extensions: list[str] = field(default_factory=lambda: sorted(CODE_EXTENSIONS))
    exclude_dirs: list[str] = field(default_factory=lambda: sorted(DEFAULT_EXCLUDE_DIRS))
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES

    def __post_init__(self) -> None:
        """Validate source configuration."""
        if self.max_file_bytes <= 0:
            raise ValueError(f"max_file_bytes must be positive (got {self.max_file_bytes})")
        self.extensions = [ext.lower().lstrip(".") for ext in self.extensions]


@dataclass
class GitHubConfig:
    """GitHub provider configuration.

    Attributes:
        token: Personal access token (GITHUB_TOKEN is used when unset)
        api_base: REST API base URL
        max_repos: Repositories scanned when the project is a username
        files_per_repo: Files taken per repository when scanning a username
        timeout: Request timeout in seconds
        max_retries: Attempts per request
    """

    token: str | None = None
    api_base: str = DEFAULT_API_BASE
    max_repos: int = 10
    files_per_repo: int = 10
    timeout: float = 30.0
    max_retries: int = 3

    def __post_init__(self) -> None:
        """Validate GitHub configuration."""
        for name in ("max_repos", "files_per_repo", "timeout", "max_retries"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"github.{name} must be positive (got {value})")


@dataclass
class AnalysisConfig:
    """Analysis configuration.

    Attributes:
        max_files: Analyze at most this many files (None for no limit)
        workers: Threads fetching and extracting files
        numeric_merge: Numeric averaging mode (pairwise, cumulative)
        max_matches: Per-scan match cap of the extractor
    """

    max_files: int | None = None
    workers: int = 4
    numeric_merge: str = NumericMerge.PAIRWISE.value
    max_matches: int = 1000

    def __post_init__(self) -> None:
        """Validate analysis configuration."""
        valid_modes = {mode.value for mode in NumericMerge}
        if self.numeric_merge not in valid_modes:
            raise ValueError(
                f"Invalid numeric_merge: {self.numeric_merge}. Valid: {sorted(valid_modes)}"
            )
        if self.max_files is not None and self.max_files <= 0:
            raise ValueError(f"max_files must be positive (got {self.max_files})")
        if self.workers <= 0:
            raise ValueError(f"workers must be positive (got {self.workers})")
        if self.max_matches <= 0:
            raise ValueError(f"max_matches must be positive (got {self.max_matches})")

    @property
    def merge_mode(self) -> NumericMerge:
        """Numeric merge mode as an enum."""
        return NumericMerge(self.numeric_merge)

    def scan_limits(self) -> ScanLimits:
        """Build the extractor caps for this configuration."""
        return ScanLimits(max_matches=self.max_matches)


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        path: Output file path (None prints to stdout)
        format: Output format (json, markdown)
    """

    path: str | None = None
    format: str = "json"

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if self.format not in VALID_OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {self.format}. Valid: {sorted(VALID_OUTPUT_FORMATS)}"
            )


@dataclass
class CodeprintConfig:
    """Top-level codeprint configuration.

    Attributes:
        source: Local listing settings
        github: GitHub provider settings
        analysis: Extraction and aggregation settings
        llm: Code generation settings
        output: Output path and format
    """

    source: SourceConfig = field(default_factory=SourceConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    # Set by load_config
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax, e.g. ${GITHUB_TOKEN} -> value of GITHUB_TOKEN.

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted

    Raises:
        ValueError: If a referenced variable is not set
    """
    if isinstance(value, str):

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return _ENV_VAR_PATTERN.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.codeprint/config.yaml
    2. ./codeprint.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    start_path = (start_path or Path.cwd()).resolve()

    for candidate in (
        start_path / ".codeprint" / "config.yaml",
        start_path / "codeprint.yaml",
    ):
        if candidate.is_file():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return one config section, rejecting non-mapping values."""
    value = data.get(name)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"Config section '{name}' must be a mapping")
    return value


def load_config_from_dict(data: dict[str, Any]) -> CodeprintConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        CodeprintConfig instance

    Raises:
        ValueError: If a value is invalid or a referenced variable is unset
    """
    data = substitute_env_vars(data)
    config = CodeprintConfig()

    if "source" in data:
        source_data = _section(data, "source")
        config.source = SourceConfig(
            extensions=list(source_data.get("extensions", config.source.extensions)),
            exclude_dirs=list(source_data.get("exclude_dirs", config.source.exclude_dirs)),
            max_file_bytes=int(source_data.get("max_file_bytes", config.source.max_file_bytes)),
        )

    if "github" in data:
        github_data = _section(data, "github")
        config.github = GitHubConfig(
            token=github_data.get("token") or None,
            api_base=github_data.get("api_base", config.github.api_base),
            max_repos=int(github_data.get("max_repos", config.github.max_repos)),
            files_per_repo=int(github_data.get("files_per_repo", config.github.files_per_repo)),
            timeout=float(github_data.get("timeout", config.github.timeout)),
            max_retries=int(github_data.get("max_retries", config.github.max_retries)),
        )

    if "analysis" in data:
        analysis_data = _section(data, "analysis")
        max_files = analysis_data.get("max_files")
        config.analysis = AnalysisConfig(
            max_files=int(max_files) if max_files is not None else None,
            workers=int(analysis_data.get("workers", config.analysis.workers)),
            numeric_merge=str(analysis_data.get("numeric_merge", config.analysis.numeric_merge)),
            max_matches=int(analysis_data.get("max_matches", config.analysis.max_matches)),
        )

    if "llm" in data:
        config.llm = LLMConfig.from_dict(_section(data, "llm"))

    if "output" in data:
        output_data = _section(data, "output")
        config.output = OutputConfig(
            path=output_data.get("path"),
            format=output_data.get("format", config.output.format),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> CodeprintConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        CodeprintConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ValueError: If the file is not a YAML mapping or holds invalid values
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path: Path | None = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is None:
        return CodeprintConfig()

    with open(found_path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {found_path}: {e}") from e

    if not isinstance(data, dict):
        raise ValueError(f"Config file {found_path} must contain a mapping")

    config = load_config_from_dict(data)
    config._config_path = found_path
    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# codeprint configuration

# Local directory listing
source:
  extensions: [c, cjs, cpp, cs, java, js, jsx, mjs, py, ts, tsx]
  exclude_dirs: [.git, node_modules, dist, build, coverage, __pycache__, .venv, venv]
  max_file_bytes: 1000000

# GitHub provider (used with `codeprint analyze --github`)
github:
  # token: "${GITHUB_TOKEN}"   # falls back to the GITHUB_TOKEN environment variable
  api_base: "https://api.github.com"
  max_repos: 10          # repositories scanned for a username
  files_per_repo: 10     # files taken per repository for a username
  timeout: 30

# Extraction and aggregation
analysis:
  # max_files: 500
  workers: 4
  numeric_merge: "pairwise"   # pairwise: (old + new) / 2, cumulative: running mean
  max_matches: 1000           # per-scan match cap

# Code generation (`codeprint generate`)
llm:
  provider: "openai"     # openai, claude, gemini, ollama, bedrock
  model: "gpt-4"
  # api_key: "${OPENAI_API_KEY}"
  # api_base: "http://localhost:11434"   # Ollama server URL
  temperature: 0.2
  max_tokens: 2000

# Output settings
output:
  # path: "style-profile.json"
  format: "json"         # json, markdown
'''
