"""codeprint CLI interface.

Commands:
- analyze: Build the style profile of a local directory or GitHub project
- fingerprint: Print the style fingerprint of a single file
- generate: Generate code in the style of a saved profile
- init: Initialize codeprint configuration

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines
- --version: Show version and exit
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from codeprint import __version__
from codeprint.analyzers.aggregator import NumericMerge
from codeprint.analyzers.extractor import StyleExtractor
from codeprint.config import VALID_OUTPUT_FORMATS, CodeprintConfig, create_default_config, load_config
from codeprint.errors import SourceError
from codeprint.llm import CodeGenerator, LLMError, create_client
from codeprint.models import AggregateProfile, AnalysisStatus
from codeprint.pipeline import PipelineOptions, StylePipeline
from codeprint.sources import GitHubSourceProvider, LocalSourceProvider, SourceProvider
from codeprint.templates import ProfileRenderer
from codeprint.utils.logging import configure_from_cli, get_logger

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PARTIAL = 2

app = typer.Typer(
    name="codeprint",
    help="Learn a code base's style profile and generate code that matches it",
    add_completion=False,
    no_args_is_help=True,
)

_logger = get_logger("codeprint.cli")


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"codeprint {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log lines",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """codeprint - code style fingerprinting.

    Analyzes source files into a style profile (naming, formatting,
    structure, dependencies) and generates code that follows it.
    """
    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        loaded = load_config(config_path=config)
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(EXIT_FAILURE)
    except ValueError as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(EXIT_FAILURE)

    if loaded.config_path:
        _logger.debug(f"Loaded config from: {loaded.config_path}")
    ctx.obj = loaded


def _get_config(ctx: typer.Context) -> CodeprintConfig:
    """Return the configuration loaded by the app callback."""
    return ctx.obj if isinstance(ctx.obj, CodeprintConfig) else CodeprintConfig()


def _create_provider(config: CodeprintConfig, github: bool) -> SourceProvider:
    if github:
        return GitHubSourceProvider(
            token=config.github.token,
            api_base=config.github.api_base,
            max_repos=config.github.max_repos,
            files_per_repo=config.github.files_per_repo,
            timeout=config.github.timeout,
            max_retries=config.github.max_retries,
            extensions=set(config.source.extensions),
        )
    return LocalSourceProvider(
        exclude_dirs=set(config.source.exclude_dirs),
        extensions=set(config.source.extensions),
        max_file_bytes=config.source.max_file_bytes,
    )


def _emit(content: str, output: Path | None) -> None:
    """Write content to a file, or to stdout when no path is given."""
    if output is None:
        typer.echo(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    _logger.info(f"Wrote {output}")


# =============================================================================
# analyze command
# =============================================================================


@app.command()
def analyze(
    ctx: typer.Context,
    project: Annotated[
        str,
        typer.Argument(help="Directory, or with --github: owner/repo, repository URL, or username"),
    ],
    github: Annotated[
        bool,
        typer.Option("--github", help="Read the project from GitHub"),
    ] = False,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (default: stdout)"),
    ] = None,
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Output format: json or markdown"),
    ] = None,
    max_files: Annotated[
        int | None,
        typer.Option("--max-files", min=1, help="Analyze at most this many files"),
    ] = None,
    workers: Annotated[
        int | None,
        typer.Option("--workers", min=1, help="Threads fetching and extracting files"),
    ] = None,
    numeric_merge: Annotated[
        str | None,
        typer.Option("--numeric-merge", help="Numeric averaging: pairwise or cumulative"),
    ] = None,
    fail_fast: Annotated[
        bool,
        typer.Option("--fail-fast", help="Stop on the first unreadable file"),
    ] = False,
) -> None:
    """Build the style profile of a project.

    Exit codes:
        0: Profile built from every listed file
        1: Project could not be listed or no file was analyzed
        2: Profile built, but some files were skipped
    """
    config = _get_config(ctx)

    fmt = output_format or config.output.format
    if fmt not in VALID_OUTPUT_FORMATS:
        _logger.error(f"Invalid format: {fmt}. Use one of: {', '.join(sorted(VALID_OUTPUT_FORMATS))}")
        raise typer.Exit(EXIT_FAILURE)

    merge_mode: NumericMerge | None = None
    if numeric_merge is not None:
        try:
            merge_mode = NumericMerge(numeric_merge)
        except ValueError:
            _logger.error(f"Invalid numeric merge mode: {numeric_merge}. Use pairwise or cumulative")
            raise typer.Exit(EXIT_FAILURE)

    options = PipelineOptions(
        max_files=max_files,
        workers=workers,
        fail_fast=fail_fast,
        numeric_merge=merge_mode,
    )
    output_path = output or (Path(config.output.path) if config.output.path else None)

    try:
        with _create_provider(config, github) as provider:
            result = StylePipeline(config).run(provider, project, options)
    except SourceError as e:
        _logger.error(f"Analysis failed: {e}")
        raise typer.Exit(EXIT_FAILURE)

    if fmt == "markdown":
        content = ProfileRenderer().render(result)
    else:
        content = json.dumps(result.to_dict(), indent=2)
    _emit(content, output_path)

    if result.status == AnalysisStatus.FAILED or not result.files_analyzed:
        _logger.error("No files were analyzed")
        raise typer.Exit(EXIT_FAILURE)
    if result.has_errors():
        _logger.warning(f"{len(result.errors)} files were skipped")
        raise typer.Exit(EXIT_PARTIAL)


# =============================================================================
# fingerprint command
# =============================================================================


@app.command()
def fingerprint(
    ctx: typer.Context,
    file: Annotated[
        Path,
        typer.Argument(help="Source file to fingerprint", exists=True, dir_okay=False),
    ],
) -> None:
    """Print the style fingerprint of a single file as JSON."""
    config = _get_config(ctx)

    try:
        text = file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        _logger.error(f"Cannot read {file}: {e}")
        raise typer.Exit(EXIT_FAILURE)

    result = StyleExtractor(config.analysis.scan_limits()).extract(text)
    typer.echo(json.dumps(result.to_dict(), indent=2))


# =============================================================================
# generate command
# =============================================================================


def _load_profile(path: Path) -> AggregateProfile:
    """Load a profile from a saved analysis result or bare profile JSON."""
    data: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("profile JSON must be an object")
    if isinstance(data.get("profile"), dict):
        data = data["profile"]
    return AggregateProfile.from_dict(data)


@app.command()
def generate(
    ctx: typer.Context,
    profile: Annotated[
        Path,
        typer.Option(
            "--profile",
            "-p",
            help="Analysis result or profile JSON written by `codeprint analyze`",
            exists=True,
            dir_okay=False,
        ),
    ],
    spec: Annotated[
        str | None,
        typer.Option("--spec", "-s", help="Description of the code to generate"),
    ] = None,
    spec_file: Annotated[
        Path | None,
        typer.Option("--spec-file", help="File holding the description", exists=True, dir_okay=False),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file path (default: stdout)"),
    ] = None,
) -> None:
    """Generate code that follows a saved style profile."""
    config = _get_config(ctx)

    if (spec is None) == (spec_file is None):
        _logger.error("Provide exactly one of --spec or --spec-file")
        raise typer.Exit(EXIT_FAILURE)
    specification = spec if spec is not None else spec_file.read_text(encoding="utf-8")  # type: ignore[union-attr]

    try:
        style_profile = _load_profile(profile)
    except ValueError as e:
        _logger.error(f"Invalid profile {profile}: {e}")
        raise typer.Exit(EXIT_FAILURE)

    try:
        generator = CodeGenerator(create_client(config.llm))
        result = generator.generate(style_profile, specification)
    except ValueError as e:
        _logger.error(str(e))
        raise typer.Exit(EXIT_FAILURE)
    except LLMError as e:
        _logger.error(f"Code generation failed: {e}")
        raise typer.Exit(EXIT_FAILURE)

    _emit(result.code, output)


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Initialize codeprint configuration.

    Creates .codeprint/config.yaml with commented defaults.
    """
    config_file = Path(".codeprint") / "config.yaml"

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(EXIT_FAILURE)

    config_file.parent.mkdir(exist_ok=True)
    config_file.write_text(create_default_config(), encoding="utf-8")
    typer.echo(f"Created {config_file}")


if __name__ == "__main__":
    app()
