"""Analysis pipeline orchestrator.

Lists a project's files through a source provider, fetches and fingerprints
them on a thread pool, and folds the fingerprints serially in listing order
into a finalized AggregateProfile.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import UTC, datetime

from codeprint.analyzers.aggregator import NumericMerge, fold
from codeprint.analyzers.extractor import StyleExtractor
from codeprint.config import CodeprintConfig
from codeprint.errors import SourceError
from codeprint.models import AnalysisError, AnalysisResult, AnalysisStatus, FileFingerprint
from codeprint.sources.base import SourceProvider

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """Options for controlling pipeline execution.

    Unset values fall back to the ``analysis`` config section.

    Attributes:
        max_files: Analyze at most this many files, in listing order
        workers: Threads fetching and extracting files
        fail_fast: Stop on the first unreadable file
        numeric_merge: Numeric averaging mode
    """

    max_files: int | None = None
    workers: int | None = None
    fail_fast: bool = False
    numeric_merge: NumericMerge | None = None


@dataclass
class _FileOutcome:
    path: str
    fingerprint: FileFingerprint | None = None
    error: str | None = None


class StylePipeline:
    """Turns a project into a style profile.

    The pipeline sequence:
    1. List files (a listing failure propagates as SourceError)
    2. Truncate to max_files
    3. Fetch and extract in parallel; unreadable files are recorded and skipped
    4. Fold in listing order and attach a confidence estimate
    """

    def __init__(self, config: CodeprintConfig | None = None) -> None:
        """Initialize the pipeline.

        Args:
            config: codeprint configuration (uses defaults if None)
        """
        self.config = config or CodeprintConfig()
        self._extractor = StyleExtractor(self.config.analysis.scan_limits())

    def run(
        self,
        provider: SourceProvider,
        project: str,
        options: PipelineOptions | None = None,
    ) -> AnalysisResult:
        """Analyze one project.

        Args:
            provider: Source of (path, text) pairs
            project: Project identifier understood by the provider
            options: Pipeline execution options

        Returns:
            AnalysisResult with the finalized profile

        Raises:
            SourceError: If the project cannot be listed, or a file cannot be
                read while fail_fast is set
        """
        options = options or PipelineOptions()
        analysis = self.config.analysis
        max_files = options.max_files if options.max_files is not None else analysis.max_files
        workers = options.workers or analysis.workers
        numeric_merge = options.numeric_merge or analysis.merge_mode

        started = time.monotonic()
        result = AnalysisResult(
            project=project,
            timestamp=datetime.now(UTC),
            status=AnalysisStatus.RUNNING,
        )

        logger.info("Listing files of %s via %s", project, provider.name)
        paths = provider.list_files(project)
        if max_files is not None and len(paths) > max_files:
            logger.info("Limiting analysis to the first %d of %d files", max_files, len(paths))
            paths = paths[:max_files]

        logger.info("Analyzing %d files with %d workers", len(paths), workers)

        fingerprints: list[FileFingerprint] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields in submission order, so the fold order is the listing order
            for outcome in executor.map(lambda path: self._process(provider, project, path), paths):
                if outcome.fingerprint is not None:
                    fingerprints.append(outcome.fingerprint)
                    result.files_analyzed.append(outcome.path)
                    continue

                logger.warning("Skipping %s: %s", outcome.path, outcome.error)
                result.add_error(
                    AnalysisError(
                        component="source",
                        message=outcome.error or "unreadable",
                        file_path=outcome.path,
                        recoverable=not options.fail_fast,
                    )
                )
                if options.fail_fast:
                    executor.shutdown(wait=False, cancel_futures=True)
                    raise SourceError(
                        f"Cannot read {outcome.path}: {outcome.error}",
                        project=project,
                        path=outcome.path,
                    )

        result.profile = fold(fingerprints, numeric_merge=numeric_merge)

        if paths and not fingerprints:
            result.status = AnalysisStatus.FAILED
        else:
            result.status = AnalysisStatus.COMPLETED
        result.duration_seconds = time.monotonic() - started

        confidence = result.profile.confidence
        logger.info(
            "Analysis complete: %s, %d files, confidence %s (%d%%), %d skipped",
            result.status.value,
            len(result.files_analyzed),
            confidence.level.value if confidence else "n/a",
            confidence.percentage if confidence else 0,
            len(result.errors),
        )
        return result

    def _process(self, provider: SourceProvider, project: str, path: str) -> _FileOutcome:
        """Fetch and fingerprint one file on a worker thread."""
        try:
            content = provider.read_file(project, path)
        except SourceError as e:
            return _FileOutcome(path=path, error=str(e))
        return _FileOutcome(path=path, fingerprint=self._extractor.extract(content))
