"""Batch runner: executes every job of a cut manifest against one video."""
import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Sequence

from .config import RunConfig
from .errors import ManifestError, PathError, RunError
from .manifest import CutJob, format_frame, load_manifest, parse_manifest
from .utils import compute_clip_times, ensure_output_dir, format_seconds, resolve_output_path
from .video_processor import CutOutcome, VideoProcessor

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float, str], None]
ResultCallback = Callable[['JobResult'], None]


class RunState(Enum):
    NOT_STARTED = "not_started"
    VALIDATING = "validating"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class JobResult:
    """What happened to one manifest row."""
    job: CutJob
    computed_start_time: float | None
    computed_duration: float | None
    resolved_output_path: Path | None
    outcome: CutOutcome
    diagnostic_text: str = ""
    command: tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        return self.outcome.ok

    def log_lines(self) -> list[str]:
        """Render this result as lines of the run log."""
        job = self.job
        lines = [
            f"Processing: {job.filename_stem or f'<row {job.row_number}>'}",
            f"Start frame: {format_frame(job.start_frame)} End frame: {format_frame(job.end_frame)}",
        ]
        if self.computed_start_time is not None:
            lines.append(
                f"Start time: {format_seconds(self.computed_start_time)} "
                f"Duration: {format_seconds(self.computed_duration)}"
            )
        if self.resolved_output_path is not None:
            lines.append(f"Output file: {self.resolved_output_path}")
        if self.command:
            lines.append(f"FFmpeg command: {subprocess.list2cmdline(self.command)}")
        status = f"{self.outcome.label}: {job.filename_stem}"
        if not self.ok and self.diagnostic_text:
            status = f"{status} ({self.diagnostic_text})"
        lines.append(status)
        return lines


@dataclass
class RunReport:
    """Ordered per-job results of a run. Only the runner appends to it."""
    jobs_total: int = 0
    results: list[JobResult] = field(default_factory=list)
    state: RunState = RunState.NOT_STARTED
    cancelled: bool = False

    @property
    def jobs_completed(self) -> int:
        return len(self.results)

    @property
    def progress(self) -> float:
        if self.jobs_total == 0:
            return 1.0 if self.state is RunState.COMPLETED else 0.0
        return self.jobs_completed / self.jobs_total

    @property
    def succeeded(self) -> list[JobResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[JobResult]:
        return [r for r in self.results if not r.ok]

    def count(self, outcome: CutOutcome) -> int:
        return sum(1 for r in self.results if r.outcome is outcome)

    def append(self, result: JobResult) -> None:
        self.results.append(result)

    def summary(self) -> str:
        text = (
            f"Processed {self.jobs_completed}/{self.jobs_total} job(s): "
            f"{len(self.succeeded)} succeeded, {len(self.failed)} failed"
        )
        if self.cancelled:
            text += f" (stopped, {self.jobs_total - self.jobs_completed} not attempted)"
        return text

    def log_lines(self) -> list[str]:
        lines = []
        for result in self.results:
            lines.extend(result.log_lines())
        lines.append(self.summary())
        return lines

    def render(self) -> str:
        return "\n".join(self.log_lines())


class BatchRunner:
    """
    Runs cut jobs one after another in manifest order.

    A failing job is recorded in the report and the run moves on to the next
    job. Only an unusable config or manifest stops the run, and that happens
    before the first job starts.
    """

    def __init__(self, processor: VideoProcessor | None = None):
        self.processor = processor or VideoProcessor()
        self.state = RunState.NOT_STARTED
        self.report: RunReport | None = None
        self._stopped = False

    def stop(self):
        """Ask the run to stop before the next job. A running cut is not interrupted."""
        self._stopped = True

    def reset(self):
        self._stopped = False
        self.state = RunState.NOT_STARTED
        self.report = None

    def _load_jobs(self, manifest) -> list[CutJob]:
        if isinstance(manifest, (bytes, bytearray)):
            return parse_manifest(bytes(manifest))
        if isinstance(manifest, (str, Path)):
            return load_manifest(manifest)
        jobs = list(manifest)
        if not jobs:
            raise ManifestError(ManifestError.EMPTY, "manifest has no cut rows")
        return jobs

    def validate(self, manifest, config: RunConfig) -> list[CutJob]:
        """
        Check run preconditions and parse the manifest.

        Raises:
            RunError: if the source video, output folder or frame rate is unusable
            ManifestError: if the manifest cannot be parsed
        """
        problems = config.problems()
        if problems:
            raise RunError("; ".join(problems))
        return self._load_jobs(manifest)

    def run_job(self, job: CutJob, config: RunConfig) -> JobResult:
        """Run one job. Failures are returned as a result, never raised."""
        problems = job.problems()
        if problems:
            logger.warning(f"Skipping row {job.row_number}: {'; '.join(problems)}")
            return JobResult(job, None, None, None, CutOutcome.VALIDATION_ERROR, "; ".join(problems))

        start_time, duration = compute_clip_times(job, config.frame_rate)
        logger.info(f"Processing: {job.filename_stem}")
        logger.info(f"  Start time: {format_seconds(start_time)}s, Duration: {format_seconds(duration)}s")

        output_path = None
        try:
            output_path = resolve_output_path(
                config.output_directory, config.filename_prefix, job.filename_stem, config.container_ext
            )
            logger.info(f"  Output file: {output_path}")
            ensure_output_dir(output_path)
        except PathError as e:
            logger.error(str(e))
            return JobResult(job, start_time, duration, output_path, CutOutcome.PATH_ERROR, e.message)

        result = self.processor.cut_clip(config.source_video_path, start_time, duration, output_path)
        return JobResult(
            job, start_time, duration, output_path,
            result.outcome, result.diagnostic, result.command
        )

    def run(
        self,
        manifest: bytes | str | Path | Sequence[CutJob],
        config: RunConfig,
        progress_callback: ProgressCallback | None = None,
        result_callback: ResultCallback | None = None
    ) -> RunReport:
        """
        Execute every job of ``manifest`` and return the full report.

        Args:
            manifest: Raw manifest bytes, a manifest file path or parsed jobs
            config: Source video, output folder, frame rate and prefix
            progress_callback: Called after each job with (fraction, description)
            result_callback: Called after each job with its JobResult

        Returns:
            RunReport with one result per attempted row, in manifest order

        Raises:
            RunError, ManifestError: before any job when the run cannot start
        """
        self.state = RunState.VALIDATING
        try:
            jobs = self.validate(manifest, config)
        except (RunError, ManifestError) as e:
            self.state = RunState.ABORTED
            logger.error(f"Run aborted: {e}")
            raise

        report = RunReport(jobs_total=len(jobs), state=RunState.RUNNING)
        self.report = report
        self.state = RunState.RUNNING
        logger.info(f"Cutting {len(jobs)} clip(s) from {config.source_video_path}")

        for index, job in enumerate(jobs, start=1):
            if self._stopped:
                logger.warning(f"Run stopped before job {index}/{len(jobs)}")
                report.cancelled = True
                break

            result = self.run_job(job, config)
            report.append(result)
            if result_callback:
                result_callback(result)
            if progress_callback:
                description = f"{result.outcome.label}: {job.describe()} ({index}/{len(jobs)})"
                progress_callback(report.progress, description)

        self.state = RunState.CANCELLED if report.cancelled else RunState.COMPLETED
        report.state = self.state
        logger.info(report.summary())
        return report
