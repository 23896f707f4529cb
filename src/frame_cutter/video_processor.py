"""Clip extraction using ffmpeg."""
import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .ffmpeg_manager import get_ffmpeg_path, get_subprocess_args
from .utils import format_seconds

logger = logging.getLogger(__name__)


class CutOutcome(Enum):
    """How a single cut job ended."""
    SUCCESS = "success"
    TOOL_REPORTED_FAILURE = "tool_reported_failure"
    OUTPUT_FILE_MISSING = "output_file_missing"
    VALIDATION_ERROR = "validation_error"
    PATH_ERROR = "path_error"

    @property
    def ok(self) -> bool:
        return self is CutOutcome.SUCCESS

    @property
    def label(self) -> str:
        return {
            CutOutcome.SUCCESS: "Successfully created",
            CutOutcome.TOOL_REPORTED_FAILURE: "ffmpeg failed",
            CutOutcome.OUTPUT_FILE_MISSING: "File not created",
            CutOutcome.VALIDATION_ERROR: "Invalid row",
            CutOutcome.PATH_ERROR: "Output folder error",
        }[self]


@dataclass(frozen=True)
class CutResult:
    """Outcome of one ffmpeg invocation."""
    outcome: CutOutcome
    diagnostic: str = ""
    command: tuple[str, ...] = field(default_factory=tuple)
    return_code: int | None = None


class VideoProcessor:
    """Runs ffmpeg to stream-copy a time range of the source video."""

    # Keep the tail of stderr; ffmpeg prints the actual error last
    MAX_DIAGNOSTIC_CHARS = 500

    def __init__(self, ffmpeg_path: str | None = None):
        self.ffmpeg_path = ffmpeg_path or get_ffmpeg_path()

    def build_command(
        self,
        source_video_path: Path,
        start_time: float,
        duration: float,
        output_path: Path
    ) -> list[str]:
        """Build the ffmpeg argument vector for one clip."""
        return [
            self.ffmpeg_path,
            '-hide_banner',
            '-loglevel', 'error',
            '-y',  # Overwrite output
            '-i', str(source_video_path),
            '-ss', format_seconds(start_time),
            '-t', format_seconds(duration),
            '-c', 'copy',  # Stream copy, no re-encode
            str(output_path)
        ]

    def cut_clip(
        self,
        source_video_path: Path,
        start_time: float,
        duration: float,
        output_path: Path
    ) -> CutResult:
        """
        Cut one clip and classify the result.

        Blocks until ffmpeg exits. The output counts as created only when
        ffmpeg exits cleanly and the file exists afterwards.

        Args:
            source_video_path: Video to cut from
            start_time: Seek position in seconds
            duration: Clip length in seconds
            output_path: Destination file, overwritten if present

        Returns:
            CutResult with the outcome, a diagnostic and the command used
        """
        cmd = self.build_command(source_video_path, start_time, duration, output_path)
        command = tuple(cmd)
        logger.debug(f"FFmpeg command: {subprocess.list2cmdline(cmd)}")

        try:
            result = subprocess.run(cmd, **get_subprocess_args(timeout=None))
        except (OSError, ValueError) as e:
            # ValueError: an argument holds a null byte
            logger.error(f"Could not launch ffmpeg ({self.ffmpeg_path}): {e}")
            return CutResult(
                CutOutcome.TOOL_REPORTED_FAILURE,
                f"Could not launch {self.ffmpeg_path}: {e}",
                command
            )

        return_code = result.returncode
        logger.info(f"FFmpeg finished with return code: {return_code}")

        if return_code != 0:
            stderr = (result.stderr or "").strip()
            if return_code < 0:
                reason = f"ffmpeg was terminated by signal {-return_code}"
            else:
                reason = f"ffmpeg exit code {return_code}"
            if stderr:
                reason = f"{reason}: {stderr[-self.MAX_DIAGNOSTIC_CHARS:]}"
            logger.error(reason)
            return CutResult(CutOutcome.TOOL_REPORTED_FAILURE, reason, command, return_code)

        if not Path(output_path).is_file():
            reason = f"ffmpeg exited cleanly but {output_path} was not written"
            logger.warning(reason)
            return CutResult(CutOutcome.OUTPUT_FILE_MISSING, reason, command, return_code)

        logger.info(f"Successfully created: {Path(output_path).name}")
        return CutResult(CutOutcome.SUCCESS, f"Wrote {output_path}", command, return_code)
