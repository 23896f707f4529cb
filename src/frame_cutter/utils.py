"""Frame timing and output path helpers."""
import os
from pathlib import Path

from .config import DEFAULT_CONTAINER_EXT
from .errors import PathError
from .manifest import CutJob


def compute_clip_times(job: CutJob, frame_rate: float) -> tuple[float, float]:
    """
    Convert a job's frame range to seconds.

    Args:
        job: Cut job with validated numeric frames
        frame_rate: Frames per second, must be > 0

    Returns:
        Tuple of (start_time, duration) in seconds
    """
    start_time = job.start_frame / frame_rate
    duration = (job.end_frame - job.start_frame) / frame_rate
    return start_time, duration


def format_seconds(seconds: float) -> str:
    """Format seconds for the ffmpeg command line (4 decimal places)."""
    return f"{seconds:.4f}"


def format_duration(seconds: float) -> str:
    """Format seconds to HH:MM:SS string."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def build_output_filename(prefix: str, filename_stem: str, ext: str = DEFAULT_CONTAINER_EXT) -> str:
    if prefix:
        return f"{prefix}_{filename_stem}.{ext}"
    return f"{filename_stem}.{ext}"


def resolve_output_path(
    output_directory: str | Path,
    prefix: str,
    filename_stem: str,
    ext: str = DEFAULT_CONTAINER_EXT
) -> Path:
    """
    Build the absolute destination path of a clip.

    ``{output_directory}/{prefix}_{filename_stem}.{ext}``, or without the
    prefix part when ``prefix`` is empty. The stem may contain sub folders
    but always stays under ``output_directory``; a leading drive or
    separator is dropped.

    Raises:
        PathError: if the stem climbs out of ``output_directory`` with ``..``
    """
    _, stem = os.path.splitdrive(filename_stem)
    stem = stem.lstrip("/\\")
    base = os.path.abspath(Path(output_directory).expanduser())
    path = os.path.abspath(os.path.join(base, build_output_filename(prefix, stem, ext)))
    if os.path.commonpath([base, path]) != base:
        raise PathError(
            f"{filename_stem!r} points outside the output folder {base}",
            kind=PathError.OUTSIDE_OUTPUT_DIRECTORY
        )
    return Path(path)


def ensure_output_dir(output_path: Path) -> Path:
    """
    Create all missing parent folders of ``output_path``.

    Safe to call repeatedly for the same path.

    Raises:
        PathError: if the folder cannot be created
    """
    parent = Path(output_path).parent
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PathError(f"Cannot create output folder {parent}: {e.strerror or e}") from e
    except ValueError as e:
        # e.g. an embedded null byte in the path
        raise PathError(f"Cannot create output folder {parent!r}: {e}") from e
    return parent
