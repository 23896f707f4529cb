"""Command line interface: cut clips from a video without the GUI.

Usage:
    frame-cutter-cli source.mov cuts.csv clips/ --fps 25 --prefix take1
"""
import argparse
import sys
import time

from .batch import BatchRunner
from .config import DEFAULT_FPS, RunConfig, VERSION
from .errors import ManifestError, RunError
from .ffmpeg_manager import check_ffmpeg
from .logger import get_logger
from .utils import format_duration
from .video_processor import VideoProcessor

EXIT_OK = 0
EXIT_JOB_FAILED = 1
EXIT_ABORTED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="frame-cutter-cli",
        description="Cut clips from a source video using a frame-range manifest.",
    )
    parser.add_argument("source", help="Path to the source video")
    parser.add_argument(
        "manifest",
        help="Cut manifest (';'-separated start_frame;end_frame;filename, or .xlsx)",
    )
    parser.add_argument("output_dir", help="Folder for the cut clips")
    parser.add_argument(
        "--fps", type=float, default=DEFAULT_FPS,
        help=f"Frames per second of the source video (default: {DEFAULT_FPS:g})",
    )
    parser.add_argument(
        "--prefix", default="",
        help="Prefix added to every output filename as '<prefix>_<filename>'",
    )
    parser.add_argument(
        "--ffmpeg", default=None,
        help="ffmpeg executable to use (default: bundled or from PATH)",
    )
    parser.add_argument(
        "--quiet", action="store_true",
        help="Only print the final summary",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main(args=None) -> int:
    parsed = build_parser().parse_args(args)
    logger = get_logger()

    processor = VideoProcessor(ffmpeg_path=parsed.ffmpeg)
    available, message = check_ffmpeg(processor.ffmpeg_path)
    if available:
        logger.debug(f"Using {processor.ffmpeg_path}: {message}")
    else:
        logger.warning(message)

    config = RunConfig.create(parsed.source, parsed.output_dir, parsed.fps, parsed.prefix)

    def on_progress(fraction: float, description: str):
        if not parsed.quiet:
            print(f"[{fraction * 100:5.1f}%] {description}", flush=True)

    runner = BatchRunner(processor)
    started = time.monotonic()
    try:
        report = runner.run(parsed.manifest, config, progress_callback=on_progress)
    except (RunError, ManifestError) as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return EXIT_ABORTED

    if not parsed.quiet:
        print()
        print(report.render())
    else:
        print(report.summary())
    print(f"Elapsed: {format_duration(time.monotonic() - started)}")

    return EXIT_OK if not report.failed else EXIT_JOB_FAILED


if __name__ == "__main__":
    sys.exit(main())
