"""Frame Cutter - cut clips from a video using a list of frame ranges."""
from .batch import BatchRunner, JobResult, RunReport, RunState
from .config import RunConfig, VERSION
from .errors import FrameCutterError, ManifestError, PathError, RunError
from .manifest import CutJob, load_manifest, parse_manifest
from .video_processor import CutOutcome, VideoProcessor

__version__ = VERSION

__all__ = [
    "BatchRunner", "JobResult", "RunReport", "RunState", "RunConfig",
    "FrameCutterError", "ManifestError", "PathError", "RunError",
    "CutJob", "load_manifest", "parse_manifest", "CutOutcome", "VideoProcessor",
]
