"""Application constants, run configuration and persisted UI settings."""
import json
import logging
import math
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "FrameCutter"
VERSION = "1.0.0"

# Output container; stream copy into QuickTime keeps most source codecs intact
DEFAULT_CONTAINER_EXT = "mov"
DEFAULT_FPS = 30.0

# Manifest format
MANIFEST_ENCODING = "utf-8-sig"
MANIFEST_DELIMITER = ";"
MANIFEST_DECIMAL_MARK = ","
START_FRAME_COLUMN = "start_frame"
END_FRAME_COLUMN = "end_frame"
FILENAME_COLUMN = "filename"
REQUIRED_COLUMNS = (START_FRAME_COLUMN, END_FRAME_COLUMN, FILENAME_COLUMN)

# Use %APPDATA% on Windows, ~/.config elsewhere
if os.name == 'nt' and os.environ.get('APPDATA'):
    CONFIG_DIR = Path(os.environ['APPDATA']) / APP_NAME
else:
    CONFIG_DIR = Path.home() / ".config" / APP_NAME

SETTINGS_FILE = CONFIG_DIR / "settings.json"


@dataclass(frozen=True)
class RunConfig:
    """Settings for one run, supplied by the caller and read-only afterwards."""
    source_video_path: Path
    output_directory: Path
    frame_rate: float = DEFAULT_FPS
    filename_prefix: str = ""
    container_ext: str = DEFAULT_CONTAINER_EXT

    def __post_init__(self):
        # Frozen: normalise field types in place
        object.__setattr__(self, "source_video_path", Path(self.source_video_path))
        object.__setattr__(self, "output_directory", Path(self.output_directory))
        object.__setattr__(self, "frame_rate", float(self.frame_rate))

    @classmethod
    def create(
        cls,
        source_video_path: str | Path,
        output_directory: str | Path,
        frame_rate: float = DEFAULT_FPS,
        filename_prefix: str | None = "",
    ) -> 'RunConfig':
        """Build a config from loosely typed UI values."""
        return cls(
            source_video_path=source_video_path,
            output_directory=output_directory,
            frame_rate=frame_rate,
            filename_prefix=(filename_prefix or "").strip(),
        )

    def problems(self) -> list[str]:
        """Return human readable reasons this config cannot be used."""
        problems = []
        source = self.source_video_path
        if str(source) in ("", "."):
            problems.append("No source video selected")
        elif not source.exists():
            problems.append(f"Source video not found: {source}")
        elif not source.is_file():
            problems.append(f"Source video is not a file: {source}")
        elif not os.access(source, os.R_OK):
            problems.append(f"Source video is not readable: {source}")

        out_dir = self.output_directory
        if str(out_dir) in ("", "."):
            problems.append("No output directory selected")
        elif out_dir.exists() and not out_dir.is_dir():
            problems.append(f"Output directory is not a directory: {out_dir}")

        if not math.isfinite(self.frame_rate) or self.frame_rate <= 0:
            problems.append(f"Frame rate must be a positive number, got {self.frame_rate}")
        if any(ord(char) < 32 or ord(char) == 127 for char in self.filename_prefix):
            problems.append(f"Filename prefix contains control characters: {self.filename_prefix!r}")
        return problems


def load_settings(path: Path = SETTINGS_FILE) -> dict:
    """Load saved UI settings, returning an empty dict if there are none."""
    if not path.exists():
        return {}
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load settings: {e}")
        return {}


def save_settings(values: dict, path: Path = SETTINGS_FILE) -> None:
    """Merge ``values`` into the saved settings."""
    settings = load_settings(path)
    settings.update(values)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=4)
        logger.debug(f"Saved settings: {', '.join(values)}")
    except OSError as e:
        logger.error(f"Failed to save settings: {e}")


def get_setting(key: str, default=None, path: Path = SETTINGS_FILE):
    """Retrieve a single saved setting."""
    return load_settings(path).get(key, default)
