"""FFmpeg binary manager - handles bundled or system ffmpeg."""
import sys
import shutil
import platform
import subprocess
from pathlib import Path

_UNSET = object()


def get_subprocess_args(timeout=_UNSET, **kwargs) -> dict:
    """
    Get subprocess arguments with the Windows console window hidden.

    On Windows, this prevents command prompt windows from appearing
    when running ffmpeg.

    Args:
        timeout: Seconds before the call is aborted, ``None`` to wait forever
            (defaults to 30)
        **kwargs: Additional subprocess arguments

    Returns:
        Dict of subprocess arguments
    """
    args = {
        'capture_output': kwargs.pop('capture_output', True),
        'text': kwargs.pop('text', True),
        'timeout': 30 if timeout is _UNSET else timeout,
    }
    if args['text']:
        args['encoding'] = 'utf-8'
        args['errors'] = 'replace'

    if platform.system() == 'Windows':
        args['creationflags'] = subprocess.CREATE_NO_WINDOW
    else:
        # Detach from the terminal so Ctrl+C in a console is not forwarded mid-cut
        args['start_new_session'] = True

    args.update(kwargs)
    return args


def get_platform_name() -> str:
    system = platform.system()
    if system == "Windows":
        return "windows"
    elif system == "Darwin":
        return "macos"
    return "linux"


def get_bundled_ffmpeg_dir() -> Path | None:
    """Get the directory containing bundled ffmpeg binaries."""
    platform_name = get_platform_name()
    candidates = []

    # When running from source: <project>/ffmpeg_bin[/<platform>]
    project_root = Path(__file__).parent.parent.parent
    candidates += [project_root / "ffmpeg_bin" / platform_name, project_root / "ffmpeg_bin"]

    # When running from PyInstaller bundle
    if getattr(sys, 'frozen', False):
        bundle_root = Path(getattr(sys, '_MEIPASS', Path(sys.executable).parent))
        candidates += [bundle_root / "ffmpeg_bin" / platform_name, bundle_root / "ffmpeg_bin"]

    for candidate in candidates:
        if candidate.is_dir():
            return candidate
    return None


def get_ffmpeg_path() -> str:
    """
    Get the path to the ffmpeg executable.

    Priority:
    1. Bundled ffmpeg binary
    2. System ffmpeg in PATH

    Returns:
        Path to ffmpeg executable (bare ``ffmpeg`` if nothing was found)
    """
    bundled_dir = get_bundled_ffmpeg_dir()

    if bundled_dir:
        name = "ffmpeg.exe" if platform.system() == "Windows" else "ffmpeg"
        ffmpeg_path = bundled_dir / name
        if ffmpeg_path.exists():
            return str(ffmpeg_path)

    return shutil.which("ffmpeg") or "ffmpeg"


def check_ffmpeg(ffmpeg_path: str | None = None) -> tuple[bool, str]:
    """
    Check if ffmpeg is available.

    Returns:
        Tuple of (is_available, version_or_error_message)
    """
    if ffmpeg_path is None:
        ffmpeg_path = get_ffmpeg_path()

    try:
        result = subprocess.run(
            [ffmpeg_path, "-version"],
            **get_subprocess_args(timeout=10)
        )
    except FileNotFoundError:
        return False, "ffmpeg not found, install it or place it in ffmpeg_bin/"
    except subprocess.TimeoutExpired:
        return False, "ffmpeg did not respond"
    except OSError as e:
        return False, f"Error while checking ffmpeg: {e}"

    if result.returncode == 0:
        first_line = (result.stdout or "").split('\n')[0]
        return True, first_line
    stderr = result.stderr[:100] if result.stderr else 'Unknown error'
    return False, f"ffmpeg failed: {stderr}"
