"""Logging system for the frame cutter."""
import os
import sys
import logging
import traceback
from datetime import datetime
from pathlib import Path

LOGGER_NAME = 'frame_cutter'


def get_log_file_path() -> Path:
    """Get the log file path next to the executable or project root."""
    override = os.environ.get('FRAME_CUTTER_LOG_FILE')
    if override:
        return Path(override)

    # When running from PyInstaller bundle
    if getattr(sys, 'frozen', False):
        base_dir = Path(sys.executable).parent
    else:
        # src/frame_cutter/logger.py -> project root
        base_dir = Path(__file__).parent.parent.parent

    return base_dir / "log.txt"


def setup_logging(log_file: Path | None = None) -> logging.Logger:
    """Setup logging to both file and console."""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    logger.handlers.clear()

    # File handler - always log everything
    if log_file is None:
        log_file = get_log_file_path()
    try:
        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    except OSError as e:
        file_handler = None
        sys.stderr.write(f"Cannot open log file {log_file}: {e}\n")
    if file_handler is not None:
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        logger.addHandler(file_handler)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(console_handler)

    # Write session separator
    logger.info("=" * 60)
    logger.info(f"Session started at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info(f"Log file: {log_file}")
    logger.info("=" * 60)

    return logger


# Global logger instance
_logger: logging.Logger | None = None


def get_logger() -> logging.Logger:
    """Get or create the application logger."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


def log_exception(exc: Exception, context: str = ""):
    """Log an exception, with the full traceback at DEBUG level."""
    logger = get_logger()
    if context:
        logger.error(f"{context}: {exc}")
    else:
        logger.error(str(exc))
    logger.debug(''.join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
