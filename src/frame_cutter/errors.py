"""Exceptions raised by the frame cutter."""


class FrameCutterError(Exception):
    """Base exception for all frame cutter errors."""

    def __init__(self, kind: str, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind}: {self.message}"


class ManifestError(FrameCutterError):
    """Raised when the cut manifest cannot be read or validated.

    ``kind`` is one of ``missing_column``, ``type_mismatch``, ``empty`` or
    ``unreadable``. No jobs are produced when this is raised.
    """

    MISSING_COLUMN = "missing_column"
    TYPE_MISMATCH = "type_mismatch"
    EMPTY = "empty"
    UNREADABLE = "unreadable"


class RunError(FrameCutterError):
    """Raised when a run cannot start."""

    PRECONDITION = "precondition"

    def __init__(self, message: str, kind: str = PRECONDITION):
        super().__init__(kind, message)


class PathError(FrameCutterError):
    """Raised when a clip cannot be placed in the output folder."""

    DIRECTORY_CREATION_FAILED = "directory_creation_failed"
    OUTSIDE_OUTPUT_DIRECTORY = "outside_output_directory"

    def __init__(self, message: str, kind: str = DIRECTORY_CREATION_FAILED):
        super().__init__(kind, message)
