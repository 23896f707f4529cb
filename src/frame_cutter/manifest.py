"""Cut manifest reader.

A manifest is a table with one row per output clip and the columns
``start_frame``, ``end_frame`` and ``filename``. Delimited text manifests use
``;`` between fields and accept ``,`` as the decimal mark. Excel workbooks
are read from their first sheet with the header in row 1.
"""
import csv
import io
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from openpyxl import load_workbook

from .config import (
    END_FRAME_COLUMN,
    FILENAME_COLUMN,
    MANIFEST_DECIMAL_MARK,
    MANIFEST_DELIMITER,
    MANIFEST_ENCODING,
    REQUIRED_COLUMNS,
    START_FRAME_COLUMN,
)
from .errors import ManifestError

logger = logging.getLogger(__name__)

EXCEL_SUFFIXES = {'.xlsx', '.xlsm'}


def format_frame(value: float) -> str:
    """Render a frame number without a trailing ``.0``."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class CutJob:
    """One manifest row: a frame range and the name of the clip to write."""
    start_frame: float
    end_frame: float
    filename_stem: str
    row_number: int = 0  # 1-based data row, 0 when built by hand

    @property
    def frame_count(self) -> float:
        return self.end_frame - self.start_frame

    def problems(self) -> list[str]:
        """Range checks that make this job unrunnable."""
        problems = []
        if self.start_frame < 0:
            problems.append(f"start_frame must be >= 0, got {format_frame(self.start_frame)}")
        if self.end_frame < self.start_frame:
            problems.append(
                f"end_frame ({format_frame(self.end_frame)}) is before "
                f"start_frame ({format_frame(self.start_frame)})"
            )
        if not self.filename_stem:
            problems.append("filename is empty")
        elif any(ord(char) < 32 or ord(char) == 127 for char in self.filename_stem):
            problems.append(f"filename contains control characters: {self.filename_stem!r}")
        return problems

    def describe(self) -> str:
        name = self.filename_stem or f"<row {self.row_number}>"
        return f"{name} (frames {format_frame(self.start_frame)}-{format_frame(self.end_frame)})"


def parse_number(value, column: str, row_number: int) -> float:
    """Convert a cell to a finite float or fail the whole manifest."""
    if isinstance(value, bool):
        value = None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value if value is not None else "").strip()
        if MANIFEST_DECIMAL_MARK in text and '.' not in text:
            text = text.replace(MANIFEST_DECIMAL_MARK, '.')
        try:
            number = float(text)
        except ValueError:
            raise ManifestError(
                ManifestError.TYPE_MISMATCH,
                f"row {row_number}: {column} must be numeric, got {text!r}"
            ) from None
    if not math.isfinite(number):
        raise ManifestError(
            ManifestError.TYPE_MISMATCH,
            f"row {row_number}: {column} must be a finite number, got {value!r}"
        )
    return number


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _is_blank(row: Sequence) -> bool:
    return all(_cell_text(cell) == "" for cell in row)


def build_jobs(rows: Iterable[Sequence], source: str = "manifest") -> list[CutJob]:
    """
    Turn raw table rows into cut jobs.

    The first non-blank row is the header. Columns are matched by name,
    ignoring case and surrounding whitespace; extra columns are ignored.

    Raises:
        ManifestError: on a missing column, a non-numeric frame value or
            an empty table. No jobs are returned in that case.
    """
    rows = iter(rows)
    header = None
    for row in rows:
        if not _is_blank(row):
            header = [_cell_text(cell).lower() for cell in row]
            break

    if header is None:
        raise ManifestError(ManifestError.EMPTY, f"{source} has no header row")

    missing = [name for name in REQUIRED_COLUMNS if name not in header]
    if missing:
        hint = ""
        if len(header) == 1 and MANIFEST_DELIMITER not in header[0]:
            hint = f" (fields must be separated by {MANIFEST_DELIMITER!r})"
        raise ManifestError(
            ManifestError.MISSING_COLUMN,
            f"{source} is missing column(s): {', '.join(missing)}{hint}"
        )

    start_idx = header.index(START_FRAME_COLUMN)
    end_idx = header.index(END_FRAME_COLUMN)
    name_idx = header.index(FILENAME_COLUMN)

    def cell(row, idx):
        return row[idx] if idx < len(row) else None

    jobs = []
    for row in rows:
        if _is_blank(row):
            continue
        row_number = len(jobs) + 1
        jobs.append(CutJob(
            start_frame=parse_number(cell(row, start_idx), START_FRAME_COLUMN, row_number),
            end_frame=parse_number(cell(row, end_idx), END_FRAME_COLUMN, row_number),
            filename_stem=_cell_text(cell(row, name_idx)),
            row_number=row_number,
        ))

    if not jobs:
        raise ManifestError(ManifestError.EMPTY, f"{source} has no cut rows")

    logger.info(f"Parsed {len(jobs)} cut job(s) from {source}")
    return jobs


def parse_manifest(manifest_bytes: bytes, source: str = "manifest") -> list[CutJob]:
    """Parse a delimited text manifest into ordered cut jobs."""
    try:
        text = manifest_bytes.decode(MANIFEST_ENCODING)
    except UnicodeDecodeError as e:
        raise ManifestError(
            ManifestError.UNREADABLE,
            f"{source} is not valid {MANIFEST_ENCODING} text: {e}"
        ) from e

    try:
        rows = list(csv.reader(io.StringIO(text, newline=''), delimiter=MANIFEST_DELIMITER))
    except csv.Error as e:
        raise ManifestError(ManifestError.UNREADABLE, f"{source}: {e}") from e
    return build_jobs(rows, source)


def parse_excel_manifest(data: bytes | Path, source: str = "manifest") -> list[CutJob]:
    """Parse the first sheet of an Excel workbook into ordered cut jobs."""
    handle = io.BytesIO(data) if isinstance(data, bytes) else data
    try:
        workbook = load_workbook(handle, read_only=True, data_only=True)
    except Exception as e:
        # openpyxl raises a mix of zipfile, KeyError and its own errors
        raise ManifestError(ManifestError.UNREADABLE, f"{source} is not a readable workbook: {e}") from e

    try:
        sheet = workbook.active
        logger.debug(f"Reading sheet '{sheet.title}' from {source}")
        return build_jobs(sheet.iter_rows(values_only=True), source)
    finally:
        workbook.close()


def load_manifest(path: str | Path) -> list[CutJob]:
    """Read a manifest file, choosing the reader by file extension."""
    path = Path(path)
    if path.suffix.lower() in EXCEL_SUFFIXES:
        if not path.is_file():
            raise ManifestError(ManifestError.UNREADABLE, f"Manifest not found: {path}")
        return parse_excel_manifest(path, source=path.name)

    try:
        data = path.read_bytes()
    except OSError as e:
        raise ManifestError(ManifestError.UNREADABLE, f"Cannot read manifest {path}: {e}") from e
    return parse_manifest(data, source=path.name)
