"""Tests for the cut manifest reader."""

import pytest
from openpyxl import Workbook

from frame_cutter.errors import ManifestError
from frame_cutter.manifest import CutJob, load_manifest, parse_manifest

from conftest import make_manifest


class TestParseManifest:
    """Delimited text manifests."""

    def test_rows_in_order(self):
        data = make_manifest([(300, 600, "clipA"), (0, 30, "intro"), (900, 1200, "clipB")])

        jobs = parse_manifest(data)

        assert [j.filename_stem for j in jobs] == ["clipA", "intro", "clipB"]
        assert jobs[0] == CutJob(300.0, 600.0, "clipA", row_number=1)
        assert [j.row_number for j in jobs] == [1, 2, 3]

    def test_decimal_comma_and_whitespace(self):
        data = make_manifest([(" 12,5 ", "40", " take 1 ")])

        job = parse_manifest(data)[0]

        assert job.start_frame == 12.5
        assert job.end_frame == 40.0
        assert job.filename_stem == "take 1"

    def test_header_case_extra_columns_and_bom(self):
        data = "\ufeffNote;Filename;End_Frame;START_FRAME\nfirst;a;20;10\n".encode("utf-8")

        jobs = parse_manifest(data)

        assert jobs == [CutJob(10.0, 20.0, "a", row_number=1)]

    def test_blank_lines_skipped(self):
        data = b"start_frame;end_frame;filename\n\n1;2;a\n;;\n3;4;b\n"

        jobs = parse_manifest(data)

        assert [j.filename_stem for j in jobs] == ["a", "b"]

    def test_non_numeric_start_frame_fails_whole_parse(self):
        data = make_manifest([(0, 10, "ok"), ("abc", 20, "bad"), (30, 40, "ok2")])

        with pytest.raises(ManifestError) as exc:
            parse_manifest(data)

        assert exc.value.kind == ManifestError.TYPE_MISMATCH
        assert "start_frame" in exc.value.message
        assert "row 2" in exc.value.message

    def test_missing_end_frame_value_is_type_mismatch(self):
        data = b"start_frame;end_frame;filename\n1;;a\n"

        with pytest.raises(ManifestError) as exc:
            parse_manifest(data)

        assert exc.value.kind == ManifestError.TYPE_MISMATCH

    def test_nan_rejected(self):
        data = make_manifest([("nan", 10, "a")])

        with pytest.raises(ManifestError) as exc:
            parse_manifest(data)

        assert exc.value.kind == ManifestError.TYPE_MISMATCH

    def test_missing_column(self):
        data = b"start_frame;filename\n1;a\n"

        with pytest.raises(ManifestError) as exc:
            parse_manifest(data)

        assert exc.value.kind == ManifestError.MISSING_COLUMN
        assert "end_frame" in exc.value.message

    def test_comma_separated_file_hints_delimiter(self):
        data = b"start_frame,end_frame,filename\n1,2,a\n"

        with pytest.raises(ManifestError) as exc:
            parse_manifest(data)

        assert exc.value.kind == ManifestError.MISSING_COLUMN
        assert "';'" in exc.value.message

    @pytest.mark.parametrize("data", [b"", b"\n\n", b"start_frame;end_frame;filename\n"])
    def test_empty(self, data):
        with pytest.raises(ManifestError) as exc:
            parse_manifest(data)

        assert exc.value.kind == ManifestError.EMPTY

    def test_invalid_encoding(self):
        with pytest.raises(ManifestError) as exc:
            parse_manifest(b"start_frame;end_frame;filename\n1;2;\xff\xfe\n")

        assert exc.value.kind == ManifestError.UNREADABLE

    def test_range_problems_do_not_fail_parse(self):
        data = make_manifest([(-5, 10, "neg"), (50, 20, "backwards"), (1, 2, "")])

        jobs = parse_manifest(data)

        assert len(jobs) == 3
        assert "start_frame" in jobs[0].problems()[0]
        assert "before" in jobs[1].problems()[0]
        assert jobs[2].problems() == ["filename is empty"]


class TestCutJob:

    def test_zero_length_is_valid(self):
        assert CutJob(100, 100, "still").problems() == []

    def test_describe(self):
        assert CutJob(300, 600, "clipA").describe() == "clipA (frames 300-600)"
        assert CutJob(1.5, 3, "", row_number=4).describe() == "<row 4> (frames 1.5-3)"


class TestLoadManifest:

    def test_csv_file(self, tmp_path):
        path = tmp_path / "cuts.csv"
        path.write_bytes(make_manifest([(0, 25, "a")]))

        assert load_manifest(path) == [CutJob(0.0, 25.0, "a", row_number=1)]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ManifestError) as exc:
            load_manifest(tmp_path / "nope.csv")

        assert exc.value.kind == ManifestError.UNREADABLE

    def test_excel_workbook(self, tmp_path):
        wb = Workbook()
        ws = wb.active
        ws.append(["filename", "start_frame", "end_frame"])
        ws.append(["clipA", 300, 600])
        ws.append([None, None, None])
        ws.append([42, "12,5", 30.0])
        path = tmp_path / "cuts.xlsx"
        wb.save(path)

        jobs = load_manifest(path)

        assert jobs == [
            CutJob(300.0, 600.0, "clipA", row_number=1),
            CutJob(12.5, 30.0, "42", row_number=2),
        ]

    def test_excel_text_frame_fails(self, tmp_path):
        wb = Workbook()
        ws = wb.active
        ws.append(["start_frame", "end_frame", "filename"])
        ws.append(["first", 10, "a"])
        path = tmp_path / "cuts.xlsx"
        wb.save(path)

        with pytest.raises(ManifestError) as exc:
            load_manifest(path)

        assert exc.value.kind == ManifestError.TYPE_MISMATCH

    def test_corrupt_workbook(self, tmp_path):
        path = tmp_path / "cuts.xlsx"
        path.write_bytes(b"not a zip")

        with pytest.raises(ManifestError) as exc:
            load_manifest(path)

        assert exc.value.kind == ManifestError.UNREADABLE


class TestFilenameCharacters:

    def test_null_byte_row_parses_but_is_invalid(self):
        jobs = parse_manifest(b"start_frame;end_frame;filename\n0;1;bad\x00name\n1;2;ok\n")

        assert len(jobs) == 2
        assert "control characters" in jobs[0].problems()[0]
        assert jobs[1].problems() == []

    @pytest.mark.parametrize("stem", ["tab\there", "bell\x07", "del\x7f"])
    def test_control_characters_rejected(self, stem):
        assert CutJob(0, 1, stem).problems()

    def test_unicode_names_allowed(self):
        assert CutJob(0, 1, "séquence 1 – plan B").problems() == []
