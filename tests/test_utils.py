"""Tests for frame timing and output path helpers."""

import os

import pytest

from frame_cutter.errors import PathError
from frame_cutter.manifest import CutJob
from frame_cutter.utils import (
    compute_clip_times,
    ensure_output_dir,
    format_duration,
    format_seconds,
    resolve_output_path,
)


class TestComputeClipTimes:

    def test_thirty_fps(self):
        start, duration = compute_clip_times(CutJob(300, 600, "clipA"), 30)

        assert start == 10.0
        assert duration == 10.0

    def test_ntsc_rate_keeps_precision(self):
        start, duration = compute_clip_times(CutJob(1001, 2002, "a"), 29.97)

        assert format_seconds(start) == "33.4001"
        assert format_seconds(duration) == "33.4001"

    def test_zero_length(self):
        assert compute_clip_times(CutJob(48, 48, "a"), 24) == (2.0, 0.0)

    @pytest.mark.parametrize("fps", [1, 23.976, 25, 59.94, 120])
    @pytest.mark.parametrize("start,end", [(0, 0), (0, 1), (17, 4000), (2.5, 3.5)])
    def test_duration_never_negative(self, fps, start, end):
        _, duration = compute_clip_times(CutJob(start, end, "a"), fps)

        assert duration >= 0
        assert duration == pytest.approx((end - start) / fps)


def test_format_seconds_four_decimals():
    assert format_seconds(10) == "10.0000"
    assert format_seconds(1 / 3) == "0.3333"


def test_format_duration():
    assert format_duration(3725.9) == "01:02:05"


class TestResolveOutputPath:

    def test_without_prefix(self):
        assert str(resolve_output_path("/out", "", "clipA")) == os.path.abspath("/out/clipA.mov")

    def test_with_prefix(self):
        path = resolve_output_path("/out", "take1", "clipA")

        assert path.name == "take1_clipA.mov"

    def test_custom_extension(self):
        assert resolve_output_path("/out", "", "clipA", "mp4").name == "clipA.mp4"

    def test_relative_directory_made_absolute(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        path = resolve_output_path("clips", "", "a")

        assert path.is_absolute()
        assert path == tmp_path / "clips" / "a.mov"

    def test_stem_with_subfolder(self, tmp_path):
        path = resolve_output_path(tmp_path, "", "scene1/shot2")

        assert path == tmp_path / "scene1" / "shot2.mov"


class TestEnsureOutputDir:

    def test_creates_nested_parents(self, tmp_path):
        target = tmp_path / "a" / "b" / "clip.mov"

        ensure_output_dir(target)

        assert target.parent.is_dir()

    def test_idempotent(self, tmp_path):
        target = resolve_output_path(tmp_path / "out", "take1", "clipA")

        ensure_output_dir(target)
        ensure_output_dir(target)

        assert target.parent.is_dir()

    def test_parent_is_a_file(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(PathError) as exc:
            ensure_output_dir(blocker / "clip.mov")

        assert exc.value.kind == PathError.DIRECTORY_CREATION_FAILED


class TestOutputPathContainment:

    def test_absolute_stem_stays_in_output_directory(self, tmp_path):
        out = tmp_path / "out"

        path = resolve_output_path(out, "", str(tmp_path / "elsewhere" / "clipA"))

        assert path.is_relative_to(out)
        assert path.name == "clipA.mov"

    def test_absolute_stem_with_prefix_matches_unprefixed_folder(self, tmp_path):
        out = tmp_path / "out"

        plain = resolve_output_path(out, "", "/shots/clipA")
        prefixed = resolve_output_path(out, "take1", "/shots/clipA")

        assert plain == out / "shots" / "clipA.mov"
        assert prefixed.is_relative_to(out)

    def test_leading_backslash_stripped(self, tmp_path):
        path = resolve_output_path(tmp_path, "", "\\clipA")

        assert path.parent == tmp_path

    @pytest.mark.parametrize("stem", ["../clipA", "sub/../../clipA", "../../../../etc/clipA"])
    def test_parent_traversal_rejected(self, tmp_path, stem):
        with pytest.raises(PathError) as exc:
            resolve_output_path(tmp_path / "out", "", stem)

        assert exc.value.kind == PathError.OUTSIDE_OUTPUT_DIRECTORY

    def test_traversal_that_stays_inside_is_allowed(self, tmp_path):
        path = resolve_output_path(tmp_path, "", "a/../clipA")

        assert path == tmp_path / "clipA.mov"

    def test_null_byte_in_folder_is_path_error(self, tmp_path):
        with pytest.raises(PathError):
            ensure_output_dir(tmp_path / "bad\x00dir" / "clip.mov")
