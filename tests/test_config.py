"""Tests for run configuration and saved settings."""

from pathlib import Path

from frame_cutter.config import RunConfig, get_setting, load_settings, save_settings


def test_create_normalises_ui_values(tmp_path):
    config = RunConfig.create(str(tmp_path / "v.mov"), str(tmp_path), "29.97", None)

    assert config.source_video_path == tmp_path / "v.mov"
    assert config.output_directory == tmp_path
    assert config.frame_rate == 29.97
    assert config.filename_prefix == ""
    assert config.container_ext == "mov"


def test_valid_config_has_no_problems(source_video, output_dir):
    assert RunConfig.create(source_video, output_dir, 30).problems() == []


def test_empty_paths_reported():
    problems = RunConfig.create("", "", 30).problems()

    assert "No source video selected" in problems
    assert "No output directory selected" in problems


def test_source_directory_rejected(tmp_path, output_dir):
    problems = RunConfig.create(tmp_path, output_dir, 30).problems()

    assert problems == [f"Source video is not a file: {tmp_path}"]


def test_settings_round_trip(tmp_path):
    path = tmp_path / "nested" / "settings.json"

    save_settings({"fps": 25.0, "prefix": "take1"}, path)
    save_settings({"prefix": "take2"}, path)

    assert load_settings(path) == {"fps": 25.0, "prefix": "take2"}
    assert get_setting("fps", path=path) == 25.0
    assert get_setting("missing", "x", path=path) == "x"


def test_corrupt_settings_ignored(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")

    assert load_settings(path) == {}
    assert load_settings(Path(tmp_path / "absent.json")) == {}
