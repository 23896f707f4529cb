import os
import subprocess
import sys
from pathlib import Path

import pytest

# Make the src/ layout importable without installing the package
SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC not in sys.path:
    sys.path.insert(0, SRC)


class FakeFFmpeg:
    """Stands in for subprocess.run and behaves like ffmpeg.

    Clips whose output name contains one of ``fail_names`` exit with code 1,
    clips in ``missing_names`` exit cleanly without writing a file.
    """

    def __init__(self):
        self.calls = []
        self.fail_names = set()
        self.missing_names = set()
        self.signal_names = set()

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if cmd[1:] == ["-version"]:
            return subprocess.CompletedProcess(cmd, 0, "ffmpeg version 6.1 Copyright\n", "")

        output = Path(cmd[-1])
        if any(name in output.name for name in self.fail_names):
            return subprocess.CompletedProcess(cmd, 1, "", "Invalid data found when processing input\n")
        if any(name in output.name for name in self.signal_names):
            return subprocess.CompletedProcess(cmd, -9, "", "")
        if not any(name in output.name for name in self.missing_names):
            output.write_bytes(b"clip")
        return subprocess.CompletedProcess(cmd, 0, "", "")

    @property
    def cut_calls(self):
        return [c for c in self.calls if c[1:] != ["-version"]]


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    fake = FakeFFmpeg()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def source_video(tmp_path):
    video = tmp_path / "source video.mov"
    video.write_bytes(b"\x00" * 16)
    return video


@pytest.fixture
def output_dir(tmp_path):
    return tmp_path / "clips"


@pytest.fixture(autouse=True)
def isolated_log_file(tmp_path, monkeypatch):
    monkeypatch.setenv("FRAME_CUTTER_LOG_FILE", str(tmp_path / "log.txt"))


def make_manifest(rows, header="start_frame;end_frame;filename") -> bytes:
    lines = [header] + [";".join(str(v) for v in row) for row in rows]
    return ("\n".join(lines) + "\n").encode("utf-8")
