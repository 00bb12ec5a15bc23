from pathlib import Path

import pytest

from recenc.config import common as common_config
from recenc.domain.exceptions import CodecLibraryUnavailableException
from recenc.utils.codec_library import CodecLibrary


def test_initialize_is_idempotent(monkeypatch):
    lookups = []

    def fake_lookup():
        lookups.append(1)
        return "/usr/bin/ffmpeg"

    monkeypatch.setattr(CodecLibrary, "_get_ffmpeg_path", staticmethod(fake_lookup))
    monkeypatch.setattr(CodecLibrary, "_verify", staticmethod(lambda path: True))

    assert CodecLibrary.initialize() == "/usr/bin/ffmpeg"
    assert CodecLibrary.initialize() == "/usr/bin/ffmpeg"
    assert CodecLibrary.ffmpeg_path() == "/usr/bin/ffmpeg"
    assert len(lookups) == 1


def test_missing_ffmpeg_is_remembered(monkeypatch, logs):
    lookups = []

    def fake_lookup():
        lookups.append(1)
        return None

    monkeypatch.setattr(CodecLibrary, "_get_ffmpeg_path", staticmethod(fake_lookup))

    assert CodecLibrary.initialize() is None
    with pytest.raises(CodecLibraryUnavailableException):
        CodecLibrary.ffmpeg_path()
    assert len(lookups) == 1
    assert any("ffmpeg not found" in m for m in logs.messages("ERROR"))


def test_failed_verification_marks_unavailable(monkeypatch):
    monkeypatch.setattr(CodecLibrary, "_get_ffmpeg_path", staticmethod(lambda: "/usr/bin/ffmpeg"))
    monkeypatch.setattr(CodecLibrary, "_verify", staticmethod(lambda path: False))
    assert CodecLibrary.initialize() is None


def test_configured_directory_takes_priority(monkeypatch, tmp_path):
    executable = tmp_path / "ffmpeg"
    executable.write_text("")
    monkeypatch.setattr(common_config, "MODULE_PATH", tmp_path)
    monkeypatch.setattr("sys.platform", "linux")
    assert CodecLibrary._get_ffmpeg_path() == str(executable)


def test_falls_back_to_path_lookup(monkeypatch, tmp_path):
    monkeypatch.setattr(common_config, "MODULE_PATH", tmp_path / "missing")
    monkeypatch.setattr("shutil.which", lambda name: f"/usr/local/bin/{name}")
    assert CodecLibrary._get_ffmpeg_path() in ("/usr/local/bin/ffmpeg", "/usr/local/bin/ffmpeg.exe")


def test_verify_handles_missing_executable(tmp_path, logs):
    assert CodecLibrary._verify(str(Path(tmp_path) / "no-such-ffmpeg")) is False
    assert logs.messages("ERROR")
