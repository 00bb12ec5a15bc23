import io
import os
import subprocess
import sys

import pytest

from recenc.domain.exceptions import EncodeFailureException
from recenc.services import recording
from recenc.services.recording import (
    BlankRenderer,
    FrameTimeline,
    Instruction,
    RecordingReader,
    Renderer,
    is_recording_locked,
    iter_instructions,
)


def parse(text):
    return list(iter_instructions(io.StringIO(text)))


class TestIterInstructions:
    def test_parses_opcode_and_args(self):
        assert parse("4.size,1.0,4.1024,3.768;4.sync,4.1000;") == [
            Instruction("size", ("0", "1024", "768")),
            Instruction("sync", ("1000",)),
        ]

    def test_values_may_contain_delimiters(self):
        assert parse("3.img,5.a,b;c;") == [Instruction("img", ("a,b;c",))]

    def test_lengths_count_characters(self):
        assert parse("4.name,3.été;") == [Instruction("name", ("été",))]

    def test_instruction_without_args(self):
        assert parse("3.nop;") == [Instruction("nop", ())]

    def test_reads_across_chunks(self, monkeypatch):
        monkeypatch.setattr(recording, "READ_CHUNK_SIZE", 3)
        assert parse("4.sync,4.1000;4.sync,4.1040;") == [
            Instruction("sync", ("1000",)),
            Instruction("sync", ("1040",)),
        ]

    def test_large_element_across_many_chunks(self, monkeypatch):
        monkeypatch.setattr(recording, "READ_CHUNK_SIZE", 7)
        blob = "ab;," * 2500
        assert parse(f"3.img,{len(blob)}.{blob};4.sync,1.5;") == [
            Instruction("img", (blob,)),
            Instruction("sync", ("5",)),
        ]

    def test_truncated_tail_is_dropped(self, logs):
        assert parse("4.sync,4.1000;4.sync,4.10") == [Instruction("sync", ("1000",))]
        assert any("incomplete instruction" in m for m in logs.messages("WARNING"))

    def test_empty_stream(self):
        assert parse("") == []

    @pytest.mark.parametrize("text", ["x.sync;", "4.sync|4.1000;", "-1.a;", "².abc;", "+3.abc;"])
    def test_malformed_stream(self, text):
        with pytest.raises(EncodeFailureException):
            parse(text)


class TestFrameTimeline:
    def test_first_sync_sets_origin(self):
        timeline = FrameTimeline(framerate=25)
        assert timeline.advance(5000) == 0

    def test_frames_follow_elapsed_time(self):
        timeline = FrameTimeline(framerate=25)
        timeline.advance(1000)
        assert timeline.advance(1200) == 5
        assert timeline.advance(1210) == 0
        assert timeline.advance(1240) == 1
        assert timeline.frames_emitted == 6

    def test_no_rounding_drift(self):
        timeline = FrameTimeline(framerate=25)
        timeline.advance(0)
        total = sum(timeline.advance(ts) for ts in range(30, 3001, 30))
        assert total == 75

    def test_backwards_timestamp_emits_nothing(self):
        timeline = FrameTimeline(framerate=25)
        timeline.advance(1000)
        assert timeline.advance(900) == 0


class CountingRenderer(Renderer):
    """Each sync shows a frame filled with the number of instructions seen so far."""

    def __init__(self, width, height):
        super().__init__(width, height)
        self.seen = 0

    def handle(self, instruction):
        self.seen += 1

    def frame(self):
        return bytes([self.seen]) * (self.width * self.height * 3)


class TestRecordingReader:
    def test_blank_frames(self, tmp_path):
        path = tmp_path / "session.rec"
        path.write_text("4.sync,4.1000;4.sync,4.1200;")
        frames = list(RecordingReader(path, BlankRenderer(4, 2)).frames())
        assert len(frames) == 6
        assert all(frame == bytes(24) for frame in frames)

    def test_previous_picture_fills_elapsed_time(self, tmp_path):
        path = tmp_path / "session.rec"
        path.write_text("4.sync,1.0;3.img,1.x;4.sync,2.80;")
        frames = list(RecordingReader(path, CountingRenderer(1, 1)).frames())
        # two frames of the first picture, then the final picture once
        assert frames == [bytes([1]) * 3, bytes([1]) * 3, bytes([3]) * 3]

    def test_no_sync_fails(self, tmp_path):
        path = tmp_path / "session.rec"
        path.write_text("4.size,1.0,2.64,2.48;")
        with pytest.raises(EncodeFailureException, match="no sync"):
            list(RecordingReader(path, BlankRenderer(4, 2)).frames())

    def test_bad_timestamp_fails(self, tmp_path):
        path = tmp_path / "session.rec"
        path.write_text("4.sync,3.abc;")
        with pytest.raises(EncodeFailureException, match="Invalid sync timestamp"):
            list(RecordingReader(path, BlankRenderer(4, 2)).frames())


def test_unlocked_recording(tmp_path):
    path = tmp_path / "session.rec"
    path.write_text("4.sync,1.0;")
    assert is_recording_locked(path) is False


LOCK_HOLDER = """
import fcntl, sys
with open(sys.argv[1], "r+b") as f:
    fcntl.lockf(f, fcntl.LOCK_EX)
    print("locked", flush=True)
    sys.stdin.read()
"""


@pytest.mark.skipif(os.name == "nt", reason="advisory locks are POSIX-only")
def test_recording_locked_by_another_process(tmp_path):
    path = tmp_path / "session.rec"
    path.write_text("4.sync,1.0;")
    holder = subprocess.Popen(
        [sys.executable, "-c", LOCK_HOLDER, str(path)],
        stdin=subprocess.PIPE, stdout=subprocess.PIPE, text=True,
    )
    try:
        assert holder.stdout.readline().strip() == "locked"
        assert is_recording_locked(path) is True
    finally:
        holder.stdin.close()
        holder.wait(timeout=10)
    assert is_recording_locked(path) is False
