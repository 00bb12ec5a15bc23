"""
Reading session recordings.

A recording is a stream of instructions. Each instruction is a list of
elements written as ``LENGTH.VALUE`` (LENGTH counts characters), separated by
``,`` and terminated by ``;``. The first element is the opcode. Only the
``sync`` instruction, whose first argument is a timestamp in milliseconds,
matters for timing: frames are emitted between consecutive syncs at a fixed
frame rate. Everything else is handed to a renderer.
"""
import errno
import os
import re
from pathlib import Path
from typing import Iterator, NamedTuple, Optional, TextIO, Tuple

from loguru import logger

from ..config.video import BACKGROUND_RGB, FRAMERATE
from ..domain.exceptions import EncodeFailureException

READ_CHUNK_SIZE = 64 * 1024
SYNC_OPCODE = "sync"

_LENGTH_RE = re.compile(r"[0-9]+")


class Instruction(NamedTuple):
    opcode: str
    args: Tuple[str, ...]


def iter_instructions(handle: TextIO, source_name: str = "<stream>") -> Iterator[Instruction]:
    """
    Parses instructions from a text stream, reading it in chunks.

    A trailing incomplete instruction (a recording cut off mid-write) is
    logged and dropped.

    Raises:
        EncodeFailureException: If an element length is not a decimal number
            or an element is followed by anything other than ``,`` or ``;``.
    """
    buffer = ""
    pos = 0
    elements = []
    exhausted = False

    while True:
        # characters needed past `pos` before the next element is complete
        needed = None
        dot = buffer.find(".", pos)
        if dot != -1:
            length_str = buffer[pos:dot]
            if not _LENGTH_RE.fullmatch(length_str):
                raise EncodeFailureException(
                    f"Malformed instruction in {source_name}: invalid element length {length_str[:20]!r}"
                )
            end = dot + 1 + int(length_str)
            if end < len(buffer):
                value = buffer[dot + 1:end]
                terminator = buffer[end]
                pos = end + 1
                elements.append(value)
                if terminator == ";":
                    yield Instruction(elements[0], tuple(elements[1:]))
                    elements = []
                elif terminator != ",":
                    raise EncodeFailureException(
                        f"Malformed instruction in {source_name}: unexpected {terminator!r} after element"
                    )
                continue
            needed = end + 1 - pos

        if exhausted:
            break

        chunks = [buffer[pos:]]
        available = len(chunks[0])
        while True:
            chunk = handle.read(READ_CHUNK_SIZE)
            if not chunk:
                exhausted = True
                break
            chunks.append(chunk)
            available += len(chunk)
            if needed is None or available >= needed:
                break
        buffer = "".join(chunks)
        pos = 0

    if elements or buffer[pos:].strip():
        logger.warning(f"{source_name} ends with an incomplete instruction; ignoring it.")


def is_recording_locked(path: Path) -> bool:
    """
    Tests whether another process holds a write lock on the recording.

    The process writing a recording keeps an exclusive advisory lock on it
    until the session ends. Windows has no advisory locks, so recordings are
    never reported as locked there.
    """
    if os.name == "nt":
        return False

    import fcntl

    with path.open("rb") as f:
        try:
            fcntl.lockf(f, fcntl.LOCK_SH | fcntl.LOCK_NB)
        except OSError as e:
            if e.errno in (errno.EACCES, errno.EAGAIN):
                return True
            raise
        fcntl.lockf(f, fcntl.LOCK_UN)
    return False


class Renderer:
    """
    Turns instructions into raw frames of ``width * height`` RGB24 pixels.

    Subclasses override `handle()` to apply drawing instructions to their
    canvas and `frame()` to return its current contents.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height

    def handle(self, instruction: Instruction):
        raise NotImplementedError("Subclasses must implement handle().")

    def frame(self) -> bytes:
        raise NotImplementedError("Subclasses must implement frame().")


class BlankRenderer(Renderer):
    """Renders every frame as a solid background; drawing instructions are ignored."""

    def __init__(self, width: int, height: int, background: Tuple[int, int, int] = BACKGROUND_RGB):
        super().__init__(width, height)
        self._frame = bytes(background) * (width * height)

    def handle(self, instruction: Instruction):
        pass

    def frame(self) -> bytes:
        return self._frame


class FrameTimeline:
    """
    Converts sync timestamps into frame counts at a fixed frame rate.

    The first sync fixes the origin. Frame positions are computed from the
    origin rather than from the previous sync so rounding never accumulates.
    Timestamps that go backwards produce no frames.
    """

    def __init__(self, framerate: int = FRAMERATE):
        self.framerate = framerate
        self.origin: Optional[int] = None
        self.frames_emitted = 0

    def advance(self, timestamp: int) -> int:
        """Returns how many frames cover the time up to `timestamp`."""
        if self.origin is None:
            self.origin = timestamp
            return 0
        target = (timestamp - self.origin) * self.framerate // 1000
        frames = max(0, target - self.frames_emitted)
        self.frames_emitted += frames
        return frames


class RecordingReader:
    """
    Produces the raw frame sequence of one recording.

    Each sync emits the previous synced picture for the time that elapsed
    since it, then captures the renderer's new state. The last captured
    picture is emitted once more at the end of the stream.
    """

    def __init__(self, path: Path, renderer: Renderer, framerate: int = FRAMERATE):
        self.path = Path(path)
        self.renderer = renderer
        self.timeline = FrameTimeline(framerate)
        self.instruction_count = 0

    def frames(self) -> Iterator[bytes]:
        """
        Yields raw frames in presentation order.

        Raises:
            EncodeFailureException: If the stream is malformed, a sync
                timestamp is not an integer, or the recording has no sync at all.
        """
        current: Optional[bytes] = None

        with self.path.open("r", encoding="utf-8", errors="replace", newline="") as handle:
            for instruction in iter_instructions(handle, source_name=self.path.name):
                self.instruction_count += 1
                self.renderer.handle(instruction)
                if instruction.opcode != SYNC_OPCODE:
                    continue

                timestamp = self._parse_timestamp(instruction)
                frames = self.timeline.advance(timestamp)
                if current is not None:
                    for _ in range(frames):
                        yield current
                current = self.renderer.frame()

        if current is None:
            raise EncodeFailureException(f"{self.path.name} contains no sync instructions; nothing to encode.")

        yield current
        logger.debug(
            f"Read {self.instruction_count} instruction(s) from {self.path.name} "
            f"({self.timeline.frames_emitted + 1} frame(s))."
        )

    def _parse_timestamp(self, instruction: Instruction) -> int:
        if not instruction.args:
            raise EncodeFailureException(f"sync instruction without timestamp in {self.path.name}")
        try:
            return int(instruction.args[0])
        except ValueError as e:
            raise EncodeFailureException(
                f"Invalid sync timestamp {instruction.args[0]!r} in {self.path.name}"
            ) from e
