"""
Data models passed between the CLI driver, the orchestrators and the Encoder.

`RunConfiguration` is built once per process and never mutated. Every file an
orchestrator processes becomes an `EncodingJob`, which carries everything the
Encoder needs. `BatchResult` is the only mutable model; it is owned by a
single batch run and tallies its outcome.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from ..config.common import BATCH_OUTPUT_SUFFIX, MAX_PATH_LENGTH
from ..config.video import DEFAULT_BITRATE, DEFAULT_CODEC, DEFAULT_HEIGHT, DEFAULT_WIDTH

PathLike = Union[str, Path]


@dataclass(frozen=True)
class RunConfiguration:
    """
    Immutable settings for one invocation.

    Attributes:
        width: Output video width in pixels.
        height: Output video height in pixels.
        bitrate: Output video bitrate in bits per second.
        codec: Codec identifier used in single-file mode.
        force: Encode recordings even if another process still holds them.
    """

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    bitrate: int = DEFAULT_BITRATE
    codec: str = DEFAULT_CODEC
    force: bool = False

    def __post_init__(self):
        for name in ("width", "height", "bitrate"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ValueError(f"{name} must be a positive integer, got {value!r}")

    @property
    def dimensions(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class EncodingJob:
    """A fully resolved unit of work for the Encoder."""

    input_path: str
    output_path: str
    codec: str
    width: int
    height: int
    bitrate: int
    force: bool = False

    @classmethod
    def from_config(
        cls, config: RunConfiguration, input_path: PathLike, output_path: PathLike, codec: str
    ) -> "EncodingJob":
        return cls(
            input_path=str(input_path),
            output_path=str(output_path),
            codec=codec,
            width=config.width,
            height=config.height,
            bitrate=config.bitrate,
            force=config.force,
        )


@dataclass
class BatchResult:
    """
    Outcome of one batch run.

    `failures` counts only Encoder failures. Files skipped because their output
    path was too long are counted in `skipped`; they are neither failures nor
    successes.
    """

    total_files: int = 0
    failures: int = 0
    skipped: int = 0

    @property
    def succeeded(self) -> int:
        return self.total_files - self.failures - self.skipped


@dataclass(frozen=True)
class OutputPathCheck:
    """Result of validating an output path against `MAX_PATH_LENGTH`."""

    path: str
    ok: bool

    @property
    def too_long(self) -> bool:
        return not self.ok


def check_output_path(path: PathLike) -> OutputPathCheck:
    """
    Checks that an output path fits within the maximum path length.

    The length is measured in bytes of the filesystem encoding, so non-ASCII
    names count as the native library would count them.
    """
    path_str = str(path)
    return OutputPathCheck(path=path_str, ok=len(os.fsencode(path_str)) < MAX_PATH_LENGTH)


def batch_output_path(input_path: PathLike) -> OutputPathCheck:
    """Names the output of a batch input by appending `BATCH_OUTPUT_SUFFIX`."""
    return check_output_path(f"{input_path}{BATCH_OUTPUT_SUFFIX}")
