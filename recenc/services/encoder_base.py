"""
The Encoder contract.

An Encoder turns one session recording into one encoded video file. The
orchestrators depend only on this contract:

- `encode(job)` either returns the path of a complete output file or raises
  an `EncodingException` subclass. It never leaves a truncated file at the
  output path that could be mistaken for a complete one.
- With `job.force` unset, a recording still locked by the process writing it
  fails fast with `RecordingLockedException`; with it set, the Encoder
  proceeds anyway.
- Any codec the allow-list accepts must be supported.
"""
from pathlib import Path

from ..config.common import PARTIAL_FILE_INFIX, PARTIAL_FILE_PREFIX
from ..domain.models import EncodingJob


class Encoder:
    def encode(self, job: EncodingJob) -> Path:
        raise NotImplementedError("Subclasses must implement encode().")

    @staticmethod
    def partial_output_path(output_path: Path) -> Path:
        """
        Hidden sibling of `output_path` that receives data while encoding.

        The original extension is kept last so the container format can still
        be inferred from the name, e.g. ``out.m4v`` -> ``.out.partial.m4v``.
        """
        return output_path.with_name(
            f"{PARTIAL_FILE_PREFIX}{output_path.stem}{PARTIAL_FILE_INFIX}{output_path.suffix}"
        )
