"""
The ffmpeg-backed Encoder.

Frames produced by `RecordingReader` are written as raw RGB24 video to the
stdin of an ffmpeg process built with ffmpeg-python. ffmpeg writes into a
hidden partial file next to the requested output, which is renamed into place
only after ffmpeg exits successfully.
"""
import os
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable

import ffmpeg
from loguru import logger

from ..config.video import (
    DEFAULT_CONTAINER,
    FRAMERATE,
    KNOWN_CONTAINER_EXTENSIONS,
    OUTPUT_PIXEL_FORMAT,
    RAW_PIXEL_FORMAT,
)
from ..domain.exceptions import (
    EncodeFailureException,
    EncodingException,
    RecordingLockedException,
    RecordingNotFoundException,
)
from ..domain.models import EncodingJob
from ..utils.codec_library import CodecLibrary
from ..utils.format_utils import format_timedelta, formatted_size
from .encoder_base import Encoder
from .recording import BlankRenderer, RecordingReader, Renderer, is_recording_locked


class FFmpegEncoder(Encoder):
    def __init__(
        self,
        renderer_factory: Callable[[int, int], Renderer] = BlankRenderer,
        framerate: int = FRAMERATE,
    ):
        self.renderer_factory = renderer_factory
        self.framerate = framerate

    def encode(self, job: EncodingJob) -> Path:
        input_path = Path(job.input_path)
        output_path = Path(job.output_path)

        if not input_path.is_file():
            raise RecordingNotFoundException(f"Recording {input_path} does not exist.")
        if not output_path.name:
            raise EncodeFailureException(f"Output path {job.output_path!r} does not name a file.")

        try:
            locked = is_recording_locked(input_path)
        except OSError as e:
            raise EncodeFailureException(f"Cannot open {input_path}: {e}") from e

        if locked:
            if not job.force:
                raise RecordingLockedException(
                    f"{input_path} is in use by another process. Use -f to encode it anyway."
                )
            logger.warning(f"{input_path} is in use by another process; encoding anyway (-f).")

        ffmpeg_path = CodecLibrary.ffmpeg_path()
        partial_path = self.partial_output_path(output_path)
        reader = RecordingReader(
            input_path, self.renderer_factory(job.width, job.height), framerate=self.framerate
        )

        encode_start_datetime = datetime.now()
        try:
            frame_count = self._write_frames(ffmpeg_path, job, partial_path, reader.frames())
            os.replace(partial_path, output_path)
        except EncodingException:
            self._discard(partial_path)
            raise
        except (OSError, ffmpeg.Error) as e:
            self._discard(partial_path)
            raise EncodeFailureException(f"Encoding {input_path} failed: {e}") from e

        encode_time = datetime.now() - encode_start_datetime
        logger.info(
            f"Encoded {input_path.name} -> {output_path.name}: {frame_count} frame(s), "
            f"{formatted_size(output_path.stat().st_size)} in {format_timedelta(encode_time)}."
        )
        return output_path

    def _spawn(self, ffmpeg_path: str, job: EncodingJob, partial_path: Path) -> subprocess.Popen:
        """Starts ffmpeg reading raw frames from stdin and writing `partial_path`."""
        output_kwargs = {
            "vcodec": job.codec,
            "video_bitrate": job.bitrate,
            "pix_fmt": OUTPUT_PIXEL_FORMAT,
        }
        if partial_path.suffix.lower() not in KNOWN_CONTAINER_EXTENSIONS:
            output_kwargs["format"] = DEFAULT_CONTAINER

        stream = (
            ffmpeg
            .input(
                "pipe:",
                format="rawvideo",
                pix_fmt=RAW_PIXEL_FORMAT,
                s=f"{job.width}x{job.height}",
                framerate=self.framerate,
            )
            .output(str(partial_path), **output_kwargs)
            .global_args("-hide_banner", "-loglevel", "error")
            .overwrite_output()
        )
        logger.debug(f"ffmpeg command: {' '.join(stream.compile(cmd=ffmpeg_path))}")
        return stream.run_async(cmd=ffmpeg_path, pipe_stdin=True, pipe_stderr=True)

    def _write_frames(
        self, ffmpeg_path: str, job: EncodingJob, partial_path: Path, frames: Iterable[bytes]
    ) -> int:
        process = self._spawn(ffmpeg_path, job, partial_path)
        frame_count = 0
        try:
            for frame in frames:
                process.stdin.write(frame)
                frame_count += 1
        except BrokenPipeError:
            # ffmpeg exited early; its return code and stderr say why.
            logger.debug(f"ffmpeg closed its input after {frame_count} frame(s).")
        except Exception:
            process.kill()
            process.wait()
            raise

        _, stderr = process.communicate()
        if process.returncode != 0:
            message = (stderr or b"").decode("utf-8", errors="replace").strip()
            raise EncodeFailureException(f"ffmpeg exited with status {process.returncode}: {message}")
        return frame_count

    @staticmethod
    def _discard(partial_path: Path):
        try:
            partial_path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Could not remove partial output {partial_path}: {e}")
