"""
Orchestrators that turn command-line requests into encoding jobs.

`BatchPipeline` encodes each input recording next to itself as
``<input>.m4v`` and keeps going past failures. `SingleFilePipeline` encodes
one input to an explicitly named output and reports the outcome through its
exit status.
"""
from pathlib import Path
from typing import Optional, Sequence, Tuple

from loguru import logger

from ..config.video import BATCH_CODEC
from ..domain.exceptions import EncodingException
from ..domain.models import BatchResult, EncodingJob, RunConfiguration, batch_output_path, check_output_path
from ..services.encoding_service import Encoder, FFmpegEncoder

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class BaseEncodePipeline:
    def __init__(self, config: RunConfiguration, encoder: Optional[Encoder] = None):
        self.config = config
        self.encoder = encoder if encoder is not None else FFmpegEncoder()

    def _log_settings(self):
        logger.info(
            f"Video will be encoded at {self.config.width}x{self.config.height} "
            f"and {self.config.bitrate} bps."
        )

    def _encode(self, job: EncodingJob) -> bool:
        """Runs one job to completion. Returns False if the Encoder reported failure."""
        try:
            self.encoder.encode(job)
        except EncodingException as e:
            logger.error(f"{job.input_path}: {e}")
            logger.debug(f"{job.input_path} was NOT successfully encoded.")
            return False
        logger.debug(f"{job.input_path} was successfully encoded.")
        return True


class BatchPipeline(BaseEncodePipeline):
    """
    Encodes every input path to ``<path>.m4v``.

    Batch mode always uses the mpeg4 codec, whatever codec the configuration
    names. A failed or skipped file never stops the rest of the batch, and the
    batch itself always exits with status 0.
    """

    def run(self, input_paths: Sequence[str]) -> Tuple[int, BatchResult]:
        result = BatchResult(total_files=len(input_paths))

        if not input_paths:
            logger.info("No input files specified. Nothing to do.")
            return EXIT_SUCCESS, result

        logger.info(f"{result.total_files} input file(s) provided.")
        self._log_settings()

        for path in input_paths:
            output = batch_output_path(path)
            if output.too_long:
                logger.error(f'Cannot write output file for "{path}": Name too long')
                result.skipped += 1
                continue

            job = EncodingJob.from_config(self.config, path, output.path, BATCH_CODEC)
            if not self._encode(job):
                result.failures += 1

        if result.skipped:
            logger.warning(f"Skipped {result.skipped} of {result.total_files} file(s) with unusable output names.")

        if result.failures:
            logger.warning(f"Encoding failed for {result.failures} of {result.total_files} file(s).")
        elif result.skipped:
            logger.info("All other files encoded successfully.")
        else:
            logger.info("All files encoded successfully.")

        return EXIT_SUCCESS, result


class SingleFilePipeline(BaseEncodePipeline):
    """Encodes one input to an explicit output with the configured codec."""

    def run(self, input_path: str, output_path: str) -> int:
        self._log_settings()

        output = check_output_path(output_path)
        if output.too_long:
            logger.error(f'Cannot write output file for "{output_path}": Name too long')
            return EXIT_FAILURE
        if not Path(output.path).name:
            logger.error(f'Cannot write output file for "{output_path}": No file name')
            return EXIT_FAILURE

        job = EncodingJob.from_config(self.config, input_path, output.path, self.config.codec)
        return EXIT_SUCCESS if self._encode(job) else EXIT_FAILURE


def run_batch(
    config: RunConfiguration, input_paths: Sequence[str], encoder: Optional[Encoder] = None
) -> Tuple[int, BatchResult]:
    return BatchPipeline(config, encoder).run(input_paths)


def run_single(
    config: RunConfiguration, input_path: str, output_path: str, encoder: Optional[Encoder] = None
) -> int:
    return SingleFilePipeline(config, encoder).run(input_path, output_path)
