from pathlib import Path

import pytest
from loguru import logger

from recenc.domain.exceptions import EncodeFailureException
from recenc.services.encoder_base import Encoder
from recenc.utils.codec_library import CodecLibrary


class FakeEncoder(Encoder):
    """Records every job and fails the ones whose input is listed in `failing`."""

    def __init__(self, failing=()):
        self.jobs = []
        self.failing = set(failing)

    def encode(self, job):
        self.jobs.append(job)
        if job.input_path in self.failing:
            raise EncodeFailureException(f"cannot encode {job.input_path}")
        return Path(job.output_path)

    @property
    def inputs(self):
        return [job.input_path for job in self.jobs]


class LogCapture:
    def __init__(self):
        self.records = []

    def sink(self, message):
        self.records.append(message.record)

    def messages(self, level=None):
        return [r["message"] for r in self.records if level is None or r["level"].name == level]


@pytest.fixture
def make_encoder():
    return FakeEncoder


@pytest.fixture
def logs():
    capture = LogCapture()
    handler_id = logger.add(capture.sink, level="TRACE", format="{message}")
    yield capture
    logger.remove(handler_id)


@pytest.fixture(autouse=True)
def reset_codec_library():
    CodecLibrary.reset()
    yield
    CodecLibrary.reset()
