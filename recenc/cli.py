"""
Command-Line Interface (CLI) for recenc.

This module parses the command line into an immutable `RunConfiguration`,
validates an explicitly requested codec, initializes the codec library and
hands control to the batch or single-file pipeline.

Invocation errors never raise out of `run()`: they print the usage text (or
the codec allow-list) to stderr and turn into exit status 1.
"""
import argparse
import re
import sys
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from . import __version__
from .config.common import LOG_LEVEL, LOGGER_FORMAT, PROGRAM_NAME
from .config.video import DEFAULT_BITRATE, DEFAULT_CODEC, DEFAULT_HEIGHT, DEFAULT_WIDTH
from .domain.codecs import is_allowed, list_allowed
from .domain.exceptions import (
    InvalidArgumentException,
    MissingInputException,
    MissingOutputException,
    UnsupportedCodecException,
)
from .domain.models import RunConfiguration
from .pipeline.video_pipeline import EXIT_FAILURE, run_batch, run_single
from .services.encoding_service import Encoder
from .utils.codec_library import CodecLibrary

USAGE = (
    "USAGE:\n"
    " BATCH MODE:\n"
    " {prog} [-s WIDTHxHEIGHT] [-r BITRATE] [-f] [FILE]...\n"
    "\n"
    " SINGLE FILE MODE:\n"
    " {prog} [-s WIDTHxHEIGHT] [-r BITRATE] [-c CODEC] [-i INPUT_FILE] [-o OUTPUT_FILE] [-f]\n"
)

_DIMENSIONS_RE = re.compile(r"([0-9]+)x([0-9]+)")
_BITRATE_RE = re.compile(r"[0-9]+")


class RecEncArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting with argparse's status 2."""

    def error(self, message):
        raise InvalidArgumentException(message)


def parse_dimensions(value: str) -> Tuple[int, int]:
    """
    Parses a ``WIDTHxHEIGHT`` string such as ``1920x1080``.

    Raises:
        InvalidArgumentException: If the string is not two decimal integers
            joined by ``x``, or either of them is zero.
    """
    match = _DIMENSIONS_RE.fullmatch(value)
    if not match:
        raise InvalidArgumentException(f"Invalid dimensions: {value!r}")
    width, height = int(match.group(1)), int(match.group(2))
    if width <= 0 or height <= 0:
        raise InvalidArgumentException(f"Invalid dimensions: {value!r}")
    return width, height


def parse_bitrate(value: str) -> int:
    """Parses a positive decimal bitrate in bits per second."""
    if not _BITRATE_RE.fullmatch(value):
        raise InvalidArgumentException(f"Invalid bitrate: {value!r}")
    bitrate = int(value)
    if bitrate <= 0:
        raise InvalidArgumentException(f"Invalid bitrate: {value!r}")
    return bitrate


def build_parser() -> RecEncArgumentParser:
    parser = RecEncArgumentParser(
        prog=PROGRAM_NAME,
        description="Converts session recordings into video files.",
        add_help=False,
    )
    parser.add_argument(
        "-s", dest="dimensions", type=parse_dimensions,
        default=(DEFAULT_WIDTH, DEFAULT_HEIGHT), metavar="WIDTHxHEIGHT",
        help="Output video dimensions.",
    )
    parser.add_argument(
        "-r", dest="bitrate", type=parse_bitrate, default=DEFAULT_BITRATE,
        metavar="BITRATE", help="Output bitrate in bits per second.",
    )
    parser.add_argument(
        "-f", dest="force", action="store_true",
        help="Encode recordings even if another process is still writing them.",
    )
    parser.add_argument("-i", dest="input", default=None, metavar="INPUT_FILE", help="Input recording (single-file mode).")
    parser.add_argument("-o", dest="output", default=None, metavar="OUTPUT_FILE", help="Output video (single-file mode).")
    parser.add_argument(
        "-c", dest="codec", default=None, metavar="CODEC",
        help=f"Codec for single-file mode, one of: {', '.join(list_allowed())}.",
    )
    parser.add_argument("files", nargs="*", metavar="FILE", help="Recordings to encode in batch mode.")
    return parser


def get_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parses command-line arguments.

    Options and file names may be interleaved, as with getopt.

    Raises:
        InvalidArgumentException: For an unknown flag, a missing option value
            or a malformed dimension or bitrate.
    """
    return build_parser().parse_intermixed_args(argv)


def build_run_configuration(args: argparse.Namespace) -> RunConfiguration:
    """
    Builds the immutable run configuration from parsed arguments.

    Raises:
        UnsupportedCodecException: If ``-c`` named a codec outside the allow-list.
    """
    if args.codec is not None and not is_allowed(args.codec):
        raise UnsupportedCodecException(args.codec)

    width, height = args.dimensions
    return RunConfiguration(
        width=width,
        height=height,
        bitrate=args.bitrate,
        codec=args.codec if args.codec is not None else DEFAULT_CODEC,
        force=args.force,
    )


def print_usage(prog: str = PROGRAM_NAME):
    print(USAGE.format(prog=prog), file=sys.stderr, end="")


def print_allowed_codecs():
    lines = ["Allowed codecs:"] + [f"  {codec}" for codec in list_allowed()]
    print("\n".join(lines), file=sys.stderr)


def _dispatch(args: argparse.Namespace, config: RunConfiguration, encoder: Optional[Encoder]) -> int:
    if args.input is None and args.output is None:
        exit_status, _ = run_batch(config, args.files, encoder)
        return exit_status

    if args.input is None:
        raise MissingInputException("No input file specified. Nothing to do.")
    if args.output is None:
        raise MissingOutputException("No output file specified. Cannot continue.")

    if args.files:
        logger.warning(f"Ignoring extra arguments in single-file mode: {' '.join(args.files)}")
    return run_single(config, args.input, args.output, encoder)


def run(argv: Optional[Sequence[str]] = None, encoder: Optional[Encoder] = None) -> int:
    """
    Runs one invocation and returns the process exit status.

    Args:
        argv: Command-line arguments without the program name.
        encoder: Encoder to use; the ffmpeg-backed one when omitted.
    """
    try:
        args = get_args(argv)
        config = build_run_configuration(args)
    except UnsupportedCodecException as e:
        logger.error(str(e))
        print_allowed_codecs()
        return EXIT_FAILURE
    except InvalidArgumentException as e:
        logger.error(str(e))
        print_usage()
        return EXIT_FAILURE

    logger.info(f"Session recording video encoder ({PROGRAM_NAME}) version {__version__}")
    CodecLibrary.initialize()

    try:
        return _dispatch(args, config, encoder)
    except MissingInputException as e:
        logger.info(str(e))
        return EXIT_FAILURE
    except MissingOutputException as e:
        logger.error(str(e))
        return EXIT_FAILURE


def configure_logger(level: str = LOG_LEVEL):
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)


def main(argv: Optional[List[str]] = None):
    configure_logger()
    sys.exit(run(argv))
