"""
Defines custom exception types for recenc.

These exceptions let each layer react to exactly the failures it owns. The CLI
driver turns any `ArgumentException` into exit status 1, the orchestrators
catch `EncodingException` to count or report a failed file, and nothing else
is swallowed.

All custom exceptions inherit from the base `RecEncException`.
"""


class RecEncException(Exception):
    """Base class for all custom exceptions in recenc."""

    pass


# --- Command-Line Argument Exceptions ---
class ArgumentException(RecEncException):
    """Base class for invalid invocations. The process exits with status 1."""

    pass


class InvalidArgumentException(ArgumentException):
    """
    Raised for a malformed dimension or bitrate string, or an unknown flag.

    The usage text is printed to stderr and no encoding is attempted.
    """

    pass


class UnsupportedCodecException(ArgumentException):
    """
    Raised when an explicitly requested codec is not in the allow-list.

    Attributes:
        codec: The rejected codec identifier.
    """

    def __init__(self, codec: str):
        super().__init__(f'Unsupported codec "{codec}".')
        self.codec = codec


class MissingOutputException(ArgumentException):
    """Raised when single-file mode is requested with -i but without -o."""

    pass


class MissingInputException(ArgumentException):
    """Raised when -o is given without -i. There is nothing to encode."""

    pass


# --- Encoding Exceptions ---
class EncodingException(RecEncException):
    """
    Base class for failures signalled by the Encoder.

    Orchestrators catch this class: batch mode counts the file as failed and
    moves on, single-file mode exits with status 1.
    """

    pass


class EncodeFailureException(EncodingException):
    """Raised when the recording could not be turned into a video file."""

    pass


class RecordingNotFoundException(EncodingException):
    """Raised when the input recording does not exist or is not a file."""

    pass


class RecordingLockedException(EncodingException):
    """
    Raised when the recording is still being written by another process.

    This is skipped when the job's force flag is set.
    """

    pass


class CodecLibraryUnavailableException(EncodingException):
    """Raised when no usable ffmpeg executable could be located."""

    pass
