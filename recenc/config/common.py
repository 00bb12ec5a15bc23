"""
Common configuration settings used throughout the application.

This module contains globally shared constants for logging, output path
handling and the location of external tools. It also loads user-specific
settings from an optional YAML file, allowing the ffmpeg location and the
log level to be changed without modifying the source code.
"""
from pathlib import Path

import yaml
from loguru import logger

# --- User-Defined Configuration ---
# Settings loaded from a 'config.user.yaml' file located at the project root.
# Example:
#
#   paths:
#     ffmpeg_dir: /opt/ffmpeg/bin
#   logging:
#     level: DEBUG

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
USER_CONFIG_PATH = PROJECT_ROOT / "config.user.yaml"

# The directory containing the ffmpeg executable. If None, the executable is
# looked up on the system's PATH.
MODULE_PATH: Path | None = None

# The minimum severity written to the console sink.
LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

if USER_CONFIG_PATH.is_file():
    try:
        with USER_CONFIG_PATH.open("r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        paths_config = user_config.get("paths") or {}
        logging_config = user_config.get("logging") or {}

        ffmpeg_dir_str = paths_config.get("ffmpeg_dir")
        if ffmpeg_dir_str:
            MODULE_PATH = Path(ffmpeg_dir_str)

        level_str = str(logging_config.get("level", LOG_LEVEL)).upper()
        if level_str in VALID_LOG_LEVELS:
            LOG_LEVEL = level_str
        else:
            logger.warning(f"Ignoring unknown log level '{level_str}' in '{USER_CONFIG_PATH}'.")
    except (OSError, yaml.YAMLError, AttributeError) as e:
        logger.warning(f"Could not load or parse '{USER_CONFIG_PATH}': {e}")
else:
    logger.debug(f"User config '{USER_CONFIG_PATH}' not found. Relying on system PATH for executables.")


# --- Logging Configuration ---

# The format string for the Loguru console sink.
LOGGER_FORMAT = (
    "<green>{time:MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

PROGRAM_NAME = "recenc"


# --- Output Path Rules ---

# Output paths must be strictly shorter than this many bytes. The limit mirrors
# the path buffer size of the native library, minus room for the terminator.
MAX_PATH_LENGTH = 4096

# Suffix appended to each input path to name its output in batch mode.
BATCH_OUTPUT_SUFFIX = ".m4v"

# Prefix and infix of the hidden temporary file an encode writes into before
# it is renamed onto the final output path.
PARTIAL_FILE_PREFIX = "."
PARTIAL_FILE_INFIX = ".partial"
