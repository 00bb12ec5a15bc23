"""
This module provides the CodecLibrary class, the single place where the
external codec/container library (ffmpeg) is located and verified.
"""
import shutil
import subprocess
import sys
from typing import Optional

from loguru import logger

from ..config import common as common_config
from ..domain.exceptions import CodecLibraryUnavailableException


class CodecLibrary:
    """
    Process-wide handle on the ffmpeg executable.

    `initialize()` resolves and verifies the executable the first time it is
    called and caches the outcome; later calls return the cached path without
    touching the filesystem again. Both run modes go through the same
    initialization, so it happens exactly once per process.
    """

    _initialized: bool = False
    _ffmpeg_path: Optional[str] = None

    @staticmethod
    def _get_ffmpeg_path() -> Optional[str]:
        """
        Determines the ffmpeg executable to use.

        The directory configured as `paths.ffmpeg_dir` in `config.user.yaml`
        takes priority; otherwise the executable is looked up on PATH.

        Returns:
            The absolute path of the executable, or None if it cannot be found.
        """
        ffmpeg_exe_name = "ffmpeg.exe" if sys.platform == "win32" else "ffmpeg"

        module_path = common_config.MODULE_PATH
        if module_path and module_path.is_dir():
            configured_ffmpeg_path = module_path / ffmpeg_exe_name
            if configured_ffmpeg_path.is_file():
                logger.debug(f"Using ffmpeg from configured path: '{configured_ffmpeg_path}'")
                return str(configured_ffmpeg_path)
            logger.warning(
                f"`ffmpeg_dir` is configured, but '{ffmpeg_exe_name}' was not found there. "
                "Falling back to system PATH."
            )

        return shutil.which(ffmpeg_exe_name)

    @staticmethod
    def _verify(ffmpeg_path: str) -> bool:
        """Runs `ffmpeg -version` and logs its first line."""
        try:
            result = subprocess.run(
                [ffmpeg_path, "-version"],
                check=True,
                capture_output=True,
                text=True,
                encoding="utf-8",
            )
        except subprocess.CalledProcessError as e:
            logger.error(f"ffmpeg version command failed (return code {e.returncode}):\n{e.stderr}")
            return False
        except OSError as e:
            logger.error(f"Could not execute ffmpeg at '{ffmpeg_path}': {e}")
            return False

        version_output_lines = result.stdout.splitlines()
        if version_output_lines:
            logger.debug(f"ffmpeg version check successful: {version_output_lines[0]}")
        return True

    @classmethod
    def initialize(cls) -> Optional[str]:
        """
        Locates and verifies ffmpeg once; subsequent calls are no-ops.

        Returns:
            The verified executable path, or None if ffmpeg is unavailable.
        """
        if cls._initialized:
            return cls._ffmpeg_path

        ffmpeg_path = cls._get_ffmpeg_path()
        if ffmpeg_path is None:
            logger.error(
                "ffmpeg not found. Please ensure ffmpeg is installed and accessible.\n"
                "You can either add it to your system's PATH or set `paths.ffmpeg_dir` "
                "in the 'config.user.yaml' file."
            )
        elif not cls._verify(ffmpeg_path):
            ffmpeg_path = None

        cls._ffmpeg_path = ffmpeg_path
        cls._initialized = True
        return cls._ffmpeg_path

    @classmethod
    def ffmpeg_path(cls) -> str:
        """
        Returns the verified ffmpeg executable, initializing on first use.

        Raises:
            CodecLibraryUnavailableException: If no usable ffmpeg was found.
        """
        path = cls.initialize()
        if path is None:
            raise CodecLibraryUnavailableException("ffmpeg is not available.")
        return path

    @classmethod
    def reset(cls):
        """Forgets the cached result so the next call re-initializes."""
        cls._initialized = False
        cls._ffmpeg_path = None
