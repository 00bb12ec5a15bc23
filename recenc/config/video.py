"""
Configuration settings related to video output.

This module defines the default output dimensions, bitrate and codec, the
fixed allow-list of codecs accepted for explicit selection, and the raw
frame format exchanged with ffmpeg.
"""

# --- Run Defaults ---
DEFAULT_WIDTH = 640
DEFAULT_HEIGHT = 480
DEFAULT_BITRATE = 2_000_000  # bps
DEFAULT_CODEC = "mpeg4"

# Batch mode always encodes with this codec, whatever -c says.
BATCH_CODEC = "mpeg4"

# --- Codec Allow-List ---
# Declaration order is the order used when listing the codecs to the user.
ALLOWED_CODECS = ("libx264", "libx265", "libvpx", "mpeg4")

# --- Frame Pipeline ---
FRAMERATE = 25
RAW_PIXEL_FORMAT = "rgb24"
RAW_BYTES_PER_PIXEL = 3
OUTPUT_PIXEL_FORMAT = "yuv420p"
BACKGROUND_RGB = (0, 0, 0)

# Container used when the output path has no extension ffmpeg can recognise.
DEFAULT_CONTAINER = "mp4"
KNOWN_CONTAINER_EXTENSIONS = (
    ".m4v", ".mp4", ".mov", ".mkv", ".webm", ".avi", ".ts", ".mpg", ".mpeg",
)
