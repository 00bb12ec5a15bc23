"""
Utilities Package for recenc.

Modules:
    - codec_library.py: Locates and verifies the ffmpeg executable once per
      process.
    - format_utils.py: Helpers that turn durations, sizes and bitrates into
      human-readable strings for log messages.
"""
