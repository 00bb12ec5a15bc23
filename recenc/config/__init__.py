"""
Configuration Package for recenc.

This package centralizes the static settings of the encoder: default video
dimensions, bitrate and codec, the codec allow-list, output naming rules,
and logging format. User-specific overrides (the location of the ffmpeg
executable and the log level) are read from an optional ``config.user.yaml``
file at the project root.
"""
