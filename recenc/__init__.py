"""
recenc: converts recorded remote-desktop session streams into video files.

The package is organised in layers, from the most static to the most
procedural:

    config:   constants and user-overridable settings (``config.user.yaml``).
    domain:   run configuration, encoding jobs, the codec allow-list and the
              exception hierarchy.
    services: the Encoder contract and its ffmpeg-backed implementation.
    pipeline: the batch and single-file orchestrators.
    cli:      argument parsing and the driver that picks a run mode.
"""

__version__ = "1.0.0"
