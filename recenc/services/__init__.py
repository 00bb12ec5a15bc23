"""
Services Package for recenc.

A service performs one high-level task on behalf of the pipelines:

- **Encoders (`Encoder`, `FFmpegEncoder`):** turn one recording into one video
  file. `Encoder` defines the contract the orchestrators rely on;
  `FFmpegEncoder` implements it by piping rendered frames into ffmpeg.

- **Recording reader (`RecordingReader`):** reads a session recording's
  instruction stream, checks whether it is still being written, and produces
  the frame timeline fed to the encoder.
"""
