"""
A convenience module for importing the encoder services.

Pipelines import encoders from here instead of from their defining modules,
which keeps them decoupled from the package's file layout.
"""
from .encoder_base import Encoder
from .video_encoder import FFmpegEncoder

__all__ = ["Encoder", "FFmpegEncoder"]
