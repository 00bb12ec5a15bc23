"""
This package contains the core domain models and rules of recenc.

Modules:
    exceptions.py: Custom exception types for argument, output-path and
                   encoding failures, allowing each layer to catch exactly
                   the failures it is responsible for.
    codecs.py:     The codec allow-list and its validator.
    models.py:     `RunConfiguration`, `EncodingJob`, `BatchResult` and the
                   output path length check.
"""
