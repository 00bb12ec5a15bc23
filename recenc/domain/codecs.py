"""
The codec allow-list.

Validation and error reporting both read the same `ALLOWED_CODECS` tuple, so
the accepted set and the list shown to the user cannot drift apart.
"""
from typing import Tuple

from ..config.video import ALLOWED_CODECS


def is_allowed(codec: str) -> bool:
    """Exact, case-sensitive membership test against the allow-list."""
    return codec in ALLOWED_CODECS


def list_allowed() -> Tuple[str, ...]:
    """Returns the allowed codecs in declaration order."""
    return ALLOWED_CODECS
