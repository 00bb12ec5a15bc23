"""
Main entry point for recenc.

Converts session recordings into video files. With ``-i`` and ``-o`` a single
recording is encoded; otherwise every trailing FILE argument is encoded to
``FILE.m4v``.
"""

from recenc.cli import main


if __name__ == "__main__":
    main()
