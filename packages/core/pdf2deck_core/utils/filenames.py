"""Filename helpers for exported decks."""

import re

# Characters rejected by at least one common filesystem
ILLEGAL_FILENAME_CHARS = re.compile(r'[/\\?%*:|"<>]')

DEFAULT_FILENAME = "presentation"
DEFAULT_MAX_LENGTH = 50


def safe_filename(
    title: str | None,
    extension: str = ".pptx",
    max_length: int = DEFAULT_MAX_LENGTH,
    default: str = DEFAULT_FILENAME,
) -> str:
    """Derive a filesystem-safe file name from a presentation title.

    Illegal characters become ``-``, control characters are removed, the stem
    is capped at ``max_length`` characters and ``default`` is used when
    nothing usable remains.

    >>> safe_filename("Q3: Results/Plan")
    'Q3- Results-Plan.pptx'
    """
    stem = ILLEGAL_FILENAME_CHARS.sub("-", title or "")
    stem = "".join(ch for ch in stem if ch.isprintable())
    stem = stem.strip()[:max_length].strip()
    # A leading dot would hide the file on POSIX systems
    stem = stem.lstrip(".")
    return f"{stem or default}{extension}"
