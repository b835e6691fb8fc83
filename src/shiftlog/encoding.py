"""
Text encoding normalisation for log payloads.
"""

from __future__ import annotations

import codecs
from typing import Optional


def check_encoding(encoding: Optional[str]) -> Optional[str]:
    """Return the canonical codec name, or raise ValueError for unknown codecs."""
    if encoding is None:
        return None
    try:
        return codecs.lookup(encoding).name
    except LookupError:
        raise ValueError(f"Unknown encoding: {encoding!r}") from None


def normalize(text: str, encoding: Optional[str]) -> str:
    """Make ``text`` representable in ``encoding``.

    Characters the target encoding cannot hold are replaced with the codec's
    replacement marker. ``None`` leaves the text untouched. The encoding is
    expected to have passed ``check_encoding``.
    """
    if encoding is None:
        return text
    return text.encode(encoding, errors="replace").decode(encoding, errors="replace")
