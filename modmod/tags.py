"""Turn titles into lower-case, dash-separated tags for file and directory names."""

from __future__ import annotations

_ASCII_LOWER = str.maketrans(
    "ABCDEFGHIJKLMNOPQRSTUVWXYZ", "abcdefghijklmnopqrstuvwxyz"
)


def to_tag(s: object) -> str:
    """Lower-case ASCII letters and join whitespace-separated words with dashes.

    A string without any words is returned lower-cased but otherwise unchanged.
    """
    text = str(s).translate(_ASCII_LOWER)
    words = text.split()
    if not words:
        return text
    return "-".join(words)


def to_prefixed_tag(s: object, prefix: object) -> str:
    """Tag ``s`` with ``prefix`` placed in front, separated by a dash."""
    return to_tag(f"{prefix}-{s}")