"""Clean raw header or OCR text before address parsing.

Whitespace of any kind becomes a plain space, invisible and control
characters are dropped, and so is U+FFFD which shows up wherever charset
detection failed upstream.
"""

import unicodedata

REPLACEMENT_CHAR = "\ufffd"

# Whitespace outside the Zs category that still counts as a space
_EXTRA_SPACES = frozenset("\t\n\v\f\r\x85\u2028\u2029\u200b")


def is_space(ch: str) -> bool:
    """Return True for characters that sanitize() turns into a plain space."""
    return ch in _EXTRA_SPACES or unicodedata.category(ch) == "Zs"


def _is_graphic(ch: str) -> bool:
    return not unicodedata.category(ch).startswith("C")


def sanitize(text: str | None) -> str:
    """Normalize whitespace and strip non-printable characters.

    Idempotent: sanitize(sanitize(s)) == sanitize(s).
    """
    if not text:
        return ""
    out = []
    for ch in text:
        if is_space(ch):
            out.append(" ")
        elif ch != REPLACEMENT_CHAR and _is_graphic(ch):
            out.append(ch)
    return "".join(out).strip(" ")
