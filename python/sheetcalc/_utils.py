"""Column letter helper."""

from __future__ import annotations


def column_index(letters: str) -> int:
    """``"A"`` -> 1, ``"Z"`` -> 26, ``"AA"`` -> 27."""
    if not letters or not letters.isalpha() or not letters.isascii():
        raise ValueError(f"Invalid column letter: {letters!r}")
    index = 0
    for ch in letters.upper():
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index
