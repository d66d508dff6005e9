"""Balanced-delimiter extraction used by the inline grammar.

Every extractor takes the full text and the position of an opening marker
and returns an :class:`Extraction` (the text between the markers and the
index just past the closing marker), or ``None`` when the marker at *pos*
has no matching close. A backslash always escapes the character after it,
so escaped markers never open, close or nest.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Extraction:
    """Result of a successful extraction."""

    inner: str
    end: int


def extract_bracketed(text: str, pos: int, opener: str, closer: str) -> Extraction | None:
    """Extract a bracketed span, tracking nesting of *opener*/*closer*.

    Args:
        text: Text to scan.
        pos: Index of the opening bracket.
        opener: Single opening character, e.g. ``"{"``.
        closer: Matching closing character, e.g. ``"}"``.

    Returns:
        The span between the outermost brackets, or None if unbalanced.
    """
    if not text.startswith(opener, pos):
        return None

    depth = 0
    index = pos
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return Extraction(text[pos + 1 : index], index + 1)
        index += 1
    return None


def extract_delimited(text: str, pos: int, delimiter: str) -> Extraction | None:
    """Extract a quote-like span where the same character opens and closes.

    The span ends at the first unescaped *delimiter* after the opening one;
    same-delimiter spans do not nest.
    """
    if not text.startswith(delimiter, pos):
        return None

    index = pos + 1
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == delimiter:
            return Extraction(text[pos + 1 : index], index + 1)
        index += 1
    return None


def extract_tagged(text: str, pos: int, open_tag: str, close_tag: str) -> Extraction | None:
    """Extract the span between multi-character tags, e.g. ``%%NAME%%``."""
    if not text.startswith(open_tag, pos):
        return None

    start = pos + len(open_tag)
    close = text.find(close_tag, start)
    if close < 0:
        return None
    return Extraction(text[start:close], close + len(close_tag))


def match_brackets(text: str, pos: int, opener: str, closer: str) -> dict[int, int]:
    """Match every unescaped *opener* from *pos* onwards in a single pass.

    Returns a mapping from each opener's index to the index just past its
    closer, or to -1 when the opener is never closed. For an opener reached
    by this scan the result agrees with :func:`extract_bracketed` at that
    index, so repeated extraction attempts on one text stay linear.
    """
    matches: dict[int, int] = {}
    stack: list[int] = []
    index = pos
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == opener:
            stack.append(index)
            matches[index] = -1
        elif char == closer and stack:
            matches[stack.pop()] = index + 1
        index += 1
    return matches
