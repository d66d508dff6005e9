"""Parse wikidoc text into a tree of :class:`~wikidoc2pod.schemas.Node`.

Block rules are tried in a fixed order at the start of each line and the
first match wins: header, unordered list, ordered list, preformat,
paragraph, empty line. Inline rules are tried the same way at each position
of a block's text: whitespace, code, bold, italic, keyword, link, escape
code, parenthetical, and finally regular text.

Parsing is total. Every non-empty line is accepted by some block rule and
every inline position by regular text, so malformed markup degrades to
plain text instead of raising. Nested spans are capped at
:data:`MAX_NESTING_DEPTH` so deep input cannot exhaust the call stack.
"""

from __future__ import annotations

import re
from typing import Callable

from wikidoc2pod.delimiters import (
    Extraction,
    extract_bracketed,
    extract_delimited,
    extract_tagged,
    match_brackets,
)
from wikidoc2pod.schemas import Node, NodeKind

_HEADER_RE = re.compile(r"^(=+)[\t ]+(.*)$")
_BULLET_RE = re.compile(r"^\*(?:[\t ]+(.*))?$")
_NUMBERED_RE = re.compile(r"^0(?:[\t ]+(.*))?$")
_CONTINUATION_RE = re.compile(r"^[^*0\s]")
_INDENTED_RE = re.compile(r"^[\t ]+[^\t ]")
_EMPTY_RE = re.compile(r"^[\t ]*$")

_WHITESPACE_RE = re.compile(r"\s+")
_REGULAR_TEXT_RE = re.compile(r"\S+")

# Characters that open an inline span. When extraction fails at one of them
# only that character is taken as regular text.
_SPAN_OPENERS = frozenset("{*~[(%")

# Spans that contain inline markup (bold, italic, link labels, parentheses)
# nest at most this deep; deeper openers are taken as regular text.
MAX_NESTING_DEPTH = 50

_RuleResult = tuple[Node, int] | None


class WikidocParser:
    """Stateless wikidoc parser; one instance can be shared across threads."""

    def __init__(self) -> None:
        self._block_rules: tuple[Callable[[list[str], int], _RuleResult], ...] = (
            self._header,
            self._unordered_list,
            self._ordered_list,
            self._preformat,
            self._paragraph,
            self._empty_line,
        )
        self._inline_rules: tuple[Callable[[_InlineText, int], _RuleResult], ...] = (
            self._white_space,
            self._inline_code,
            self._bold_text,
            self._italic_text,
            self._key_word,
            self._link,
            self._escaped_char,
            self._parens,
        )

    def parse(self, text: str) -> list[Node]:
        """Parse *text* into top-level blocks, dropping separator empty lines."""
        return [
            block
            for block in self.parse_blocks(text)
            if block.kind is not NodeKind.EMPTY_LINE
        ]

    def parse_blocks(self, text: str) -> list[Node]:
        """Parse *text* into top-level blocks, keeping EmptyLine blocks."""
        lines = _split_lines(text)
        blocks: list[Node] = []
        index = 0
        while index < len(lines):
            node, index = self._parse_block(lines, index)
            blocks.append(node)
        return blocks

    def parse_inline(self, text: str) -> list[Node]:
        """Parse the inline markup of a single block's text."""
        return self._parse_inline(text, 0)

    # ------------------------------------------------------------------
    # Block rules
    # ------------------------------------------------------------------

    def _parse_block(self, lines: list[str], index: int) -> tuple[Node, int]:
        for rule in self._block_rules:
            result = rule(lines, index)
            if result is not None:
                return result
        raise AssertionError(f"no block rule accepted line {index}: {lines[index]!r}")

    def _header(self, lines: list[str], index: int) -> _RuleResult:
        match = _HEADER_RE.match(lines[index])
        if not match:
            return None
        node = Node(
            kind=NodeKind.HEADER,
            level=len(match.group(1)),
            content=self.parse_inline(match.group(2)),
        )
        return node, index + 1

    def _unordered_list(self, lines: list[str], index: int) -> _RuleResult:
        return self._list(lines, index, _BULLET_RE, NodeKind.UNORDERED_LIST, NodeKind.BULLET_ITEM)

    def _ordered_list(self, lines: list[str], index: int) -> _RuleResult:
        return self._list(lines, index, _NUMBERED_RE, NodeKind.ORDERED_LIST, NodeKind.NUMBERED_ITEM)

    def _list(
        self,
        lines: list[str],
        index: int,
        marker_re: re.Pattern[str],
        list_kind: NodeKind,
        item_kind: NodeKind,
    ) -> _RuleResult:
        items: list[Node] = []
        while index < len(lines):
            match = marker_re.match(lines[index])
            if not match:
                break
            item_lines = [match.group(1) or ""]
            index += 1
            while index < len(lines) and _CONTINUATION_RE.match(lines[index]):
                item_lines.append(lines[index])
                index += 1
            items.append(Node(kind=item_kind, content=self.parse_inline("\n".join(item_lines))))

        if not items:
            return None
        if index < len(lines) and _EMPTY_RE.match(lines[index]):
            index += 1
        return Node(kind=list_kind, content=items), index

    def _preformat(self, lines: list[str], index: int) -> _RuleResult:
        if not _INDENTED_RE.match(lines[index]):
            return None

        children: list[Node] = []
        index = _collect_indented(lines, index, children)
        while True:
            # A blank-line gap only belongs to the block if more indented
            # lines follow it.
            probe = index
            gap: list[Node] = []
            while probe < len(lines) and _EMPTY_RE.match(lines[probe]):
                gap.append(Node(kind=NodeKind.EMPTY_LINE, content=lines[probe]))
                probe += 1
            if not gap or probe >= len(lines) or not _INDENTED_RE.match(lines[probe]):
                break
            children.extend(gap)
            index = _collect_indented(lines, probe, children)

        if index < len(lines) and _EMPTY_RE.match(lines[index]):
            index += 1
        return Node(kind=NodeKind.PREFORMAT, content=children), index

    def _paragraph(self, lines: list[str], index: int) -> _RuleResult:
        start = index
        while index < len(lines) and _is_plain_line(lines[index]):
            index += 1
        if index == start:
            return None
        text = "\n".join(lines[start:index]) + "\n"
        return Node(kind=NodeKind.PARAGRAPH, content=self.parse_inline(text)), index

    def _empty_line(self, lines: list[str], index: int) -> _RuleResult:
        if not _EMPTY_RE.match(lines[index]):
            return None
        return Node(kind=NodeKind.EMPTY_LINE, content=lines[index]), index + 1

    # ------------------------------------------------------------------
    # Inline rules
    # ------------------------------------------------------------------

    def _parse_inline(self, text: str, depth: int) -> list[Node]:
        source = _InlineText(text, depth)
        nodes: list[Node] = []
        pos = 0
        while pos < len(text):
            node, pos = self._parse_chunk(source, pos)
            nodes.append(node)
        return nodes

    def _parse_chunk(self, source: _InlineText, pos: int) -> tuple[Node, int]:
        for rule in self._inline_rules:
            result = rule(source, pos)
            if result is not None:
                return result
        return _regular_text(source.text, pos)

    def _white_space(self, source: _InlineText, pos: int) -> _RuleResult:
        match = _WHITESPACE_RE.match(source.text, pos)
        if not match:
            return None
        return Node(kind=NodeKind.WHITE_SPACE, content=match.group()), match.end()

    def _inline_code(self, source: _InlineText, pos: int) -> _RuleResult:
        span = source.bracketed(pos, "{", "}")
        if span is None:
            return None
        return Node(kind=NodeKind.INLINE_CODE, content=span.inner), span.end

    def _bold_text(self, source: _InlineText, pos: int) -> _RuleResult:
        if source.at_depth_limit:
            return None
        span = extract_delimited(source.text, pos, "*")
        if span is None:
            return None
        children = self._parse_inline(span.inner, source.depth + 1)
        return Node(kind=NodeKind.BOLD_TEXT, content=children), span.end

    def _italic_text(self, source: _InlineText, pos: int) -> _RuleResult:
        if source.at_depth_limit:
            return None
        span = extract_delimited(source.text, pos, "~")
        if span is None:
            return None
        children = self._parse_inline(span.inner, source.depth + 1)
        return Node(kind=NodeKind.ITALIC_TEXT, content=children), span.end

    def _key_word(self, source: _InlineText, pos: int) -> _RuleResult:
        span = extract_tagged(source.text, pos, "%%", "%%")
        if span is None:
            return None
        return Node(kind=NodeKind.KEY_WORD, content=span.inner), span.end

    def _link(self, source: _InlineText, pos: int) -> _RuleResult:
        if source.at_depth_limit:
            return None
        span = source.bracketed(pos, "[", "]")
        if span is None or not span.inner:
            return None
        return self._link_content(span.inner, source.depth + 1), span.end

    def _link_content(self, inner: str, depth: int) -> Node:
        separator = _find_unescaped(inner, "|")
        if 0 <= separator < len(inner) - 1:
            children = [
                Node(kind=NodeKind.LINK_LABEL, content=self._parse_inline(inner[:separator], depth)),
                Node(kind=NodeKind.ESCAPED_CHAR, content="|"),
                Node(kind=NodeKind.LINK_TARGET, content=inner[separator + 1 :]),
            ]
        else:
            children = [Node(kind=NodeKind.LINK_TARGET, content=inner)]
        return Node(kind=NodeKind.LINK_CONTENT, content=children)

    def _escaped_char(self, source: _InlineText, pos: int) -> _RuleResult:
        if not source.text.startswith("E", pos):
            return None
        span = source.bracketed(pos + 1, "<", ">")
        if span is None:
            return None
        return Node(kind=NodeKind.ESCAPED_CHAR, content=f"E<{span.inner}>"), span.end

    def _parens(self, source: _InlineText, pos: int) -> _RuleResult:
        if source.at_depth_limit:
            return None
        span = source.bracketed(pos, "(", ")")
        if span is None:
            return None
        children = self._parse_inline(span.inner, source.depth + 1)
        return Node(kind=NodeKind.PARENS, content=children), span.end


class _InlineText:
    """One block's text during inline parsing, with its nesting depth.

    Bracket matches are computed once per opener character, so a text full
    of unclosed openers is still scanned in linear time.
    """

    def __init__(self, text: str, depth: int) -> None:
        self.text = text
        self.depth = depth
        self._brackets: dict[str, dict[int, int]] = {}

    @property
    def at_depth_limit(self) -> bool:
        return self.depth >= MAX_NESTING_DEPTH

    def bracketed(self, pos: int, opener: str, closer: str) -> Extraction | None:
        matches = self._brackets.get(opener)
        if matches is None:
            matches = self._brackets[opener] = match_brackets(self.text, pos, opener, closer)
        end = matches.get(pos)
        if end is None:
            # Not an opener seen by the cached scan; check this position directly.
            return extract_bracketed(self.text, pos, opener, closer)
        if end < 0:
            return None
        return Extraction(self.text[pos + 1 : end - 1], end)


def _split_lines(text: str) -> list[str]:
    if not text:
        return []
    if not text.endswith("\n"):
        text += "\n"
    return text.split("\n")[:-1]


def _collect_indented(lines: list[str], index: int, children: list[Node]) -> int:
    while index < len(lines) and _INDENTED_RE.match(lines[index]):
        children.append(Node(kind=NodeKind.INDENTED_LINE, content=lines[index]))
        index += 1
    return index


def _is_plain_line(line: str) -> bool:
    return not (
        _EMPTY_RE.match(line)
        or _INDENTED_RE.match(line)
        or _BULLET_RE.match(line)
        or _NUMBERED_RE.match(line)
    )


def _regular_text(text: str, pos: int) -> tuple[Node, int]:
    if text[pos] in _SPAN_OPENERS:
        end = pos + 1
    else:
        end = _REGULAR_TEXT_RE.match(text, pos).end()
    return Node(kind=NodeKind.REGULAR_TEXT, content=text[pos:end]), end


def _find_unescaped(text: str, char: str) -> int:
    index = 0
    while index < len(text):
        if text[index] == "\\":
            index += 2
            continue
        if text[index] == char:
            return index
        index += 1
    return -1


_DEFAULT_PARSER = WikidocParser()


def parse(text: str) -> list[Node]:
    """Parse wikidoc *text* with a shared :class:`WikidocParser`."""
    return _DEFAULT_PARSER.parse(text)
