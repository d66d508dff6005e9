"""Render a wikidoc parse tree as Pod.

Each node kind has an opening text, a closing text and, for some leaf
kinds, a content handler. Openings and closings are either fixed strings or
callables computed from the node and the render context (header level,
ordered-list numbering). The tables are checked against
:class:`~wikidoc2pod.schemas.NodeKind` at import time.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, Union

from wikidoc2pod.exceptions import DispatchTableError
from wikidoc2pod.schemas import Node, NodeKind

MAX_HEADER_LEVEL = 4

ESCAPE_CODE_FOR: Mapping[str, str] = {
    ">": "E<gt>",
    "<": "E<lt>",
    "|": "E<verbar>",
    "/": "E<sol>",
}

_BACKSLASH_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)
_SPECIALS_RE = re.compile("[" + re.escape("".join(ESCAPE_CODE_FOR)) + "]")


@dataclass
class _RenderContext:
    """Per-call state shared across one walk of the tree."""

    keywords: Mapping[str, str] = field(default_factory=dict)
    # One counter per open ordered list, innermost last.
    counters: list[int] = field(default_factory=list)


_Fragment = Union[str, Callable[[Node, _RenderContext], str]]
_Handler = Callable[[Node, _RenderContext], str]


def escape_pod(text: str) -> str:
    """Remove backslash escapes, then replace Pod special characters.

    ``\\X`` becomes ``X`` for any character, after which ``<``, ``>``, ``|``
    and ``/`` become their ``E<...>`` codes. An escaped special character is
    therefore still converted.
    """
    text = _BACKSLASH_ESCAPE_RE.sub(r"\1", text)
    return _SPECIALS_RE.sub(lambda match: ESCAPE_CODE_FOR[match.group()], text)


def _open_header(node: Node, ctx: _RenderContext) -> str:
    return f"=head{min(node.level or 1, MAX_HEADER_LEVEL)} "


def _open_ordered_list(node: Node, ctx: _RenderContext) -> str:
    ctx.counters.append(1)
    return "=over\n\n"


def _close_ordered_list(node: Node, ctx: _RenderContext) -> str:
    ctx.counters.pop()
    return "=back\n\n"


def _open_numbered_item(node: Node, ctx: _RenderContext) -> str:
    if not ctx.counters:
        # A bare item rendered outside any ordered list starts its own count.
        ctx.counters.append(1)
    number = ctx.counters[-1]
    ctx.counters[-1] += 1
    return f"=item {number}.\n\n"


def _escape_regular_text(node: Node, ctx: _RenderContext) -> str:
    return escape_pod(node.text)


def _suppress_content(node: Node, ctx: _RenderContext) -> str:
    return ""


def _expand_keyword(node: Node, ctx: _RenderContext) -> str:
    value = ctx.keywords.get(node.text)
    return value if value is not None else f"%%{node.text}%%"


OPENING_OF: Mapping[NodeKind, _Fragment] = {
    NodeKind.PARAGRAPH: "",
    NodeKind.UNORDERED_LIST: "=over\n\n",
    NodeKind.ORDERED_LIST: _open_ordered_list,
    NodeKind.PREFORMAT: "",
    NodeKind.HEADER: _open_header,
    NodeKind.BULLET_ITEM: "=item *\n\n",
    NodeKind.NUMBERED_ITEM: _open_numbered_item,
    NodeKind.INDENTED_LINE: " ",
    NodeKind.PLAIN_LINE: "",
    NodeKind.EMPTY_LINE: " ",
    NodeKind.REGULAR_TEXT: "",
    NodeKind.ESCAPED_CHAR: "",
    NodeKind.WHITE_SPACE: "",
    NodeKind.INLINE_CODE: "C<<< ",
    NodeKind.BOLD_TEXT: "B<",
    NodeKind.ITALIC_TEXT: "I<",
    NodeKind.PARENS: "(",
    NodeKind.KEY_WORD: "",
    NodeKind.LINK_CONTENT: "L<",
    NodeKind.LINK_LABEL: "",
    NodeKind.LINK_TARGET: "",
}

CLOSING_OF: Mapping[NodeKind, _Fragment] = {
    NodeKind.PARAGRAPH: "\n",
    NodeKind.UNORDERED_LIST: "=back\n\n",
    NodeKind.ORDERED_LIST: _close_ordered_list,
    NodeKind.PREFORMAT: "\n",
    NodeKind.HEADER: "\n\n",
    NodeKind.BULLET_ITEM: "\n\n",
    NodeKind.NUMBERED_ITEM: "\n\n",
    NodeKind.INDENTED_LINE: "\n",
    NodeKind.PLAIN_LINE: "\n",
    NodeKind.EMPTY_LINE: "\n",
    NodeKind.REGULAR_TEXT: "",
    NodeKind.ESCAPED_CHAR: "",
    NodeKind.WHITE_SPACE: "",
    NodeKind.INLINE_CODE: " >>>",
    NodeKind.BOLD_TEXT: ">",
    NodeKind.ITALIC_TEXT: ">",
    NodeKind.PARENS: ")",
    NodeKind.KEY_WORD: "",
    NodeKind.LINK_CONTENT: ">",
    NodeKind.LINK_LABEL: "",
    NodeKind.LINK_TARGET: "",
}

# Leaf kinds without an entry emit their text verbatim.
CONTENT_HANDLER_FOR: Mapping[NodeKind, _Handler] = {
    NodeKind.REGULAR_TEXT: _escape_regular_text,
    NodeKind.EMPTY_LINE: _suppress_content,
    NodeKind.KEY_WORD: _expand_keyword,
}


def check_dispatch_tables() -> None:
    """Raise DispatchTableError unless the tables cover exactly NodeKind."""
    kinds = set(NodeKind)
    for name, table in (("opening", OPENING_OF), ("closing", CLOSING_OF)):
        missing = kinds - set(table)
        extra = set(table) - kinds
        if missing or extra:
            raise DispatchTableError(
                f"{name} table mismatch: missing={sorted(k.value for k in missing)} "
                f"unknown={sorted(map(str, extra))}"
            )
    unknown_handlers = set(CONTENT_HANDLER_FOR) - kinds
    if unknown_handlers:
        raise DispatchTableError(f"content handlers for unknown kinds: {sorted(map(str, unknown_handlers))}")


check_dispatch_tables()


class PodRenderer:
    """Render parse trees to Pod text.

    Args:
        keywords: Values substituted for ``%%NAME%%`` keyword spans. Unknown
            keywords are emitted unchanged.
    """

    def __init__(self, keywords: Mapping[str, str] | None = None) -> None:
        self.keywords: dict[str, str] = dict(keywords or {})

    def render(self, nodes: Iterable[Node]) -> str:
        """Render a sequence of top-level nodes. Each call has its own state.

        The tree is walked with an explicit stack, so its depth is not
        limited by the interpreter's recursion limit.
        """
        ctx = _RenderContext(keywords=self.keywords)
        parts: list[str] = []
        # Entries are (node, closing); a node's closing entry sits below its children.
        pending: list[tuple[Node, bool]] = [(node, False) for node in reversed(list(nodes))]
        while pending:
            node, closing = pending.pop()
            if closing:
                parts.append(_fragment(CLOSING_OF[node.kind], node, ctx))
                continue
            parts.append(_fragment(OPENING_OF[node.kind], node, ctx))
            pending.append((node, True))
            if isinstance(node.content, list):
                pending.extend((child, False) for child in reversed(node.content))
            else:
                handler = CONTENT_HANDLER_FOR.get(node.kind)
                parts.append(handler(node, ctx) if handler else node.content)
        return "".join(parts)


def _fragment(entry: _Fragment, node: Node, ctx: _RenderContext) -> str:
    return entry if isinstance(entry, str) else entry(node, ctx)


def render(nodes: Iterable[Node], *, keywords: Mapping[str, str] | None = None) -> str:
    """Render *nodes* to Pod with a fresh :class:`PodRenderer`."""
    return PodRenderer(keywords=keywords).render(nodes)
