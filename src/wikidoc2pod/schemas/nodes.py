"""Parse tree models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NodeKind(str, Enum):
    """Closed set of wikidoc parse tree node kinds."""

    HEADER = "Header"
    UNORDERED_LIST = "UnorderedList"
    BULLET_ITEM = "BulletItem"
    ORDERED_LIST = "OrderedList"
    NUMBERED_ITEM = "NumberedItem"
    PREFORMAT = "Preformat"
    INDENTED_LINE = "IndentedLine"
    PARAGRAPH = "Paragraph"
    PLAIN_LINE = "PlainLine"
    EMPTY_LINE = "EmptyLine"
    REGULAR_TEXT = "RegularText"
    WHITE_SPACE = "WhiteSpace"
    ESCAPED_CHAR = "EscapedChar"
    INLINE_CODE = "InlineCode"
    BOLD_TEXT = "BoldText"
    ITALIC_TEXT = "ItalicText"
    PARENS = "Parens"
    KEY_WORD = "KeyWord"
    LINK_CONTENT = "LinkContent"
    LINK_LABEL = "LinkLabel"
    LINK_TARGET = "LinkTarget"


CONTAINER_KINDS: frozenset[NodeKind] = frozenset(
    {
        NodeKind.HEADER,
        NodeKind.UNORDERED_LIST,
        NodeKind.BULLET_ITEM,
        NodeKind.ORDERED_LIST,
        NodeKind.NUMBERED_ITEM,
        NodeKind.PREFORMAT,
        NodeKind.PARAGRAPH,
        NodeKind.BOLD_TEXT,
        NodeKind.ITALIC_TEXT,
        NodeKind.PARENS,
        NodeKind.LINK_CONTENT,
        NodeKind.LINK_LABEL,
    }
)

LEAF_KINDS: frozenset[NodeKind] = frozenset(NodeKind) - CONTAINER_KINDS


class Node(BaseModel):
    """A wikidoc parse tree node.

    Attributes:
        kind: The node variant.
        content: Literal text for leaf kinds, child nodes for container kinds.
        level: Raw count of ``=`` markers; only set on Header nodes.
    """

    model_config = ConfigDict(frozen=True)

    kind: NodeKind
    content: str | list["Node"]
    level: int | None = Field(default=None, ge=1)

    @model_validator(mode="after")
    def _check_shape(self) -> "Node":
        if self.kind in CONTAINER_KINDS:
            if not isinstance(self.content, list):
                raise ValueError(f"{self.kind.value} nodes hold child nodes, not text")
        elif not isinstance(self.content, str):
            raise ValueError(f"{self.kind.value} nodes hold text, not child nodes")

        if self.kind is NodeKind.HEADER:
            if self.level is None:
                raise ValueError("Header nodes require a level")
        elif self.level is not None:
            raise ValueError("Only Header nodes carry a level")

        if self.kind is NodeKind.LINK_CONTENT:
            _check_link_children(self.children)
        return self

    @property
    def is_leaf(self) -> bool:
        return self.kind in LEAF_KINDS

    @property
    def children(self) -> list["Node"]:
        """Child nodes of a container; empty for leaves."""
        return self.content if isinstance(self.content, list) else []

    @property
    def text(self) -> str:
        """Literal payload of a leaf; empty for containers."""
        return self.content if isinstance(self.content, str) else ""


def _check_link_children(children: list[Node]) -> None:
    kinds = [child.kind for child in children]
    if kinds == [NodeKind.LINK_TARGET]:
        return
    if (
        len(kinds) == 3
        and kinds[0] is NodeKind.LINK_LABEL
        and kinds[1] in LEAF_KINDS
        and kinds[2] is NodeKind.LINK_TARGET
    ):
        return
    raise ValueError(
        "LinkContent holds either [LinkTarget] or [LinkLabel, separator, LinkTarget]"
    )
