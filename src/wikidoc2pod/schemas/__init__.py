"""Shared schemas for wikidoc2pod."""

from wikidoc2pod.schemas.nodes import CONTAINER_KINDS, LEAF_KINDS, Node, NodeKind

__all__ = ["CONTAINER_KINDS", "LEAF_KINDS", "Node", "NodeKind"]
