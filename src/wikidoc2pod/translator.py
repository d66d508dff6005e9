"""Translate wikidoc text to Pod."""

from __future__ import annotations

from typing import Mapping

from wikidoc2pod.parser import parse
from wikidoc2pod.renderer import PodRenderer
from wikidoc2pod.utils.logging_config import get_logger

logger = get_logger(__name__)


def translate(text: str, *, keywords: Mapping[str, str] | None = None) -> str:
    """Parse wikidoc *text* and render it as Pod.

    Args:
        text: Raw wikidoc markup.
        keywords: Optional values for ``%%NAME%%`` keyword spans.

    Returns:
        The Pod text. Never raises for string input.
    """
    tree = parse(text)
    logger.debug("Parsed {} wikidoc blocks from {} characters", len(tree), len(text))
    return PodRenderer(keywords=keywords).render(tree)
