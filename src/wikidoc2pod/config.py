"""Local configuration for wikidoc2pod."""

from __future__ import annotations

import os


WIKIDOC2POD_VERSION = "0.1.0"

DEFAULT_COMMENT_BLOCKS = False
DEFAULT_COMMENT_PREFIX_LENGTH = 3

_TRUTHY = frozenset({"1", "true", "yes", "on"})

# Defaults for the extraction pass; FilterOptions and the CLI start from these.
WIKIDOC2POD_COMMENT_BLOCKS = os.getenv("WIKIDOC2POD_COMMENT_BLOCKS", str(DEFAULT_COMMENT_BLOCKS)).strip().lower() in _TRUTHY
WIKIDOC2POD_COMMENT_PREFIX_LENGTH = int(os.getenv("WIKIDOC2POD_COMMENT_PREFIX_LENGTH", str(DEFAULT_COMMENT_PREFIX_LENGTH)))
