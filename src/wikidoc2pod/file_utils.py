"""Async file helpers for the extraction filter."""

from __future__ import annotations

import asyncio
from pathlib import Path


async def read_source_async(path: Path, encoding: str = "utf-8") -> str:
    """Read a source file in a worker thread.

    Undecodable bytes are replaced rather than raising, since source files
    may carry stray non-UTF-8 bytes outside their documentation.
    """
    return await asyncio.to_thread(path.read_text, encoding=encoding, errors="replace")


async def write_pod_async(path: Path, pod: str, encoding: str = "utf-8") -> None:
    """Write generated Pod to *path* in a worker thread.

    Missing parent directories are created first.

    Args:
        path: Destination file; overwritten if it exists.
        pod: Pod text to write.
        encoding: Text encoding to use.
    """
    await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
    await asyncio.to_thread(path.write_text, pod, encoding=encoding)
