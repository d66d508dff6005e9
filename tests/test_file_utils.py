"""Tests for async file helpers."""

from __future__ import annotations

from pathlib import Path

import pytest

from wikidoc2pod.file_utils import read_source_async, write_pod_async


class TestReadSourceAsync:
    """Tests for read_source_async function."""

    @pytest.mark.asyncio
    async def test_reads_text(self, tmp_path: Path) -> None:
        path = tmp_path / "Foo.pm"
        path.write_text("=head1 NAME\n", encoding="utf-8")

        assert await read_source_async(path) == "=head1 NAME\n"

    @pytest.mark.asyncio
    async def test_replaces_undecodable_bytes(self, tmp_path: Path) -> None:
        """Invalid UTF-8 is replaced instead of raising."""
        path = tmp_path / "Foo.pm"
        path.write_bytes(b"\xff\xfe=pod\n")

        result = await read_source_async(path)

        assert result.endswith("=pod\n")
        assert "�" in result

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            await read_source_async(tmp_path / "missing.pm")


class TestWritePodAsync:
    """Tests for write_pod_async function."""

    @pytest.mark.asyncio
    async def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "Foo.pod"

        await write_pod_async(path, "=pod\n")

        assert path.read_text(encoding="utf-8") == "=pod\n"

    @pytest.mark.asyncio
    async def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        path = tmp_path / "Foo.pod"
        path.write_text("old", encoding="utf-8")

        await write_pod_async(path, "new")

        assert path.read_text(encoding="utf-8") == "new"

    @pytest.mark.asyncio
    async def test_respects_encoding(self, tmp_path: Path) -> None:
        path = tmp_path / "Foo.pod"

        await write_pod_async(path, "Cafe", encoding="latin-1")

        assert path.read_text(encoding="latin-1") == "Cafe"
