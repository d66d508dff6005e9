"""Test setup for wikidoc2pod."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from loguru import logger

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from wikidoc2pod.parser import WikidocParser  # noqa: E402


@pytest.fixture(autouse=True)
def reset_loguru():
    """Drop sinks added during a test and silence the library again."""
    yield
    logger.remove()
    logger.disable("wikidoc2pod")


@pytest.fixture
def parser() -> WikidocParser:
    """A fresh wikidoc parser."""
    return WikidocParser()


@pytest.fixture
def perl_module() -> str:
    """A small Perl module mixing code, Pod and wikidoc."""
    return (
        "package Foo;\n"
        "use strict;\n"
        "\n"
        "=head1 NAME\n"
        "\n"
        "Foo - does things\n"
        "\n"
        "=begin wikidoc\n"
        "\n"
        "= SYNOPSIS\n"
        "\n"
        "Use *Foo* with {Foo->new}.\n"
        "\n"
        "=end wikidoc\n"
        "\n"
        "=cut\n"
        "\n"
        "sub new { bless {}, shift }\n"
        "1;\n"
    )
