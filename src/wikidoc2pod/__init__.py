"""wikidoc2pod: translate wikidoc markup into Pod."""

from loguru import logger

from wikidoc2pod.exceptions import DispatchTableError, FilterError, Wikidoc2podError
from wikidoc2pod.parser import WikidocParser, parse
from wikidoc2pod.pod_filter import FilterOptions, convert, filter_file, filter_file_async, filter_pod
from wikidoc2pod.renderer import PodRenderer, escape_pod, render
from wikidoc2pod.schemas import Node, NodeKind
from wikidoc2pod.translator import translate

# Library logging stays silent until an application calls configure_logging().
logger.disable("wikidoc2pod")

__all__ = [
    "DispatchTableError",
    "FilterError",
    "FilterOptions",
    "Node",
    "NodeKind",
    "PodRenderer",
    "WikidocParser",
    "Wikidoc2podError",
    "convert",
    "escape_pod",
    "filter_file",
    "filter_file_async",
    "filter_pod",
    "parse",
    "render",
    "translate",
]
