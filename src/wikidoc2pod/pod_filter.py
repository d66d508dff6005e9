"""Extract Pod and wikidoc from source files and emit combined Pod.

Wikidoc may appear in a source file in three places:

* ``=begin wikidoc`` ... ``=end wikidoc`` blocks inside Pod
* ``=for wikidoc`` paragraphs inside Pod, ending at the next blank line
* comment blocks whose lines start with a run of ``#`` characters of a
  fixed length followed by whitespace (only when enabled)

Existing Pod passes through unchanged, each wikidoc region is replaced by
its translation, and everything else (code, ordinary comments) is dropped.
"""

from __future__ import annotations

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Union

from wikidoc2pod.config import (
    WIKIDOC2POD_COMMENT_BLOCKS,
    WIKIDOC2POD_COMMENT_PREFIX_LENGTH,
    WIKIDOC2POD_VERSION,
)
from wikidoc2pod.exceptions import FilterError
from wikidoc2pod.file_utils import read_source_async, write_pod_async
from wikidoc2pod.translator import translate
from wikidoc2pod.utils.logging_config import get_logger

logger = get_logger(__name__)

_POD_COMMAND_RE = re.compile(r"=([a-zA-Z]\S*)")
_CUT_RE = re.compile(r"=cut")
_WIKIDOC_START_RE = re.compile(r"=(begin|for)\s+wikidoc\s*(.*)", re.DOTALL)
_WIKIDOC_END_RE = re.compile(r"=end\s+wikidoc")
_BLANK_RE = re.compile(r"\s*")

Source = Union[str, Path, IO[str], None]


@dataclass
class FilterOptions:
    """Options for wikidoc extraction.

    Attributes:
        comment_blocks: If True, also extract wikidoc from comment blocks.
        comment_prefix_length: Number of leading ``#`` characters that mark
            a wikidoc comment line.
        keywords: Values substituted for ``%%NAME%%`` keyword spans.
    """

    comment_blocks: bool = WIKIDOC2POD_COMMENT_BLOCKS
    comment_prefix_length: int = WIKIDOC2POD_COMMENT_PREFIX_LENGTH
    keywords: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.comment_prefix_length < 1:
            raise ValueError(
                f"comment_prefix_length must be at least 1, got {self.comment_prefix_length}"
            )

    def comment_block_regex(self) -> re.Pattern[str]:
        """Pattern matching one wikidoc comment line; group 1 is its text."""
        return re.compile(rf"#{{{self.comment_prefix_length}}}(?:[ \t](.*))?\n?", re.DOTALL)


def generated_header() -> str:
    """Header placed at the top of every converted document."""
    return f"# Generated by wikidoc2pod version {WIKIDOC2POD_VERSION}\n\n=pod\n\n"


def filter_pod(text: str, options: FilterOptions | None = None) -> str:
    """Extract Pod and wikidoc from *text*, translating wikidoc to Pod.

    Args:
        text: Source text, e.g. a Perl module or a ``.pod`` file.
        options: Extraction options. Uses defaults if None.

    Returns:
        The extracted Pod, without the generated-by header.
    """
    opts = options or FilterOptions()
    comment_re = opts.comment_block_regex()

    output: list[str] = []
    wikidoc: list[str] = []
    in_pod = in_begin = in_wikidoc = in_comment_block = False

    def flush() -> None:
        logger.debug("Translating wikidoc region of {} lines", len(wikidoc))
        output.append(translate("".join(wikidoc), keywords=opts.keywords))
        wikidoc.clear()

    lines = _split_lines(text)
    index = 0
    # Branches that fall through without advancing reprocess the same line
    # under the new state.
    while index < len(lines):
        line = lines[index]
        if in_pod and not in_wikidoc:
            if _CUT_RE.match(line):
                in_pod = False
            else:
                start = _WIKIDOC_START_RE.match(line)
                if start:
                    command, para = start.groups()
                    in_wikidoc = True
                    in_begin = command == "begin"
                    if not in_begin and para:
                        wikidoc.append(para)
                else:
                    output.append(line)
            index += 1
        elif in_pod and in_wikidoc:
            finished = (in_begin and _WIKIDOC_END_RE.match(line)) or (
                not in_begin and _BLANK_RE.fullmatch(line)
            )
            if finished:
                flush()
                in_wikidoc = in_begin = False
            else:
                wikidoc.append(line)
            index += 1
        elif in_comment_block:
            comment = comment_re.fullmatch(line)
            if comment:
                wikidoc.append(comment.group(1) if comment.group(1) is not None else "\n")
                index += 1
            else:
                flush()
                in_comment_block = False
        else:
            command = _POD_COMMAND_RE.match(line)
            if command:
                name = command.group(1)
                if name == "cut":
                    index += 1
                    continue
                in_pod = True
                if name == "pod":
                    index += 1
            elif opts.comment_blocks and comment_re.fullmatch(line):
                in_comment_block = True
            else:
                index += 1

    if wikidoc:
        flush()
    return "".join(output)


def convert(text: str, options: FilterOptions | None = None) -> str:
    """Like :func:`filter_pod`, with the generated-by header prepended."""
    return generated_header() + filter_pod(text, options)


def filter_file(
    input_file: Source = None,
    output_file: Source = None,
    options: FilterOptions | None = None,
) -> None:
    """Filter a source file or stream to a Pod file or stream.

    Args:
        input_file: Path or readable text stream. Defaults to stdin.
        output_file: Path or writable text stream. Defaults to stdout. An
            existing file is overwritten and missing parent directories are
            created.
        options: Extraction options. Uses defaults if None.

    Raises:
        FilterError: If an input or output path cannot be opened.
    """
    source = _read_input(input_file)
    pod = convert(source, options)
    _write_output(output_file, pod)


async def filter_file_async(
    input_path: Path,
    output_path: Path,
    options: FilterOptions | None = None,
) -> None:
    """Filter *input_path* to *output_path* without blocking the event loop.

    Raises:
        FilterError: If either file cannot be read or written.
    """
    try:
        source = await read_source_async(input_path)
    except OSError as exc:
        raise FilterError(f"Couldn't open input file '{input_path}': {exc}") from exc

    pod = convert(source, options)

    try:
        await write_pod_async(output_path, pod)
    except OSError as exc:
        raise FilterError(f"Couldn't open output file '{output_path}': {exc}") from exc
    logger.debug("Wrote Pod for {} to {}", input_path, output_path)


def _read_input(source: Source) -> str:
    if source is None:
        return sys.stdin.read()
    if isinstance(source, (str, Path)):
        try:
            return Path(source).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise FilterError(f"Couldn't open input file '{source}': {exc}") from exc
    return source.read()


def _write_output(target: Source, pod: str) -> None:
    if target is None:
        sys.stdout.write(pod)
        return
    if isinstance(target, (str, Path)):
        path = Path(target)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(pod, encoding="utf-8")
        except OSError as exc:
            raise FilterError(f"Couldn't open output file '{target}': {exc}") from exc
        return
    target.write(pod)


def _split_lines(text: str) -> list[str]:
    lines = [line + "\n" for line in text.split("\n")]
    lines[-1] = lines[-1][:-1]
    if not lines[-1]:
        lines.pop()
    return lines
