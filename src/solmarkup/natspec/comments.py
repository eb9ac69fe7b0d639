"""Doc-comment text handling: decoration stripping and tag segmentation."""

from __future__ import annotations

import re
from dataclasses import dataclass

TAG_PATTERN = r"(?:\w+|custom:[a-z][a-z-]*)"

_BLOCK_COMMENT = re.compile(r"^/\*\*([\s\S]*?)\*/$", re.MULTILINE)
_DECORATED_LINE = re.compile(r"^[ \t]*((\*{1,2}|/{2,3}))+([ \t]*)(.*\n?)", re.MULTILINE)
_SEGMENT = re.compile(
    rf"^(?:@({TAG_PATTERN}) )?((?:(?!^@{TAG_PATTERN} )[\s\S])*)", re.MULTILINE
)
_BLANK_LINES = re.compile(r"\n{3,}")
_LINE_INDENT = re.compile(r"^ ", re.MULTILINE)
_NAME_AND_DESCRIPTION = re.compile(r"^(\w+).? ([\s\S]*)?", re.MULTILINE)

CODE_FENCE = "```"


@dataclass(frozen=True)
class Segment:
    """One tagged piece of a doc comment."""

    tag: str
    text: str


def strip_comment_decoration(text: str) -> str:
    """Remove ``/** */``, leading ``*`` and ``//``/``///`` markers.

    Lines inside fenced code blocks keep their indentation relative to the
    first line of the block, so embedded code samples survive.
    """
    text = _BLOCK_COMMENT.sub(r"\1", text, count=1).strip()

    in_code_block = False
    block_start = False
    indent = 0

    def _strip(match: re.Match[str]) -> str:
        nonlocal in_code_block, block_start, indent
        spaces, line = match.group(3), match.group(4)

        if CODE_FENCE in line:
            in_code_block = not in_code_block
            block_start = True
            return line

        if in_code_block:
            if block_start:
                indent = len(spaces)
                block_start = False
            return spaces[indent:] + line

        return line

    return _DECORATED_LINE.sub(_strip, text).strip()


def strip_line_indent(text: str) -> str:
    """Drop the single space solc leaves after the comment marker on each line.

    Deeper indentation is kept so fenced code samples survive.
    """
    return _LINE_INDENT.sub("", text)


def collapse_blank_lines(text: str) -> str:
    return _BLANK_LINES.sub("\n", text)


def join_lines(text: str) -> str:
    """Fold a multi-line description into one line."""
    return text.replace("\n", " ")


def split_segments(text: str) -> list[Segment]:
    """Split stripped doc text into tag segments.

    A line starting with ``@tag `` opens a segment that runs until the next
    tag line. Text before the first tag is an implicit ``notice``.

    Example:
        >>> split_segments("Does a thing\\n@param x The x")
        [Segment(tag='notice', text='Does a thing'), Segment(tag='param', text='x The x')]
    """
    segments = []
    for match in _SEGMENT.finditer(text):
        if not match.group(0):
            continue
        tag = match.group(1) or "notice"
        segments.append(Segment(tag, collapse_blank_lines(match.group(2)).strip()))
    return segments


def split_name_description(text: str) -> tuple[str, str] | None:
    """Split ``"<name> <description>"``; None when no name can be found."""
    match = _NAME_AND_DESCRIPTION.search(text)
    if not match:
        return None
    name, description = match.group(1), match.group(2) or ""
    return name, join_lines(description).strip()
