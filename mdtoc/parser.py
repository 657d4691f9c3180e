"""Markdown parsing utilities."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import replace

from markdown_it import MarkdownIt
from markdown_it.token import Token

from .config import TocConfig
from .constants import (
    CODE_FENCE_PATTERN,
    FENCE_MAX_INDENT,
    FRONTMATTER_CLOSE,
    FRONTMATTER_OPEN,
)
from .logging import get_logger
from .models import Heading, ParserContext, ParserState
from .slugify import AnchorGenerator

logger = get_logger("parser")

_MARKDOWN = MarkdownIt("commonmark")


def split_lines(content: str) -> list[str]:
    """Split text into lines; a trailing newline terminates the last line.

    Examples:
        split_lines("# Title\\nBody\\n")  # ["# Title", "Body"]
        split_lines("# Title\\n\\n")  # ["# Title", ""]
    """
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return lines


def join_lines(lines: Sequence[str], trailing_newline: bool) -> str:
    """Inverse of `split_lines`."""
    text = "\n".join(lines)
    if trailing_newline and lines:
        text += "\n"
    return text


def is_blank(line: str) -> bool:
    return not line.strip()


def find_frontmatter_end(lines: Sequence[str]) -> int:
    """Locate the closing line of a leading frontmatter block.

    The block must open on the very first line with ``---`` and closes on the
    first later line equal to ``---`` or ``...``. An unterminated block is
    treated as regular content.

    Args:
        lines: Document lines without line terminators.

    Returns:
        int: Zero-based index of the closing delimiter, or -1 when the document
            has no frontmatter.

    Examples:
        find_frontmatter_end(["---", "title: Doc", "---", "# Title"])  # 2
        find_frontmatter_end(["---", "title: Doc"])  # -1
    """
    if not lines or lines[0].strip() != FRONTMATTER_OPEN:
        return -1

    for index in range(1, len(lines)):
        if lines[index].strip() in FRONTMATTER_CLOSE:
            return index

    return -1


def indent_width(line: str) -> int:
    """Return the column width of a line's leading whitespace, tabs stopping every four columns.

    Examples:
        indent_width("  \\tcode")  # 4
    """
    prefix = line[: len(line) - len(line.lstrip(" \t"))]
    return len(prefix.expandtabs(4))


def _closes_fence(ctx: ParserContext, line: str) -> bool:
    stripped = line.lstrip(" \t")
    run = len(stripped) - len(stripped.lstrip(ctx.fence_char or " "))
    return (
        run > 0
        and run >= ctx.fence_length
        and not stripped[run:].strip()
        and indent_width(line) <= FENCE_MAX_INDENT
    )


def scan_line(ctx: ParserContext, line: str) -> bool:
    """Advance `ctx` past `line` and report whether the line is code.

    Fence delimiters count as code. A closing fence repeats the opening
    character at least as many times, carries no info string, and is indented
    at most three columns. Indented code lasts until the first non-blank line
    indented less than four columns.

    Examples:
        ctx = ParserContext()
        [scan_line(ctx, line) for line in ["~~~", "# x", "~~~", "# y"]]  # [True, True, True, False]
    """
    if ctx.state is ParserState.IN_FENCED_CODE:
        if _closes_fence(ctx, line):
            ctx.state = ParserState.NORMAL
            ctx.fence_char = None
            ctx.fence_length = 0
        return True

    if ctx.state is ParserState.IN_INDENTED_CODE:
        if not line.strip() or indent_width(line) >= 4:
            return True
        ctx.state = ParserState.NORMAL

    fence = CODE_FENCE_PATTERN.match(line)
    if fence and indent_width(fence.group("indent")) <= FENCE_MAX_INDENT:
        ctx.state = ParserState.IN_FENCED_CODE
        ctx.fence_char = fence.group("fence")[0]
        ctx.fence_length = len(fence.group("fence"))
        return True

    if indent_width(line) >= 4:
        ctx.state = ParserState.IN_INDENTED_CODE
        return True

    return False


def iter_body_lines(lines: Sequence[str]) -> Iterator[tuple[int, str]]:
    """Yield the lines that may hold headings or TOC markers.

    Skips the frontmatter block, fence delimiters, and the contents of fenced
    and indented code blocks.

    Args:
        lines: Document lines without line terminators.

    Yields:
        tuple[int, str]: Zero-based line index and the line itself.

    Examples:
        list(iter_body_lines(["# A", "```", "# B", "```", "# C"]))  # [(0, "# A"), (4, "# C")]
    """
    ctx = ParserContext()
    for index in range(find_frontmatter_end(lines) + 1, len(lines)):
        if not scan_line(ctx, lines[index]):
            yield index, lines[index]


def _inline_text(tokens: Sequence[Token] | None) -> str:
    """Flatten inline tokens to plain text, dropping all markup."""
    parts = []
    for token in tokens or ():
        if token.type in ("text", "code_inline"):
            parts.append(token.content)
        elif token.type in ("softbreak", "hardbreak"):
            parts.append(" ")
        elif token.children:
            # Images keep their alt text as children.
            parts.append(_inline_text(token.children))
    return "".join(parts)


def _parse_heading_tokens(body: str) -> list[tuple[int, int, str, bool]]:
    """Return ``(level, zero-based line, text, is_atx)`` for each heading in `body`."""
    tokens = _MARKDOWN.parse(body)
    found = []
    for index, token in enumerate(tokens):
        if token.type != "heading_open" or token.map is None:
            continue
        inline = tokens[index + 1] if index + 1 < len(tokens) else None
        text = _inline_text(inline.children) if inline is not None else ""
        found.append((int(token.tag[1]), token.map[0], text.strip(), token.markup.startswith("#")))
    return found


def _parse_document(lines: Sequence[str]) -> list[tuple[int, int, str, bool]]:
    """Parse everything after the frontmatter; lines are zero-based document lines."""
    body_offset = find_frontmatter_end(lines) + 1
    try:
        parsed = _parse_heading_tokens("\n".join(lines[body_offset:]))
    except Exception as error:
        logger.warning("Could not parse Markdown, no headings extracted: %s", error)
        return []
    return [(level, line + body_offset, text, atx) for level, line, text, atx in parsed]


def _assign_end_lines(headings: list[Heading], total_lines: int) -> list[Heading]:
    """Compute the last line owned by each heading.

    A heading extends to the line before the next heading of the same or a
    shallower level, or to the end of the document.
    """
    result = []
    for index, heading in enumerate(headings):
        end_line = total_lines
        for following in headings[index + 1 :]:
            if following.level <= heading.level:
                end_line = following.start_line - 1
                break
        result.append(replace(heading, end_line=max(end_line, heading.start_line)))
    return result


def extract_all_headings(content: str) -> list[Heading]:
    """Extract every heading of a Markdown document, regardless of level.

    Frontmatter is excluded before parsing and its line count is added back to
    the reported line numbers. Headings inside code blocks are never
    reported. Anchors are generated in document order across all levels.

    Args:
        content: Markdown document text.

    Returns:
        list[Heading]: Headings in document order, with end lines computed
            against the full heading list. Empty when the document cannot be
            parsed.

    Examples:
        extract_all_headings("# Title\\n## Usage\\n")
    """
    lines = split_lines(content)
    anchors = AnchorGenerator()
    headings = [
        Heading(
            level=level,
            text=text,
            anchor=anchors.generate(text),
            start_line=line + 1,
            end_line=line + 1,
        )
        for level, line, text, _ in _parse_document(lines)
    ]
    return _assign_end_lines(headings, len(lines))


def find_atx_headings(content: str) -> list[tuple[int, int]]:
    """Return ``(level, zero-based line)`` for every ATX heading, setext ones excluded.

    Uses the same parse as `extract_all_headings`, so both agree on what is
    code, list content, or frontmatter.

    Examples:
        find_atx_headings("Title\\n=====\\n## Usage\\n")  # [(2, 2)]
    """
    return [
        (level, line)
        for level, line, _, atx in _parse_document(split_lines(content))
        if atx
    ]


def extract_headings(content: str, config: TocConfig | None = None) -> list[Heading]:
    """Extract the headings whose level falls within the configured range.

    End lines and anchors are computed before filtering, so a parent heading
    still owns the lines of nested headings that are filtered out.

    Examples:
        extract_headings("# T\\n## A\\n### B\\n## C", TocConfig(min_level=2, max_level=2))
    """
    config = config or TocConfig()
    return [
        heading
        for heading in extract_all_headings(content)
        if config.min_level <= heading.level <= config.max_level
    ]
