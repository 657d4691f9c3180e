"""Locate, insert, and remove marker-delimited TOC regions."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .constants import BLOCK_FRAME_LINES, TOC_MARKER
from .models import MarkerPositions, TocBlock
from .parser import (
    find_atx_headings,
    find_frontmatter_end,
    is_blank,
    iter_body_lines,
    join_lines,
    split_lines,
)

# Insertion key for a block placed at the top of the document body.
_TOP = -1


def _toc_lines(toc: str) -> list[str]:
    return toc.split("\n") if toc else []


class MarkerEngine:
    """Text transforms around a literal TOC marker line.

    A document is in one of three marker states: absent (no marker line),
    open (a single marker), or closed (two markers bounding a region). Marker
    lines are matched by trimmed equality and only outside frontmatter and
    code blocks. Every method takes and returns text; a trailing newline on
    the input is preserved on the output.

    Args:
        marker: Marker literal. Empty or None selects ``<!--TOC-->``.

    Examples:
        engine = MarkerEngine()
        engine.insert_at_marker("# Title\\n<!--TOC-->\\nContent", "- [Title](#title)")
    """

    def __init__(self, marker: str | None = None):
        self.marker = (marker or "").strip() or TOC_MARKER

    # Marker discovery

    def _marker_lines(self, lines: Sequence[str]) -> list[int]:
        return [index for index, line in iter_body_lines(lines) if line.strip() == self.marker]

    def find_markers(self, content: str) -> MarkerPositions:
        """Return the positions of the first two marker lines.

        Examples:
            MarkerEngine().find_markers("# T\\n<!--TOC-->\\nx\\n<!--TOC-->")  # lines 1 and 3
        """
        positions = self._marker_lines(split_lines(content))
        if not positions:
            return MarkerPositions()
        end_line = positions[1] if len(positions) > 1 else -1
        return MarkerPositions(start_line=positions[0], end_line=end_line, found=True)

    def has_marker(self, content: str) -> bool:
        return self.find_markers(content).found

    def find_blocks(self, content: str) -> list[TocBlock]:
        """Pair marker lines in document order; a trailing unpaired marker is ignored."""
        positions = self._marker_lines(split_lines(content))
        return [
            TocBlock(start_line=start, end_line=end)
            for start, end in zip(positions[::2], positions[1::2])
        ]

    # Marker-anchored updates

    def insert_at_marker(self, content: str, toc: str) -> str:
        """Write `toc` into the marker region.

        With no marker the content is returned unchanged. A single marker gets
        the TOC and a closing marker appended after it. A closed region has its
        interior replaced wholesale. Lines outside the region never change.

        Args:
            content: Document text.
            toc: Rendered TOC, without a trailing newline.

        Returns:
            str: Updated document text.
        """
        markers = self.find_markers(content)
        if not markers.found:
            return content

        lines = split_lines(content)
        interior = ["", *_toc_lines(toc), ""] if toc else [""]
        start = markers.start_line

        if markers.is_open:
            updated = [*lines[: start + 1], *interior, self.marker, *lines[start + 1 :]]
        else:
            updated = [*lines[: start + 1], *interior, *lines[markers.end_line :]]

        return join_lines(updated, content.endswith("\n"))

    def extract_interior(self, content: str) -> str:
        """Return the text between a closed marker pair, without surrounding blank lines.

        Examples:
            MarkerEngine().extract_interior("<!--TOC-->\\n\\n- [A](#a)\\n\\n<!--TOC-->")  # "- [A](#a)"
        """
        markers = self.find_markers(content)
        if not markers.is_closed:
            return ""
        interior = split_lines(content)[markers.start_line + 1 : markers.end_line]
        while interior and is_blank(interior[0]):
            interior.pop(0)
        while interior and is_blank(interior[-1]):
            interior.pop()
        return "\n".join(interior)

    # Heading-anchored insertion

    def find_first_heading(self, content: str) -> int:
        """Return the zero-based line of the first ATX heading, or -1."""
        headings = find_atx_headings(content)
        return headings[0][1] if headings else -1

    def find_level1_lines(self, content: str) -> list[int]:
        """Return the zero-based lines of every ATX level-1 heading."""
        return [line for level, line in find_atx_headings(content) if level == 1]

    def _block(self, toc: str, *, leading_blank: bool = True) -> list[str]:
        block = [self.marker, "", *_toc_lines(toc), "", self.marker, ""]
        return ["", *block] if leading_blank else block

    @staticmethod
    def _insert_blocks(lines: Sequence[str], blocks: Mapping[int, list[str]]) -> list[str]:
        """Insert each block after its line, absorbing the blank lines that followed it.

        A block that ends the document drops its closing blank line.
        """
        last_content = max((index for index, line in enumerate(lines) if not is_blank(line)), default=-1)

        def emit(result: list[str], index: int) -> None:
            block = blocks[index]
            if index >= last_content:
                block = block[:-1]
            result.extend(block)

        result: list[str] = []
        absorbing = False
        if _TOP in blocks:
            emit(result, _TOP)
            absorbing = True

        for index, line in enumerate(lines):
            if absorbing and is_blank(line):
                continue
            absorbing = False
            result.append(line)
            if index in blocks:
                emit(result, index)
                absorbing = True

        return result

    def _insert_after(self, content: str, line: int, toc: str) -> str:
        lines = split_lines(content)
        if line == _TOP:
            line = find_frontmatter_end(lines)
            block = self._block(toc, leading_blank=False)
        else:
            block = self._block(toc)
        return join_lines(self._insert_blocks(lines, {line: block}), content.endswith("\n"))

    def insert_after_first_heading(self, content: str, toc: str) -> str:
        """Insert a complete marker block after the first ATX heading.

        The block is blank, marker, blank, TOC, blank, marker, blank. Without
        any heading the block starts at the top of the document body, after
        frontmatter when present. An empty TOC leaves the content unchanged.

        Examples:
            MarkerEngine().insert_after_first_heading("# Title\\n\\nText", "- [A](#a)")
        """
        if not toc:
            return content
        return self._insert_after(content, self.find_first_heading(content), toc)

    def insert_per_section(self, content: str, section_tocs: Mapping[int, str]) -> str:
        """Insert one marker block after each level-1 heading.

        Args:
            content: Document text.
            section_tocs: Zero-based level-1 heading line mapped to its TOC.
                Empty TOCs and lines that are not level-1 headings are skipped.

        Returns:
            str: Document text with the blocks inserted.
        """
        level1 = set(self.find_level1_lines(content))
        blocks = {
            line: self._block(toc)
            for line, toc in section_tocs.items()
            if toc and line in level1
        }
        if not blocks:
            return content
        lines = split_lines(content)
        return join_lines(self._insert_blocks(lines, blocks), content.endswith("\n"))

    # Removal

    def delete_all_blocks(self, content: str) -> tuple[str, list[TocBlock]]:
        """Remove every closed marker block together with its framing blank lines.

        One blank line directly before a block is removed. After a block, a
        single blank line is removed, and a longer run of blanks is collapsed
        to one.

        Returns:
            tuple[str, list[TocBlock]]: Cleaned text and the removed blocks, in
                the line numbering of the input.
        """
        blocks = self.find_blocks(content)
        if not blocks:
            return content, []

        lines = split_lines(content)
        removed: set[int] = set()
        for block in blocks:
            removed.update(range(block.start_line, block.end_line + 1))
            if block.start_line > 0 and is_blank(lines[block.start_line - 1]):
                removed.add(block.start_line - 1)

            after = block.end_line + 1
            run_end = after
            while run_end < len(lines) and is_blank(lines[run_end]):
                run_end += 1
            if run_end - after == 1:
                removed.add(after)
            else:
                removed.update(range(after + 1, run_end))

        kept = [line for index, line in enumerate(lines) if index not in removed]
        return join_lines(kept, content.endswith("\n")), blocks

    def replace_all_sections(self, content: str, section_tocs: Mapping[int, str]) -> str:
        """Delete every block, then insert per section.

        Keys of `section_tocs` refer to lines of the cleaned document.
        """
        cleaned, _ = self.delete_all_blocks(content)
        return self.insert_per_section(cleaned, section_tocs)

    # Line accounting

    @staticmethod
    def block_line_count(toc: str) -> int:
        """Number of lines a marker block for `toc` occupies, framing blanks included."""
        if not toc:
            return 0
        return BLOCK_FRAME_LINES + toc.count("\n") + 1

    def section_growth(self, content: str, line: int, toc: str) -> int:
        """Net number of lines added by inserting a block for `toc` after `line`.

        Equals `block_line_count` minus the blank lines the block absorbs.
        """
        if not toc:
            return 0
        before = len(split_lines(content))
        return len(split_lines(self._insert_after(content, line, toc))) - before
