"""Data models for mdtoc."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum, auto


class ParserState(Enum):
    """Scanner states used while walking raw Markdown lines.

    Attributes:
        NORMAL: Default state for regular text.
        IN_FENCED_CODE: Inside a fenced code block.
        IN_INDENTED_CODE: Inside an indented code block.
    """

    NORMAL = auto()
    IN_FENCED_CODE = auto()
    IN_INDENTED_CODE = auto()


@dataclass
class ParserContext:
    """Encapsulate scanner state while walking Markdown text.

    Attributes:
        state: Current scanner state.
        fence_char: Fence character that opened a fenced code block, if any.
        fence_length: Number of fence characters that opened the block.
    """

    state: ParserState = ParserState.NORMAL
    fence_char: str | None = None
    fence_length: int = 0


@dataclass(frozen=True)
class Heading:
    """A heading discovered in a Markdown document.

    Attributes:
        level: Heading level, 1 through 6.
        text: Flattened inline text of the heading.
        anchor: Deduplicated fragment identifier for the heading.
        start_line: One-based line holding the heading.
        end_line: Last line owned by the heading; nested headings are included.
    """

    level: int
    text: str
    anchor: str
    start_line: int
    end_line: int

    @property
    def line_count(self) -> int:
        return self.end_line - self.start_line + 1

    def shifted(self, offset: int, after: int = 0) -> Heading:
        """Return a copy adjusted for `offset` lines inserted right after line `after`.

        The start line moves when it lies below the insertion point. The end
        line also moves when it is the insertion line itself, since the
        heading then owns the inserted lines.

        Examples:
            Heading(2, "Usage", "usage", 10, 14).shifted(8)  # lines 18..22
            Heading(1, "Title", "title", 1, 30).shifted(8, after=2)  # lines 1..38
            Heading(1, "Title", "title", 1, 1).shifted(6, after=1)  # lines 1..7
        """
        start_line = self.start_line + offset if self.start_line > after else self.start_line
        end_line = self.end_line + offset if self.end_line >= after else self.end_line
        if (start_line, end_line) == (self.start_line, self.end_line):
            return self
        return replace(self, start_line=start_line, end_line=end_line)


@dataclass
class Section:
    """A level-1 heading together with the deeper headings it owns."""

    title: Heading
    sub_headings: list[Heading] = field(default_factory=list)


@dataclass(frozen=True)
class SectionToc:
    """Rendered sub-TOC for one section."""

    title: Heading
    toc: str


@dataclass(frozen=True)
class MarkerPositions:
    """Location of the first two TOC markers in a document.

    Attributes:
        start_line: Zero-based line of the first marker, or -1 when absent.
        end_line: Zero-based line of the second marker, or -1 when there is
            only one.
        found: True when at least one marker exists.
    """

    start_line: int = -1
    end_line: int = -1
    found: bool = False

    @property
    def is_open(self) -> bool:
        return self.found and self.end_line == -1

    @property
    def is_closed(self) -> bool:
        return self.found and self.end_line != -1


@dataclass(frozen=True)
class TocBlock:
    """A closed marker pair; both lines are zero-based and inclusive."""

    start_line: int
    end_line: int


class UpdateStatus(Enum):
    """Outcome of rewriting a document's TOC.

    Attributes:
        UPDATED: An existing TOC region was refreshed.
        INSERTED: No marker existed; a new region was inserted.
        UNCHANGED: The document already held the current TOC.
    """

    UPDATED = auto()
    INSERTED = auto()
    UNCHANGED = auto()
