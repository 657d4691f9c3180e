"""High-level API tying extraction, rendering, and marker handling together."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

from .config import TocConfig, normalize_config, validate_config
from .exceptions import MarkerNotFoundError
from .filesystem import read_document, write_document
from .generator import render_section, render_toc
from .logging import get_logger
from .markers import MarkerEngine
from .models import Heading, Section, SectionToc, UpdateStatus
from .parser import extract_all_headings, extract_headings, split_lines
from .sections import split_sections

logger = get_logger("toc")


class TableOfContents:
    """Generate, preview, update, and delete tables of contents.

    Content-level methods are pure functions of the document text. File-level
    methods wrap them with UTF-8 reads and atomic writes. Written TOCs always
    carry anchor links, whatever `anchor_links` says; the flag only affects
    `generate` and `preview`.

    Args:
        config: Settings to use. Defaults to `TocConfig()`.

    Raises:
        ConfigError: If `config` is invalid.

    Examples:
        toc = TableOfContents(TocConfig(section_mode=False, ordered=True))
        updated = toc.update(Path("README.md").read_text(encoding="UTF-8"))
    """

    def __init__(self, config: TocConfig | None = None):
        config = normalize_config(config or TocConfig())
        validate_config(config)
        self.config = config
        self.engine = MarkerEngine(config.marker)
        self._write_config = replace(config, anchor_links=True)

    # Rendering

    def generate(self, content: str) -> str:
        """Render the flat TOC of `content`, with line numbers as they are now."""
        return render_toc(extract_headings(content, self.config), self.config)

    def _sections(self, content: str) -> list[Section]:
        level1 = set(self.engine.find_level1_lines(content))
        return [
            section
            for section in split_sections(extract_all_headings(content))
            if section.title.start_line - 1 in level1
        ]

    def generate_sections(self, content: str) -> list[SectionToc]:
        """Render the sub-TOC of every level-1 section that has one.

        Sections without a level-2 heading are omitted.
        """
        rendered = (
            SectionToc(title=section.title, toc=render_section(section, self.config))
            for section in self._sections(content)
        )
        return [section_toc for section_toc in rendered if section_toc.toc]

    def preview(self, content: str) -> str:
        """Render what would be shown to a user: the flat TOC, or one block per section."""
        if not self.config.section_mode:
            return self.generate(content)
        return "\n\n".join(
            f"### {section_toc.title.text}\n\n{section_toc.toc}"
            for section_toc in self.generate_sections(content)
        )

    # Flat mode

    def _place(self, content: str, toc: str) -> str:
        if self.engine.has_marker(content):
            return self.engine.insert_at_marker(content, toc)
        if not toc:
            return content
        return self.engine.insert_after_first_heading(content, toc)

    def _anchor_line(self, content: str) -> int:
        """One-based line after which a flat TOC is written; 0 for the top of the body."""
        markers = self.engine.find_markers(content)
        if markers.found:
            return markers.start_line + 1
        return self.engine.find_first_heading(content) + 1

    def _flat_toc(self, content: str) -> str:
        """Render the flat TOC exactly as `update` would write it.

        Line ranges refer to the document after the write: a trial edit with
        an unnumbered TOC of the same height measures how far the headings
        below the insertion point move.
        """
        config = self._write_config
        headings = extract_headings(content, config)
        if not config.line_numbers:
            return render_toc(headings, config)

        trial = self._place(content, render_toc(headings, replace(config, line_numbers=False)))
        delta = len(split_lines(trial)) - len(split_lines(content))
        anchor = self._anchor_line(content)
        return render_toc([heading.shifted(delta, after=anchor) for heading in headings], config)

    # Section mode

    def _fold_section(
        self, cleaned: str, offset: int, section: Section
    ) -> tuple[int, str]:
        """Render one section's sub-TOC with final line numbers.

        Args:
            cleaned: Document text without any TOC block.
            offset: Lines added by the blocks of earlier sections.
            section: Section whose sub-TOC is rendered.

        Returns:
            tuple[int, str]: Offset including this section's block, and the TOC.
        """
        config = self._write_config
        if not config.line_numbers:
            return offset, render_section(section, config)

        line = section.title.start_line - 1
        unnumbered = render_section(section, replace(config, line_numbers=False))
        growth = self.engine.section_growth(cleaned, line, unnumbered)

        title: Heading = replace(
            section.title,
            start_line=section.title.start_line + offset,
            end_line=section.title.end_line + offset + growth,
        )
        moved = Section(
            title=title,
            sub_headings=[heading.shifted(offset + growth) for heading in section.sub_headings],
        )
        return offset + growth, render_section(moved, config)

    def _update_sections(self, content: str) -> str:
        cleaned, _ = self.engine.delete_all_blocks(content)

        section_tocs: dict[int, str] = {}
        offset = 0
        for section in self._sections(cleaned):
            offset, section_tocs[section.title.start_line - 1] = self._fold_section(
                cleaned, offset, section
            )

        return self.engine.insert_per_section(cleaned, section_tocs)

    # Updates

    def update(self, content: str, require_marker: bool = False) -> str:
        """Return `content` with its TOC (or per-section TOCs) brought up to date.

        In flat mode the TOC replaces the marker region, or is inserted after
        the first heading when the document has no marker. In section mode
        every existing block is removed and one block is inserted after each
        level-1 heading that has level-2 sub-headings.

        Args:
            content: Document text.
            require_marker: Refuse documents that contain no marker line.

        Returns:
            str: Updated text; equal to `content` when nothing changes.

        Raises:
            MarkerNotFoundError: If `require_marker` is set and no marker exists.

        Examples:
            TableOfContents(TocConfig(section_mode=False)).update("# Title\\n<!--TOC-->\\nContent")
        """
        if require_marker and not self.engine.has_marker(content):
            raise MarkerNotFoundError(self.engine.marker)

        if self.config.section_mode:
            return self._update_sections(content)
        return self._place(content, self._flat_toc(content))

    def needs_update(self, content: str) -> bool:
        """Report whether `update` would change the document's TOC."""
        if self.config.section_mode:
            return self.update(content) != content
        return self.engine.extract_interior(content) != self._flat_toc(content)

    def delete(self, content: str) -> tuple[str, bool]:
        """Remove every TOC block; the flag tells whether anything was removed."""
        cleaned, blocks = self.engine.delete_all_blocks(content)
        return cleaned, bool(blocks)

    # File operations

    def generate_file(self, filepath: Path) -> str:
        content, _ = read_document(filepath)
        return self.generate(content)

    def preview_file(self, filepath: Path) -> str:
        content, _ = read_document(filepath)
        return self.preview(content)

    def has_marker_file(self, filepath: Path) -> bool:
        content, _ = read_document(filepath)
        return self.engine.has_marker(content)

    def check_file(self, filepath: Path) -> bool:
        content, _ = read_document(filepath)
        return self.needs_update(content)

    def update_file(self, filepath: Path, require_marker: bool = False) -> UpdateStatus:
        """Update a document on disk.

        Args:
            filepath: Markdown document to rewrite.
            require_marker: Refuse documents that contain no marker line.

        Returns:
            UpdateStatus: `UNCHANGED` when no write was needed, `INSERTED` when
                the document had no marker, `UPDATED` otherwise.

        Raises:
            TocFileError: If the document cannot be read or written.
            MarkerNotFoundError: If `require_marker` is set and no marker exists.
        """
        content, snapshot = read_document(filepath)
        had_marker = self.engine.has_marker(content)
        updated = self.update(content, require_marker=require_marker)

        if updated == content:
            logger.debug("TOC already up to date: %s", filepath)
            return UpdateStatus.UNCHANGED

        write_document(filepath, updated, snapshot)
        if had_marker:
            logger.debug("Updated TOC: %s", filepath)
            return UpdateStatus.UPDATED
        logger.debug("Inserted TOC: %s", filepath)
        return UpdateStatus.INSERTED

    def delete_file(self, filepath: Path) -> bool:
        """Remove every TOC block from a document on disk; True when something was removed."""
        content, snapshot = read_document(filepath)
        cleaned, deleted = self.delete(content)
        if not deleted:
            logger.debug("No TOC block found: %s", filepath)
            return False

        write_document(filepath, cleaned, snapshot)
        logger.debug("Deleted TOC: %s", filepath)
        return True
