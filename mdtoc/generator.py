"""Table of contents rendering for markdown headings."""

from __future__ import annotations

from collections.abc import Sequence

from .config import TocConfig
from .constants import INDENT_WIDTH
from .models import Heading, Section


def format_line_range(heading: Heading, config: TocConfig) -> str:
    """Render the `` `:start+count` `` annotation for a heading.

    Returns an empty string when line numbers are disabled or unknown. The
    configured file path prefixes the range when `show_path` is set.

    Examples:
        format_line_range(Heading(2, "Usage", "usage", 12, 20), config)  # "`:12+9`"
    """
    if not config.line_numbers or heading.start_line <= 0:
        return ""
    prefix = config.file_path if config.show_path else ""
    return f"`{prefix}:{heading.start_line}+{heading.line_count}`"


def render_toc(
    headings: Sequence[Heading], config: TocConfig | None = None, base_level: int | None = None
) -> str:
    """Render a nested Markdown list from already filtered headings.

    Each entry is indented two spaces per level below `base_level`, which
    defaults to the shallowest level present so the first level is flush left.
    Ordered lists keep one counter per level; emitting a heading increments its
    level's counter and resets every deeper counter.

    Args:
        headings: Headings to render, in document order.
        config: Formatting options. Defaults to a new `TocConfig`.
        base_level: Level rendered without indentation.

    Returns:
        str: TOC lines joined with ``\\n`` and no trailing newline; empty when
            there are no headings.

    Examples:
        render_toc(headings, TocConfig(ordered=True, anchor_links=True))
    """
    if not headings:
        return ""

    config = config or TocConfig()
    if base_level is None:
        base_level = min(heading.level for heading in headings)

    counters = [0] * 7
    lines = []
    for heading in headings:
        indent = " " * (max(heading.level - base_level, 0) * INDENT_WIDTH)

        if config.ordered:
            counters[heading.level] += 1
            for deeper in range(heading.level + 1, len(counters)):
                counters[deeper] = 0
            bullet = f"{counters[heading.level]}."
        else:
            bullet = "-"

        entry = f"[{heading.text}]"
        if config.anchor_links:
            entry += f"(#{heading.anchor})"

        line_range = format_line_range(heading, config)
        if line_range:
            entry += f" {line_range}"

        lines.append(f"{indent}{bullet} {entry}")

    return "\n".join(lines)


def render_section(section: Section | None, config: TocConfig | None = None) -> str:
    """Render the sub-TOC placed under a section's level-1 heading.

    A section qualifies only when it contains at least one level-2 heading;
    otherwise, or when no sub-heading falls inside the configured level range,
    the result is empty.

    Examples:
        render_section(Section(title, [Heading(2, "Usage", "usage", 3, 9)]), config)
    """
    if section is None or not section.sub_headings:
        return ""

    if not any(heading.level == 2 for heading in section.sub_headings):
        return ""

    config = config or TocConfig()
    selected = [
        heading
        for heading in section.sub_headings
        if config.min_level <= heading.level <= config.max_level
    ]
    return render_toc(selected, config)
