"""Partition headings into level-1 sections."""

from __future__ import annotations

from collections.abc import Iterable

from .models import Heading, Section


def split_sections(headings: Iterable[Heading]) -> list[Section]:
    """Group headings under the level-1 heading that precedes them.

    Headings that appear before the first level-1 heading belong to no
    section and are dropped.

    Examples:
        split_sections(extract_all_headings("# A\\n## a\\n# B\\n## b"))  # two sections
    """
    sections: list[Section] = []
    for heading in headings:
        if heading.level == 1:
            sections.append(Section(title=heading))
        elif sections:
            sections[-1].sub_headings.append(heading)
    return sections
