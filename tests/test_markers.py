from __future__ import annotations

import pytest

from mdtoc.markers import MarkerEngine
from mdtoc.models import MarkerPositions, TocBlock

MARKER = "<!--TOC-->"


@pytest.fixture()
def engine() -> MarkerEngine:
    return MarkerEngine()


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("# Title\nSome content", MarkerPositions()),
        ("# Title\n<!--TOC-->\nSome content", MarkerPositions(1, -1, True)),
        ("# Title\n<!--TOC-->\nTOC content\n<!--TOC-->\nRest", MarkerPositions(1, 3, True)),
        ("# Title\n  <!--TOC-->  \nSome content", MarkerPositions(1, -1, True)),
        ("```\n<!--TOC-->\n```\n# Title", MarkerPositions()),
        ("---\nnote: <!--TOC-->\n<!--TOC-->\n---\n# Title", MarkerPositions()),
    ],
)
def test_find_markers(engine, content, expected):
    assert engine.find_markers(content) == expected


def test_marker_defaults_and_custom_literal():
    assert MarkerEngine().marker == MARKER
    assert MarkerEngine("").marker == MARKER
    assert MarkerEngine("  <!-- toc -->  ").marker == "<!-- toc -->"

    custom = MarkerEngine("<!-- toc -->")
    assert custom.has_marker("# T\n<!-- toc -->\n")
    assert not custom.has_marker("# T\n<!--TOC-->\n")


def test_insert_at_marker_without_marker_is_unchanged(engine):
    assert engine.insert_at_marker("# Title\nContent", "- [Title](#title)") == "# Title\nContent"


def test_insert_at_marker_closes_single_marker(engine):
    content = "# Title\n<!--TOC-->\nContent"

    updated = engine.insert_at_marker(content, "- [Title](#title)")

    assert updated == "# Title\n<!--TOC-->\n\n- [Title](#title)\n\n<!--TOC-->\nContent"


def test_insert_at_marker_replaces_closed_region(engine):
    content = "# Title\n<!--TOC-->\nOld TOC\n<!--TOC-->\nContent"

    updated = engine.insert_at_marker(content, "- [Title](#title)")

    assert updated == "# Title\n<!--TOC-->\n\n- [Title](#title)\n\n<!--TOC-->\nContent"


def test_insert_at_marker_keeps_text_outside_region(engine):
    content = "# Title\n\n<!--TOC-->\nold\n<!--TOC-->\n\n\nContent\n"

    updated = engine.insert_at_marker(content, "- [A](#a)\n  - [B](#b)")

    assert updated == "# Title\n\n<!--TOC-->\n\n- [A](#a)\n  - [B](#b)\n\n<!--TOC-->\n\n\nContent\n"


def test_insert_at_marker_is_idempotent(engine):
    once = engine.insert_at_marker("# Title\n<!--TOC-->\nContent\n", "- [Title](#title)")

    assert engine.insert_at_marker(once, "- [Title](#title)") == once


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("# Title\nContent", ""),
        ("# Title\n<!--TOC-->\nContent", ""),
        ("# Title\n<!--TOC-->\n\n- [Section](#section)\n\n<!--TOC-->\nContent", "- [Section](#section)"),
        ("<!--TOC-->\n\n  - [A](#a)\n- [B](#b)\n\n<!--TOC-->", "  - [A](#a)\n- [B](#b)"),
    ],
)
def test_extract_interior(engine, content, expected):
    assert engine.extract_interior(content) == expected


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("Just some text\nNo headers here", -1),
        ("# Title\nContent", 0),
        ("Some text\n## Section\nContent", 1),
        ("```\n# Not heading\n```\n## Real heading", 3),
        ("~~~\n# Not heading\n~~~\n## Real heading", 3),
        ("Some text\n### H3\nContent", 1),
        ("#NoSpace\n#\n", 1),
        ("---\n# in frontmatter\n---\nText\n# Title", 4),
    ],
)
def test_find_first_heading(engine, content, expected):
    assert engine.find_first_heading(content) == expected


@pytest.mark.parametrize(
    ("content", "expected"),
    [
        ("## Section\n### Subsection", []),
        ("# Title\n## Section", [0]),
        ("# Chapter 1\n## Section 1.1\n# Chapter 2\n## Section 2.1\n# Chapter 3", [0, 2, 4]),
        ("# Real H1\n```\n# Not H1\n```\n# Another H1", [0, 4]),
        ("# A\n``` a`b\n# B", [0, 2]),
        ("Title\n=====\n# Second", [2]),
        ("- item\n\n    # Nested", [2]),
    ],
)
def test_find_level1_lines(engine, content, expected):
    assert engine.find_level1_lines(content) == expected


def test_insert_after_first_heading_absorbs_blank_line(engine):
    updated = engine.insert_after_first_heading("# Title\n\nContent here", "- [Section](#section)")

    assert updated == (
        "# Title\n\n<!--TOC-->\n\n- [Section](#section)\n\n<!--TOC-->\n\nContent here"
    )


def test_insert_after_first_heading_absorbs_blank_run(engine):
    updated = engine.insert_after_first_heading("# Title\n\n\n\nText\n", "- [A](#a)")

    assert updated == "# Title\n\n<!--TOC-->\n\n- [A](#a)\n\n<!--TOC-->\n\nText\n"


def test_insert_after_first_heading_without_heading_goes_to_top(engine):
    updated = engine.insert_after_first_heading("Just some text\nNo headers", "- [Item](#item)")

    assert updated == "<!--TOC-->\n\n- [Item](#item)\n\n<!--TOC-->\n\nJust some text\nNo headers"


def test_insert_after_first_heading_without_heading_skips_frontmatter(engine):
    updated = engine.insert_after_first_heading("---\na: 1\n---\nText\n", "- [X](#x)")

    assert updated == "---\na: 1\n---\n<!--TOC-->\n\n- [X](#x)\n\n<!--TOC-->\n\nText\n"


def test_insert_after_first_heading_at_end_of_document(engine):
    assert engine.insert_after_first_heading("# Title", "- [Title](#title)") == (
        "# Title\n\n<!--TOC-->\n\n- [Title](#title)\n\n<!--TOC-->"
    )
    assert engine.insert_after_first_heading("# Title\n", "- [Title](#title)") == (
        "# Title\n\n<!--TOC-->\n\n- [Title](#title)\n\n<!--TOC-->\n"
    )


def test_insert_after_first_heading_with_empty_toc_is_unchanged(engine):
    assert engine.insert_after_first_heading("# Title\n", "") == "# Title\n"


def test_insert_per_section_single(engine):
    content = "# Chapter 1\n\nContent...\n\n## Section 1.1\n\nMore content"

    updated = engine.insert_per_section(content, {0: "- [Section 1.1](#section-11)"})

    assert updated == (
        "# Chapter 1\n"
        "\n"
        "<!--TOC-->\n"
        "\n"
        "- [Section 1.1](#section-11)\n"
        "\n"
        "<!--TOC-->\n"
        "\n"
        "Content...\n"
        "\n"
        "## Section 1.1\n"
        "\n"
        "More content"
    )


def test_insert_per_section_multiple_and_skips_empty(engine):
    content = "# Chapter 1\n\n## Section 1.1\n\n# Chapter 2\n\nNo sub-headers here"

    updated = engine.insert_per_section(content, {0: "- [Section 1.1](#section-11)", 4: ""})

    assert updated == (
        "# Chapter 1\n"
        "\n"
        "<!--TOC-->\n"
        "\n"
        "- [Section 1.1](#section-11)\n"
        "\n"
        "<!--TOC-->\n"
        "\n"
        "## Section 1.1\n"
        "\n"
        "# Chapter 2\n"
        "\n"
        "No sub-headers here"
    )


def test_insert_per_section_ignores_lines_that_are_not_level1(engine):
    content = "# Chapter 1\n\n## Section 1.1\n"

    assert engine.insert_per_section(content, {2: "- [X](#x)", 7: "- [Y](#y)"}) == content
    assert engine.insert_per_section(content, {}) == content


def test_find_blocks_pairs_markers_in_order(engine):
    content = "<!--TOC-->\na\n<!--TOC-->\ntext\n<!--TOC-->\nb\n<!--TOC-->\n<!--TOC-->\n"

    assert engine.find_blocks(content) == [TocBlock(0, 2), TocBlock(4, 6)]


def test_delete_all_blocks_removes_framing_blank_lines(engine):
    content = (
        "# Chapter 1\n\n<!--TOC-->\n\n- [Section 1.1](#section-11)\n\n<!--TOC-->\n\n"
        "Content...\n\n## Section 1.1\n"
    )

    cleaned, blocks = engine.delete_all_blocks(content)

    assert cleaned == "# Chapter 1\nContent...\n\n## Section 1.1\n"
    assert blocks == [TocBlock(2, 6)]


def test_delete_all_blocks_collapses_blank_run_after_block(engine):
    content = "# A\n\n<!--TOC-->\n\n- [x](#x)\n\n<!--TOC-->\n\n\n\nText"

    cleaned, _ = engine.delete_all_blocks(content)

    assert cleaned == "# A\n\nText"


def test_delete_all_blocks_without_blocks(engine):
    content = "# A\n<!--TOC-->\ntext\n"

    assert engine.delete_all_blocks(content) == (content, [])


def test_replace_all_sections_round_trip(engine):
    toc = "- [Section 1.1](#section-11)"
    inserted = engine.insert_per_section(
        "# Chapter 1\n\nContent...\n\n## Section 1.1\n\nMore content\n", {0: toc}
    )

    cleaned, _ = engine.delete_all_blocks(inserted)

    assert engine.replace_all_sections(inserted, {0: toc}) == inserted
    assert engine.find_level1_lines(cleaned) == [0]
    assert "## Section 1.1" in cleaned
    assert MARKER not in cleaned


def test_block_line_count():
    assert MarkerEngine.block_line_count("") == 0
    assert MarkerEngine.block_line_count("- [A](#a)") == 7
    assert MarkerEngine.block_line_count("- [A](#a)\n  - [B](#b)") == 8


def test_section_growth_subtracts_absorbed_blank_lines(engine):
    assert engine.section_growth("# A\nText", 0, "- [A](#a)") == 7
    assert engine.section_growth("# A\n\n\nText", 0, "- [A](#a)") == 5
    assert engine.section_growth("# A\nText", 0, "") == 0
