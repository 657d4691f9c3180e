from mdtoc.models import ParserContext, ParserState
from mdtoc.parser import indent_width, iter_body_lines, scan_line


def test_scan_line_opens_fence_and_records_it():
    ctx = ParserContext()

    assert scan_line(ctx, "   ```python") is True
    assert ctx.state is ParserState.IN_FENCED_CODE
    assert ctx.fence_char == "`"
    assert ctx.fence_length == 3


def test_scan_line_ignores_other_fences_inside_code():
    ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="~", fence_length=3)

    assert scan_line(ctx, "```") is True
    assert ctx.fence_char == "~"
    assert ctx.state is ParserState.IN_FENCED_CODE


def test_scan_line_treats_four_space_fence_as_indented_code():
    ctx = ParserContext()

    assert scan_line(ctx, "    ```") is True
    assert ctx.state is ParserState.IN_INDENTED_CODE


def test_scan_line_closing_fence_respects_indent_limit():
    ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="`", fence_length=3)

    scan_line(ctx, "    ```")
    assert ctx.state is ParserState.IN_FENCED_CODE

    assert scan_line(ctx, "```") is True
    assert ctx.state is ParserState.NORMAL
    assert ctx.fence_char is None
    assert ctx.fence_length == 0


def test_scan_line_closing_fence_needs_matching_character_and_length():
    ctx = ParserContext(state=ParserState.IN_FENCED_CODE, fence_char="`", fence_length=4)

    for line in ("~~~~", "```", "```` info"):
        scan_line(ctx, line)
        assert ctx.state is ParserState.IN_FENCED_CODE

    scan_line(ctx, "`````")
    assert ctx.state is ParserState.NORMAL


def test_scan_line_indented_code_lasts_until_dedent():
    ctx = ParserContext()

    assert scan_line(ctx, "   text") is False
    assert scan_line(ctx, "    code block") is True
    assert scan_line(ctx, "") is True
    assert scan_line(ctx, "    still code") is True
    assert ctx.state is ParserState.IN_INDENTED_CODE

    assert scan_line(ctx, "no longer indented") is False
    assert ctx.state is ParserState.NORMAL


def test_indent_width_expands_tabs():
    assert indent_width("text") == 0
    assert indent_width("  text") == 2
    assert indent_width("\ttext") == 4
    assert indent_width("  \ttext") == 4


def test_iter_body_lines_skips_fenced_code():
    lines = ["# A", "```", "# B", "```", "# C"]

    assert list(iter_body_lines(lines)) == [(0, "# A"), (4, "# C")]


def test_iter_body_lines_skips_tilde_fence_with_backticks_inside():
    lines = ["~~~", "```", "# hidden", "~~~", "# shown"]

    assert list(iter_body_lines(lines)) == [(4, "# shown")]


def test_iter_body_lines_skips_indented_code():
    lines = ["text", "", "    # code", "", "# heading"]

    assert [index for index, _ in iter_body_lines(lines)] == [0, 1, 4]


def test_iter_body_lines_skips_frontmatter():
    lines = ["---", "title: <!--TOC-->", "---", "# Title"]

    assert list(iter_body_lines(lines)) == [(3, "# Title")]


def test_scan_line_backtick_info_string_with_backtick_is_not_a_fence():
    ctx = ParserContext()

    assert scan_line(ctx, "``` a`b") is False
    assert ctx.state is ParserState.NORMAL
    assert list(iter_body_lines(["``` a`b", "# B"])) == [(0, "``` a`b"), (1, "# B")]


def test_scan_line_tilde_fence_accepts_backticks_in_info_string():
    ctx = ParserContext()

    assert scan_line(ctx, "~~~ a`b") is True
    assert ctx.state is ParserState.IN_FENCED_CODE
