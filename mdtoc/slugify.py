"""Anchor generation for markdown headings."""

from __future__ import annotations

import re

_HTML_TAG_PATTERN = re.compile(r"<[^>]*>")
_HYPHEN_RUN_PATTERN = re.compile(r"-+")

# Applied in order; nested markup relies on bold resolving before italic and
# links resolving before images.
_INLINE_MARKUP_PATTERNS = (
    re.compile(r"\*\*(.+?)\*\*"),
    re.compile(r"\*(.+?)\*"),
    re.compile(r"__(.+?)__"),
    re.compile(r"(?<!\S)_([^_]+?)_(?!\S)"),
    re.compile(r"~~(.+?)~~"),
    re.compile(r"`(.+?)`"),
    re.compile(r"\[([^\]]+)\]\([^)]+\)"),
    re.compile(r"!\[([^\]]*)\]\([^)]+\)"),
)


def strip_inline_markup(text: str) -> str:
    """Resolve emphasis, strikethrough, code, link, and image syntax to inner text.

    Examples:
        strip_inline_markup("**bold** and `code`")  # "bold and code"
        strip_inline_markup("see [docs](https://example.com)")  # "see docs"
    """
    for pattern in _INLINE_MARKUP_PATTERNS:
        text = pattern.sub(r"\1", text)
    return text


def _is_slug_character(character: str) -> bool:
    return character.isalpha() or character.isdecimal() or character in "-_ "


def generate_slug(title: str) -> str:
    """Generate a GitHub-style slug from a Markdown heading title.

    Lowercases the title, drops HTML tags and inline markup, keeps Unicode
    letters, digits, hyphens, underscores and spaces, then turns spaces into
    single hyphens. Returns an empty string when nothing survives.

    Args:
        title: The heading text to convert into a slug.

    Returns:
        str: Hyphen-separated slug suitable for anchor links.

    Examples:
        generate_slug("C++ Programming")  # "c-programming"
        generate_slug("Using `fmt.Println`")  # "using-fmtprintln"
        generate_slug("项目简介")  # "项目简介"
    """
    slug = title.lower()
    slug = _HTML_TAG_PATTERN.sub("", slug)
    slug = strip_inline_markup(slug)
    slug = "".join(character for character in slug if _is_slug_character(character))

    slug = slug.replace(" ", "-")
    slug = _HYPHEN_RUN_PATTERN.sub("-", slug)
    return slug.strip("-")


class AnchorGenerator:
    """Generate unique anchors for the headings of a single document.

    Repeated slugs get GitHub's numeric suffixes: the first occurrence keeps
    the slug, later ones become ``slug-1``, ``slug-2`` and so on. Call
    `reset` before processing another document.

    Examples:
        anchors = AnchorGenerator()
        [anchors.generate("Title") for _ in range(3)]  # ["title", "title-1", "title-2"]
    """

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}

    def reset(self) -> None:
        self._counts = {}

    def generate(self, text: str) -> str:
        slug = generate_slug(text)
        count = self._counts.get(slug)
        self._counts[slug] = (count or 0) + 1
        if count is None:
            return slug
        return f"{slug}-{count}"
