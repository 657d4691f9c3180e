"""Constants used across the mdtoc package."""

from __future__ import annotations

import re

from .config import TocConfig

DEFAULT_CONFIG = TocConfig()

# Markdown patterns
# A backtick fence never carries a backtick in its info string.
CODE_FENCE_PATTERN = re.compile(r"^(?P<indent>\s{0,3})(?P<fence>`{3,}(?=[^`]*$)|~{3,})(?P<info>.*)$")
FENCE_MAX_INDENT = 3

# Frontmatter delimiters
FRONTMATTER_OPEN = "---"
FRONTMATTER_CLOSE = ("---", "...")

# TOC layout
TOC_MARKER = DEFAULT_CONFIG.marker
INDENT_WIDTH = 2
# blank + marker + blank before the entries, blank + marker + blank after them
BLOCK_FRAME_LINES = 6
