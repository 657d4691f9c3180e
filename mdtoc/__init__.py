"""
mdtoc: Table of Contents generator and updater for Markdown files.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    mdtoc README.md
    mdtoc --in-place --global README.md

Library Usage:
    from mdtoc import TableOfContents, TocConfig

    toc = TableOfContents(TocConfig(section_mode=False))
    updated = toc.update(content)
"""

from .config import ConfigError, TocConfig
from .exceptions import MarkerNotFoundError, TocFileError
from .generator import render_section, render_toc
from .markers import MarkerEngine
from .models import Heading, Section, SectionToc, UpdateStatus
from .parser import extract_all_headings, extract_headings
from .sections import split_sections
from .slugify import AnchorGenerator, generate_slug
from .toc import TableOfContents

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "TableOfContents",
    "MarkerEngine",
    "extract_headings",
    "extract_all_headings",
    "split_sections",
    "render_toc",
    "render_section",
    "generate_slug",
    "AnchorGenerator",
    # Data models
    "TocConfig",
    "Heading",
    "Section",
    "SectionToc",
    "UpdateStatus",
    # Exceptions
    "ConfigError",
    "MarkerNotFoundError",
    "TocFileError",
    # Version
    "__version__",
]
