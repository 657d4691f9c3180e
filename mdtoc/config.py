"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

DEFAULT_MARKER = "<!--TOC-->"


@dataclass(frozen=True)
class TocConfig:
    """Configuration for generating and maintaining Markdown tables of contents.

    Attributes:
        min_level: Smallest heading level to include.
        max_level: Largest heading level to include.
        ordered: Render numbered (``1.``) entries instead of ``-`` bullets.
        line_numbers: Append a `` `:start+count` `` range to every entry.
        show_path: Prefix the line range with `file_path`.
        file_path: Path of the document being processed, used by `show_path`.
        section_mode: Render one sub-TOC after each level-1 heading instead of
            a single TOC for the whole document.
        anchor_links: Render entries as ``[text](#anchor)`` rather than ``[text]``.
        marker: Literal line delimiting the managed TOC region.

    Examples:
        TocConfig(min_level=2, max_level=4, ordered=True)
    """

    # Heading levels
    min_level: int = 1
    max_level: int = 3

    # Formatting
    ordered: bool = False
    line_numbers: bool = False
    show_path: bool = False
    file_path: str = ""
    anchor_links: bool = False

    # Layout
    section_mode: bool = True
    marker: str = DEFAULT_MARKER


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_level` must be >= `min_level`")
    """


# Files consulted in each directory, most specific table first.
CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", "mdtoc"),)),
    (".mdtoc.toml", (("mdtoc",), ("tool", "mdtoc"))),
)


def load_config(search_path: Path) -> TocConfig:
    """Load configuration from the nearest config file.

    Every directory from `search_path` up to the filesystem root is checked
    for `pyproject.toml` (``[tool.mdtoc]``) and then `.mdtoc.toml`
    (``[mdtoc]`` or ``[tool.mdtoc]``). The first table found wins, even an
    empty one. Unreadable or malformed TOML files are ignored.

    Raises:
        ConfigError: If the table is not a mapping or names unknown settings.

    Examples:
        load_config(Path("docs"))
    """
    start = search_path.resolve()
    for directory in (start, *start.parents):
        for filename, table_paths in CONFIG_SOURCES:
            config_file = directory / filename
            table = _find_table(_read_toml(config_file), table_paths)
            if table is None:
                continue
            name, raw_config = table
            return normalize_config(_config_from_table(raw_config, name, config_file))

    return TocConfig()


def _read_toml(config_file: Path) -> dict:
    if not config_file.is_file():
        return {}
    try:
        return tomllib.loads(config_file.read_text(encoding="UTF-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        return {}


def _find_table(
    data: dict, table_paths: tuple[tuple[str, ...], ...]
) -> tuple[str, object] | None:
    for table_path in table_paths:
        node: object = data
        for key in table_path:
            if not isinstance(node, dict) or key not in node:
                break
            node = node[key]
        else:
            return ".".join(table_path), node
    return None


def _config_from_table(raw_config: object, name: str, config_file: Path) -> TocConfig:
    if not isinstance(raw_config, dict):
        raise ConfigError(f"`[{name}]` in {config_file} must be a table")

    unknown = sorted(set(raw_config) - {item.name for item in fields(TocConfig)})
    if unknown:
        raise ConfigError(
            f"Unknown `[{name}]` settings in {config_file}: {', '.join(unknown)}"
        )
    return TocConfig(**raw_config)


def normalize_config(config: TocConfig) -> TocConfig:
    """Return `config` with an empty or padded marker replaced by its trimmed form.

    An empty marker falls back to `DEFAULT_MARKER` instead of raising.
    """
    marker = config.marker.strip() if isinstance(config.marker, str) else config.marker
    if not marker:
        marker = DEFAULT_MARKER
    if marker == config.marker:
        return config
    return replace(config, marker=marker)


def validate_config(config: TocConfig) -> None:
    """Validate a `TocConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If heading levels are out of range or inconsistent, a flag
            is not a boolean, or a string field has the wrong type.

    Examples:
        validate_config(TocConfig(min_level=1, max_level=3))
    """
    _ensure_integers({"min_level": config.min_level, "max_level": config.max_level})

    if not 1 <= config.min_level <= 6:
        raise ConfigError("`min_level` must be between 1 and 6")
    if not 1 <= config.max_level <= 6:
        raise ConfigError("`max_level` must be between 1 and 6")
    if config.max_level < config.min_level:
        raise ConfigError("`max_level` must be >= `min_level`")

    _ensure_booleans(
        {
            "ordered": config.ordered,
            "line_numbers": config.line_numbers,
            "show_path": config.show_path,
            "anchor_links": config.anchor_links,
            "section_mode": config.section_mode,
        }
    )

    if not isinstance(config.marker, str):
        raise ConfigError("`marker` must be a string")
    if not isinstance(config.file_path, str):
        raise ConfigError("`file_path` must be a string")


def apply_overrides(config: TocConfig, **overrides: object) -> TocConfig:
    """Apply override values to a `TocConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        TocConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `TocConfig`.

    Examples:
        updated = apply_overrides(config, min_level=2, ordered=True)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> TocConfig:
    """Load, override, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        TocConfig: Validated configuration ready for processing documents.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), min_level=2, section_mode=False)
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")


def _ensure_booleans(values: dict[str, object]) -> None:
    for key, value in values.items():
        if not isinstance(value, bool):
            raise ConfigError(f"`{key}` must be a boolean")
