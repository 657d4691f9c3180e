"""
Generates tables of contents for Markdown files.
Previews them on stdout by default, or writes them between TOC markers.
"""

from __future__ import annotations

from pathlib import Path

import click

from .config import ConfigError, apply_overrides, build_config
from .exceptions import MarkerNotFoundError, TocFileError
from .logging import configure_logging
from .models import UpdateStatus
from .toc import TableOfContents

__all__ = ["cli"]

DIFF_EXIT_CODE = 128

_STATUS_MESSAGES = {
    UpdateStatus.UPDATED: "updated",
    UpdateStatus.INSERTED: "inserted",
    UpdateStatus.UNCHANGED: "unchanged",
}


def _flag(value: bool) -> bool | None:
    """Map an unset CLI flag to None so configuration file values are kept."""
    return True if value else None


def _read_file_list() -> list[Path]:
    stream = click.get_text_stream("stdin")
    if stream.isatty():
        return []
    return [Path(line.strip()) for line in stream if line.strip()]


@click.command()
@click.version_option()
@click.option("-m", "--min-level", type=click.IntRange(1, 6), help="Minimum heading level")
@click.option("-M", "--max-level", type=click.IntRange(1, 6), help="Maximum heading level")
@click.option("-o", "--ordered", is_flag=True, help="Use a numbered list")
@click.option("-L", "--line-numbers", is_flag=True, help="Append line ranges to entries")
@click.option("--no-line-numbers", is_flag=True, help="Disable line ranges set by configuration")
@click.option("-p", "--path", "show_path", is_flag=True, help="Prefix line ranges with the file path")
@click.option("-g", "--global", "global_mode", is_flag=True, help="One TOC for the whole document")
@click.option("-a", "--anchor", is_flag=True, help="Show anchor links in the preview")
@click.option("--marker", help="TOC marker line")
@click.option("-i", "--in-place", is_flag=True, help="Write the TOC into the files")
@click.option("--require-marker", is_flag=True, help="With --in-place, fail on files without a marker")
@click.option("-d", "--delete", is_flag=True, help="Remove TOC blocks from the files")
@click.option("-c", "--diff", is_flag=True, help="Exit with status 128 when a TOC is outdated")
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr")
@click.argument("files", nargs=-1, type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def cli(
    ctx: click.Context,
    files: tuple[Path, ...],
    min_level: int | None = None,
    max_level: int | None = None,
    ordered: bool = False,
    line_numbers: bool = False,
    no_line_numbers: bool = False,
    show_path: bool = False,
    global_mode: bool = False,
    anchor: bool = False,
    marker: str | None = None,
    in_place: bool = False,
    require_marker: bool = False,
    delete: bool = False,
    diff: bool = False,
    verbose: bool = False,
):
    """
    Entry point for previewing, updating, checking, or deleting tables of contents.

    Without FILES, file names are read from stdin, one per line.

    Raises:
        click.BadParameter: If option values or configuration files are invalid.
        click.ClickException: If any file failed in --in-place or --delete mode.

    Examples:
        mdtoc README.md
        mdtoc -i -L docs/*.md
        git ls-files '*.md' | mdtoc --diff
    """
    configure_logging(verbose=verbose)

    if line_numbers and no_line_numbers:
        raise click.BadParameter("--line-numbers and --no-line-numbers are mutually exclusive")

    try:
        base_config = build_config(
            Path.cwd(),
            min_level=min_level,
            max_level=max_level,
            ordered=_flag(ordered),
            line_numbers=True if line_numbers else (False if no_line_numbers else None),
            show_path=_flag(show_path),
            section_mode=False if global_mode else None,
            anchor_links=_flag(anchor),
            marker=marker,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    paths = list(files) or _read_file_list()
    if not paths:
        click.echo(ctx.get_help())
        return

    failures = 0
    outdated = 0
    printed = 0
    for path in paths:
        toc = TableOfContents(apply_overrides(base_config, file_path=str(path)))
        try:
            if diff:
                if toc.check_file(path):
                    outdated += 1
                    click.echo(f"{path}: needs update")
            elif delete:
                deleted = toc.delete_file(path)
                click.echo(f"{path}: {'TOC deleted' if deleted else 'no TOC block'}")
            elif in_place:
                status = toc.update_file(path, require_marker=require_marker)
                click.echo(f"{path}: {_STATUS_MESSAGES[status]}")
            else:
                rendered = toc.preview_file(path)
                if not rendered.strip():
                    continue
                if printed:
                    click.echo()
                if len(paths) > 1:
                    click.echo(f"## {path}\n")
                click.echo(rendered)
                printed += 1
        except (TocFileError, MarkerNotFoundError) as error:
            failures += 1
            message = str(error) if isinstance(error, TocFileError) else f"{path}: {error}"
            click.echo(f"Error: {message}", err=True)

    if diff and outdated:
        ctx.exit(DIFF_EXIT_CODE)
    if failures and (in_place or delete):
        raise click.ClickException(f"{failures} file(s) could not be processed")


if __name__ == "__main__":
    cli()
