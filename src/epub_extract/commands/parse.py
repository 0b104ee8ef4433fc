"""Parse and info command implementations."""

import logging
import re
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from epub_extract.core.epub_parser import parse_book
from epub_extract.core.output_writer import OutputWriter
from epub_extract.models.book import ChapterRecord, ParseResult
from epub_extract.models.output import BookOutput
from epub_extract.models.settings import ExtractionSettings

log = logging.getLogger(__name__)

EPUB_SUFFIX = ".epub"
MAX_UPLOAD_BYTES = 10 * 1024 * 1024


class UploadRejected(Exception):
    """Input file refused before parsing."""


def validate_upload(book_path: Path, max_bytes: int = MAX_UPLOAD_BYTES) -> None:
    """Apply the upload checks a web front end would enforce."""
    if not book_path.is_file():
        raise UploadRejected(f"File not found: {book_path}")
    if book_path.suffix.lower() != EPUB_SUFFIX:
        raise UploadRejected(
            f"Unsupported file format: {book_path.suffix or '(none)'}. Only .epub files are accepted"
        )
    size = book_path.stat().st_size
    if size > max_bytes:
        raise UploadRejected(
            f"File is {size:,} bytes, larger than the {max_bytes:,} byte limit"
        )


def parse_chapter_selection(selection: str, total_chapters: int) -> list[int]:
    """Parse user chapter selection string to list of indices.

    Supports: "1,3,5-7", "all", "1-10", etc.
    Returns 0-based indices.
    """
    selection = selection.strip().lower()

    if selection == "all":
        return list(range(total_chapters))

    indices = set()
    for part in selection.split(","):
        part = part.strip()
        if not part:
            continue

        if "-" in part:
            match = re.match(r"(\d+)\s*-\s*(\d+)", part)
            if match:
                start, end = int(match.group(1)), int(match.group(2))
                indices.update(range(start - 1, end))  # Convert to 0-based
        else:
            try:
                indices.add(int(part) - 1)  # Convert to 0-based
            except ValueError:
                continue

    # Filter valid indices
    return sorted(i for i in indices if 0 <= i < total_chapters)


def load_book(
    book_path: Path,
    settings: ExtractionSettings,
    quiet: bool,
    console: Console,
) -> ParseResult:
    """Validate and parse a book, logging recovered chapter failures."""
    validate_upload(book_path)

    log.debug("Parsing %s", book_path)
    if quiet:
        result = parse_book(book_path, settings)
    else:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
            transient=True,
        ) as progress:
            progress.add_task("Parsing EPUB...", total=None)
            result = parse_book(book_path, settings)

    for warning in result.warnings:
        log.warning(warning)
    log.debug("Extracted %d chapters from %s", result.chapter_count, book_path)
    return result


def book_info_panel(result: ParseResult) -> Panel:
    """Build the book info panel."""
    meta = result.metadata
    info_lines = [
        f"[bold]{escape(meta.title)}[/]",
        "",
        f"[dim]Author:[/] {escape(meta.creator)}",
        f"[dim]Publisher:[/] {escape(meta.publisher)}",
        f"[dim]Date:[/] {escape(meta.date)}",
        f"[dim]Language:[/] {escape(meta.language)}",
        f"[dim]Chapters:[/] {result.chapter_count}",
    ]
    if result.warnings:
        info_lines.append(f"[dim]Warnings:[/] {len(result.warnings)}")

    return Panel("\n".join(info_lines), title="Book Info", border_style="green")


def display_chapters(chapters: list[ChapterRecord], console: Console) -> None:
    """Display chapter previews."""
    table = Table(title="Chapters", show_header=True, header_style="bold cyan")
    table.add_column("#", style="dim", width=4)
    table.add_column("Title", style="white")
    table.add_column("Id", style="dim")
    table.add_column("Length", justify="right", style="green")
    table.add_column("Preview", style="white", overflow="fold")

    for chapter in chapters:
        table.add_row(
            str(chapter.chapter_index),
            escape(chapter.title),
            escape(chapter.id),
            f"{chapter.raw_content_length:,}",
            escape(chapter.content_preview),
        )

    console.print(table)


def execute_info(book_path: Path, settings: ExtractionSettings, console: Console) -> None:
    """Execute the info command."""
    result = load_book(book_path, settings, quiet=False, console=console)
    console.print(book_info_panel(result))


def execute_parse(
    book_path: Path,
    chapters: str | None,
    output_path: Path | None,
    as_json: bool,
    settings: ExtractionSettings,
    quiet: bool,
    console: Console,
) -> None:
    """Execute the parse command."""
    result = load_book(book_path, settings, quiet=quiet or as_json, console=console)

    if output_path is not None:
        written = OutputWriter(output_path).write_book(result)
        log.info("Wrote %s", written)

    if as_json:
        typer.echo(BookOutput.from_result(result).to_json())
        return

    if quiet:
        return

    console.print(book_info_panel(result))
    selected = parse_chapter_selection(chapters or "all", result.chapter_count)
    if not selected:
        console.print("[yellow]No chapters selected.[/]")
        return
    display_chapters([result.chapters[i] for i in selected], console)

    if output_path is not None:
        console.print(f"[dim]Output:[/] {output_path}")
