"""Main CLI application."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from epub_extract.commands.parse import UploadRejected, execute_info, execute_parse
from epub_extract.core.output_writer import OutputWriter
from epub_extract.errors import ParseError
from epub_extract.models.output import ErrorOutput
from epub_extract.models.settings import ExtractionSettings

app = typer.Typer(
    name="epub-extract",
    help="Extract book metadata and chapter previews from EPUB files.",
    add_completion=False,
)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose", "-v",
            help="Show debug logging",
        ),
    ] = False,
) -> None:
    """Extract book metadata and chapter previews from EPUB files."""
    _configure_logging(verbose)


BookPath = Annotated[
    Path,
    typer.Argument(
        help="Path to the EPUB file",
        dir_okay=False,
        resolve_path=True,
    ),
]

PreviewLength = Annotated[
    int,
    typer.Option(
        "--preview-length",
        help="Characters of stripped text kept in each preview",
        min=1,
    ),
]

SkipNonLinear = Annotated[
    bool,
    typer.Option(
        "--skip-non-linear",
        help="Leave out spine entries marked linear=\"no\"",
    ),
]


@app.command()
def info(
    book_path: BookPath,
    preview_length: PreviewLength = 200,
    skip_non_linear: SkipNonLinear = False,
) -> None:
    """Display book metadata and chapter count."""
    settings = ExtractionSettings(
        preview_length=preview_length,
        include_non_linear=not skip_non_linear,
    )
    try:
        execute_info(book_path, settings, console)
    except UploadRejected as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(2)
    except ParseError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


@app.command()
def parse(
    book_path: BookPath,
    chapters: Annotated[
        Optional[str],
        typer.Option(
            "--chapters",
            "-c",
            help="Chapters to show by index: '1,3,5-7' or 'all'",
        ),
    ] = None,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the result as JSON instead of tables",
        ),
    ] = False,
    output_path: Annotated[
        Optional[Path],
        typer.Option(
            "--output",
            "-o",
            help="Also write the JSON result to this file",
        ),
    ] = None,
    preview_length: PreviewLength = 200,
    skip_non_linear: SkipNonLinear = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress progress and table output",
        ),
    ] = False,
) -> None:
    """Parse an EPUB file and show its chapters."""
    settings = ExtractionSettings(
        preview_length=preview_length,
        include_non_linear=not skip_non_linear,
    )
    try:
        execute_parse(
            book_path=book_path,
            chapters=chapters,
            output_path=output_path,
            as_json=as_json,
            settings=settings,
            quiet=quiet,
            console=console,
        )
    except UploadRejected as e:
        err_console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(2)
    except ParseError as e:
        if output_path is not None:
            OutputWriter(output_path).write_error(e)
        if as_json:
            typer.echo(ErrorOutput.from_error(e).to_json())
        else:
            err_console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
