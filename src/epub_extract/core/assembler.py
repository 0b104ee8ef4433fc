"""Assemble the final parse result."""

from collections.abc import Iterable, Sequence

from epub_extract.models.book import BookMetadata, ChapterRecord, ParseResult
from epub_extract.models.settings import ExtractionSettings


def assemble(
    metadata: BookMetadata,
    chapters: Sequence[ChapterRecord],
    warnings: Iterable[str] = (),
    settings: ExtractionSettings | None = None,
) -> ParseResult:
    """Fill unset metadata with defaults and freeze the result."""
    defaults = (settings or ExtractionSettings()).default_metadata
    filled = {
        name: value if value and value.strip() else getattr(defaults, name)
        for name, value in metadata.model_dump().items()
    }
    return ParseResult(
        metadata=BookMetadata(**filled),
        chapters=tuple(chapters),
        warnings=tuple(warnings),
    )
