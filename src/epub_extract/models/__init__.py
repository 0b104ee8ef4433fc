"""Data models."""

from epub_extract.models.book import (
    BookMetadata,
    ChapterRecord,
    ManifestItem,
    PackageDocument,
    ParseResult,
    SpineItem,
)
from epub_extract.models.output import (
    BookMetaOutput,
    BookOutput,
    ChapterOutput,
    ErrorOutput,
)
from epub_extract.models.settings import DefaultMetadata, ExtractionSettings

__all__ = [
    # Book models
    "ManifestItem",
    "SpineItem",
    "BookMetadata",
    "PackageDocument",
    "ChapterRecord",
    "ParseResult",
    # Output models
    "BookMetaOutput",
    "ChapterOutput",
    "BookOutput",
    "ErrorOutput",
    # Settings
    "DefaultMetadata",
    "ExtractionSettings",
]
