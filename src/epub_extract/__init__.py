"""Extract metadata and chapter previews from EPUB files."""

from epub_extract.core.epub_parser import EpubParser, parse_book
from epub_extract.core.ids import CounterIdFactory
from epub_extract.errors import (
    ContainerError,
    DuplicateManifestId,
    EmptyBook,
    ExtractError,
    InvalidArchive,
    MalformedPackageXML,
    MissingContainerDescriptor,
    NoRootFileDeclared,
    PackageError,
    ParseError,
    RootFileNotFound,
    UnresolvedSpineReference,
)
from epub_extract.models import (
    BookMetadata,
    BookOutput,
    ChapterRecord,
    ErrorOutput,
    ExtractionSettings,
    ParseResult,
)

__version__ = "0.1.0"

__all__ = [
    "parse_book",
    "EpubParser",
    "CounterIdFactory",
    # Models
    "BookMetadata",
    "ChapterRecord",
    "ParseResult",
    "ExtractionSettings",
    "BookOutput",
    "ErrorOutput",
    # Errors
    "ParseError",
    "ContainerError",
    "PackageError",
    "ExtractError",
    "InvalidArchive",
    "MissingContainerDescriptor",
    "NoRootFileDeclared",
    "RootFileNotFound",
    "MalformedPackageXML",
    "DuplicateManifestId",
    "UnresolvedSpineReference",
    "EmptyBook",
]
