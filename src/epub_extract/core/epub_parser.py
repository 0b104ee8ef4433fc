"""EPUB parsing pipeline: container, package document, chapters, result."""

from epub_extract.core.assembler import assemble
from epub_extract.core.container import EPUB_MIMETYPE, EpubSource, open_container
from epub_extract.core.extractor import ContentExtractor
from epub_extract.core.ids import ChapterIdFactory
from epub_extract.core.package_parser import parse_package
from epub_extract.models.book import ParseResult
from epub_extract.models.settings import ExtractionSettings


class EpubParser:
    """Parse an EPUB into metadata and chapter previews.

    Each call to :meth:`parse` opens its own archive and closes it before
    returning, so one parser may be reused and parsers may run
    concurrently.
    """

    def __init__(
        self,
        source: EpubSource,
        settings: ExtractionSettings | None = None,
        id_factory: ChapterIdFactory | None = None,
    ):
        self.source = source
        self.settings = settings or ExtractionSettings()
        self.id_factory = id_factory

    def parse(self) -> ParseResult:
        """Run the pipeline. Raises a ``ParseError`` subclass on failure."""
        with open_container(self.source) as container:
            warnings: list[str] = []
            if container.mimetype != EPUB_MIMETYPE:
                warnings.append(
                    f"Unexpected mimetype entry {container.mimetype!r}, "
                    f"expected {EPUB_MIMETYPE!r}"
                )

            package = parse_package(container, container.root_file_path)
            warnings.extend(package.warnings)

            extractor = ContentExtractor(
                container, package, self.settings, self.id_factory
            )
            chapters = extractor.extract()
            warnings.extend(extractor.warnings)

        return assemble(package.metadata, chapters, warnings, self.settings)


def parse_book(
    source: EpubSource,
    settings: ExtractionSettings | None = None,
    id_factory: ChapterIdFactory | None = None,
) -> ParseResult:
    """Parse EPUB bytes, a path, or a binary file object."""
    return EpubParser(source, settings, id_factory).parse()
