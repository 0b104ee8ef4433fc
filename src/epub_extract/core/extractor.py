"""Extract chapter records from spine documents."""

import posixpath
from urllib.parse import unquote

from epub_extract.core.container import READ_ERRORS, Container
from epub_extract.core.content_processor import ContentProcessor
from epub_extract.core.ids import ChapterIdFactory, CounterIdFactory
from epub_extract.errors import EmptyBook
from epub_extract.models.book import ChapterRecord, ManifestItem, PackageDocument
from epub_extract.models.settings import ExtractionSettings

DOCUMENT_MEDIA_TYPES = {
    "",  # Undeclared, try anyway
    "application/xhtml+xml",
    "text/html",
    "application/xml",
    "text/xml",
    "text/x-oeb1-document",
}


def resolve_href(base_path: str, href: str) -> str | None:
    """Resolve a manifest href to an archive entry name.

    Returns None when the href is empty or points outside the archive.
    """
    path = href.split("#", 1)[0].replace("\\", "/")
    if not path:
        return None
    if path.startswith("/"):
        joined = posixpath.normpath(path.lstrip("/"))
    else:
        joined = posixpath.normpath(posixpath.join(base_path, path))
    if joined == ".." or joined.startswith("../") or joined == ".":
        return None
    return joined


class ContentExtractor:
    """Build ordered chapter records for one package document.

    Chapters that cannot be read are dropped and described in
    ``warnings``; chapters with no text are dropped silently.
    """

    def __init__(
        self,
        container: Container,
        package: PackageDocument,
        settings: ExtractionSettings | None = None,
        id_factory: ChapterIdFactory | None = None,
    ):
        self.container = container
        self.package = package
        self.settings = settings or ExtractionSettings()
        self.id_factory = id_factory or CounterIdFactory()
        self.processor = ContentProcessor(
            preview_length=self.settings.preview_length,
            truncation_marker=self.settings.truncation_marker,
        )
        self.warnings: list[str] = []

    def extract(self) -> list[ChapterRecord]:
        """Extract chapters in spine order.

        Raises:
            EmptyBook: No spine entry yielded readable, non-empty text
        """
        chapters: list[ChapterRecord] = []
        used_ids: set[str] = set()

        for spine_position, spine_item in enumerate(self.package.spine, start=1):
            if not spine_item.linear and not self.settings.include_non_linear:
                continue

            item = self.package.manifest[spine_item.idref]
            located = self._read_document(item, spine_position)
            if located is None:
                continue
            path, content = located

            title, text = self.processor.process(content)
            if not text:
                continue

            position = len(chapters) + 1
            chapters.append(
                ChapterRecord(
                    chapter_index=position,
                    id=self._chapter_id(item, position, used_ids),
                    title=title or self.settings.untitled_template.format(position=position),
                    content_preview=self.processor.preview(text),
                    raw_content_length=len(text),
                    href=path,
                )
            )

        if not chapters:
            raise EmptyBook(len(self.package.spine))
        return chapters

    def _read_document(
        self, item: ManifestItem, spine_position: int
    ) -> tuple[str, bytes] | None:
        """Read a spine document, recording a warning on failure."""
        if item.media_type.lower() not in DOCUMENT_MEDIA_TYPES:
            self._warn(spine_position, item, f"unsupported media type {item.media_type!r}")
            return None

        path = resolve_href(self.package.base_path, item.href)
        if path is None:
            self._warn(spine_position, item, f"href {item.href!r} points outside the archive")
            return None

        # Some archives store names percent-encoded, most store them decoded
        for candidate in (unquote(path), path):
            if self.container.has(candidate):
                path = candidate
                break
        else:
            self._warn(spine_position, item, f"{path} is missing from the archive")
            return None

        try:
            return path, self.container.read(path)
        except READ_ERRORS as e:
            self._warn(spine_position, item, f"{path} could not be read ({e})")
            return None

    def _chapter_id(self, item: ManifestItem, position: int, used_ids: set[str]) -> str:
        """Prefer the manifest id; fall back to the id factory on reuse."""
        chapter_id = item.id
        if chapter_id in used_ids:
            chapter_id = self._fresh_id(position, used_ids)
        used_ids.add(chapter_id)
        return chapter_id

    def _fresh_id(self, position: int, used_ids: set[str]) -> str:
        """Ask the factory for an unused id, suffixing if it keeps colliding.

        A factory that never repeats itself finds a free id within
        ``len(used_ids) + 1`` calls; a deterministic one may not.
        """
        candidate = self.id_factory(position)
        for _ in range(len(used_ids)):
            if candidate not in used_ids:
                return candidate
            candidate = self.id_factory(position)

        chapter_id = candidate
        suffix = 2
        while chapter_id in used_ids:
            chapter_id = f"{candidate}-{suffix}"
            suffix += 1
        return chapter_id

    def _warn(self, spine_position: int, item: ManifestItem, reason: str) -> None:
        self.warnings.append(
            f"Skipped spine entry {spine_position} ({item.id}): {reason}"
        )
