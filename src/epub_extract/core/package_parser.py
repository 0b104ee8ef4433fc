"""Parse the package document (OPF) into metadata, manifest and spine."""

import posixpath
import re

from lxml import etree

from epub_extract.core.container import READ_ERRORS, Container, local_name, xml_parser
from epub_extract.errors import (
    DuplicateManifestId,
    MalformedPackageXML,
    RootFileNotFound,
    UnresolvedSpineReference,
)
from epub_extract.models.book import (
    BookMetadata,
    ManifestItem,
    PackageDocument,
    SpineItem,
)

METADATA_FIELDS = ("title", "creator", "publisher", "date", "language")

_WHITESPACE = re.compile(r"\s+")


def parse_package(container: Container, root_file_path: str) -> PackageDocument:
    """Parse the package document at ``root_file_path``.

    Every spine reference is resolved against the manifest here, so an
    inconsistent package fails before any chapter is read.

    Raises:
        RootFileNotFound: The declared path is not in the archive
        MalformedPackageXML: The document is not well-formed XML
        DuplicateManifestId: Two manifest items share an id
        UnresolvedSpineReference: A spine idref names no manifest item
    """
    if not container.has(root_file_path):
        raise RootFileNotFound(root_file_path)
    try:
        content = container.read(root_file_path)
    except READ_ERRORS:
        raise RootFileNotFound(root_file_path) from None

    try:
        root = etree.fromstring(content, parser=xml_parser())
    except etree.XMLSyntaxError as e:
        line, column = e.position if e.position else (None, None)
        raise MalformedPackageXML(root_file_path, e.msg or str(e), line, column) from e

    warnings: list[str] = []
    metadata = _get_metadata(_find_child(root, "metadata"))
    manifest = _get_manifest(_find_child(root, "manifest"), warnings)
    spine = _get_spine(_find_child(root, "spine"))

    for item in spine:
        if item.idref not in manifest:
            raise UnresolvedSpineReference(item.idref)

    base_path = posixpath.dirname(root_file_path)
    return PackageDocument(
        path=root_file_path,
        base_path=base_path,
        version=root.get("version"),
        metadata=metadata,
        manifest=manifest,
        spine=spine,
        warnings=warnings,
    )


def normalize_text(text: str | None) -> str:
    """Collapse whitespace runs and trim."""
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip()


def _find_child(root: etree._Element, name: str) -> etree._Element | None:
    """Find a package section, tolerating documents that nest it deeper."""
    for child in root:
        if local_name(child) == name:
            return child
    for element in root.iter():
        if local_name(element) == name:
            return element
    return None


def _get_metadata(block: etree._Element | None) -> BookMetadata:
    """Extract recognized fields; the first non-blank occurrence wins."""
    found: dict[str, str] = {}
    if block is not None:
        for element in block.iter():
            name = local_name(element)
            if name not in METADATA_FIELDS or name in found:
                continue
            text = normalize_text("".join(element.itertext()))
            if text:
                found[name] = text
    return BookMetadata(**found)


def _get_manifest(
    block: etree._Element | None, warnings: list[str]
) -> dict[str, ManifestItem]:
    manifest: dict[str, ManifestItem] = {}
    if block is None:
        return manifest

    # Includes ids of skipped items, a repeat is still a duplicate
    seen_ids: set[str] = set()
    for element in block:
        if local_name(element) != "item":
            continue
        item_id = (element.get("id") or "").strip()
        href = (element.get("href") or "").strip()
        if item_id:
            if item_id in seen_ids:
                raise DuplicateManifestId(item_id)
            seen_ids.add(item_id)
        if not item_id or not href:
            warnings.append(
                f"Skipped manifest item without id or href (id={item_id!r}, href={href!r})"
            )
            continue
        manifest[item_id] = ManifestItem(
            id=item_id,
            href=href,
            media_type=(element.get("media-type") or "").strip(),
        )
    return manifest


def _get_spine(block: etree._Element | None) -> list[SpineItem]:
    spine: list[SpineItem] = []
    if block is None:
        return spine

    for element in block:
        if local_name(element) != "itemref":
            continue
        linear = (element.get("linear") or "yes").strip().lower() != "no"
        spine.append(SpineItem(idref=(element.get("idref") or "").strip(), linear=linear))
    return spine
