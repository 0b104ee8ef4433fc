"""Open EPUB archives and locate the package document."""

import io
import os
import zipfile
import zlib
from typing import BinaryIO, Union

from lxml import etree

from epub_extract.errors import (
    InvalidArchive,
    MissingContainerDescriptor,
    NoRootFileDeclared,
)

CONTAINER_PATH = "META-INF/container.xml"
MIMETYPE_PATH = "mimetype"
EPUB_MIMETYPE = "application/epub+zip"
ZIP_SIGNATURE = b"PK\x03\x04"

# Errors zipfile may raise while reading a single member
READ_ERRORS = (
    KeyError,
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    OSError,
    NotImplementedError,  # Unsupported compression method
    RuntimeError,  # Encrypted member
)

EpubSource = Union[bytes, bytearray, memoryview, str, os.PathLike, BinaryIO]


def xml_parser() -> etree.XMLParser:
    """Create an XML parser that never fetches external entities."""
    return etree.XMLParser(resolve_entities=False, no_network=True)


def local_name(element: etree._Element) -> str:
    """Return an element's tag without its namespace ('' for comments)."""
    if not isinstance(element.tag, str):
        return ""
    return etree.QName(element.tag).localname


class Container:
    """An opened EPUB archive.

    Use as a context manager so the archive is closed on every exit path.
    """

    def __init__(self, archive: zipfile.ZipFile, root_file_path: str):
        self._archive = archive
        self._names = set(archive.namelist())
        self.root_file_path = root_file_path

    def __enter__(self) -> "Container":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        self._archive.close()

    def names(self) -> list[str]:
        """List archive entries in stored order."""
        return self._archive.namelist()

    def has(self, path: str) -> bool:
        return path in self._names

    def read(self, path: str) -> bytes:
        """Read an entry's bytes. Raises KeyError if the entry is absent."""
        return self._archive.read(path)

    @property
    def mimetype(self) -> str | None:
        """Content of the ``mimetype`` entry, if readable."""
        if not self.has(MIMETYPE_PATH):
            return None
        try:
            return self.read(MIMETYPE_PATH).decode("ascii", errors="replace").strip()
        except READ_ERRORS:
            return None


def open_container(source: EpubSource) -> Container:
    """Open an EPUB from bytes, a path, or a binary file object.

    Raises:
        InvalidArchive: Input is not a ZIP archive
        MissingContainerDescriptor: META-INF/container.xml is absent
        NoRootFileDeclared: The descriptor names no package document
    """
    archive = _open_archive(source)
    try:
        root_file_path = _find_root_file(archive)
    except BaseException:
        archive.close()
        raise
    return Container(archive, root_file_path)


def _open_archive(source: EpubSource) -> zipfile.ZipFile:
    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
        head = data[: len(ZIP_SIGNATURE)]
        stream: Union[str, os.PathLike, BinaryIO] = io.BytesIO(data)
    elif isinstance(source, (str, os.PathLike)):
        try:
            with open(source, "rb") as f:
                head = f.read(len(ZIP_SIGNATURE))
        except OSError as e:
            raise InvalidArchive(f"cannot read {os.fspath(source)}: {e}") from e
        stream = source
    else:
        start = source.tell()
        head = source.read(len(ZIP_SIGNATURE))
        source.seek(start)
        stream = source

    if head != ZIP_SIGNATURE:
        raise InvalidArchive("missing ZIP local file header signature")

    try:
        return zipfile.ZipFile(stream)
    except (zipfile.BadZipFile, zipfile.LargeZipFile, OSError, EOFError) as e:
        raise InvalidArchive(str(e)) from e


def _find_root_file(archive: zipfile.ZipFile) -> str:
    try:
        descriptor = archive.read(CONTAINER_PATH)
    except KeyError:
        raise MissingContainerDescriptor(CONTAINER_PATH) from None
    except READ_ERRORS as e:
        raise InvalidArchive(f"cannot read {CONTAINER_PATH}: {e}") from e

    try:
        root = etree.fromstring(descriptor, parser=xml_parser())
    except etree.XMLSyntaxError as e:
        raise NoRootFileDeclared(
            CONTAINER_PATH, f"descriptor is not well-formed XML ({e})"
        ) from e

    for element in root.iter():
        if local_name(element) != "rootfile":
            continue
        full_path = (element.get("full-path") or "").strip().lstrip("/")
        if full_path:
            return full_path

    raise NoRootFileDeclared(CONTAINER_PATH)
