"""Exceptions raised by the EPUB extraction pipeline."""


class ParseError(Exception):
    """Base class for every failure that aborts a parse.

    ``http_status`` is the status code a web layer should answer with.
    """

    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ContainerError(ParseError):
    """The archive or its container descriptor is unusable."""


class InvalidArchive(ContainerError):
    """Input is not a readable ZIP archive."""

    http_status = 400

    def __init__(self, detail: str):
        super().__init__(f"Not a valid EPUB archive: {detail}")
        self.detail = detail


class MissingContainerDescriptor(ContainerError):
    """The archive has no META-INF/container.xml entry."""

    def __init__(self, path: str):
        super().__init__(f"Container descriptor not found: {path}")
        self.path = path


class NoRootFileDeclared(ContainerError):
    """The container descriptor names no package document."""

    def __init__(self, path: str, detail: str = "no rootfile with a full-path"):
        super().__init__(f"No root file declared in {path}: {detail}")
        self.path = path
        self.detail = detail


class PackageError(ParseError):
    """The package document (OPF) is missing or inconsistent."""


class RootFileNotFound(PackageError):
    def __init__(self, path: str):
        super().__init__(f"Package document not found in archive: {path}")
        self.path = path


class MalformedPackageXML(PackageError):
    """The package document is not well-formed XML.

    ``line`` and ``column`` are set when the XML parser reports a position.
    """

    def __init__(
        self,
        path: str,
        reason: str,
        line: int | None = None,
        column: int | None = None,
    ):
        where = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"Malformed package document {path}{where}: {reason}")
        self.path = path
        self.reason = reason
        self.line = line
        self.column = column


class DuplicateManifestId(PackageError):
    def __init__(self, item_id: str):
        super().__init__(f"Manifest id declared more than once: {item_id!r}")
        self.item_id = item_id


class UnresolvedSpineReference(PackageError):
    def __init__(self, item_id: str):
        super().__init__(f"Spine references unknown manifest id: {item_id!r}")
        self.item_id = item_id


class ExtractError(ParseError):
    """Chapter content could not be extracted."""


class EmptyBook(ExtractError):
    """No spine entry produced readable, non-empty content."""

    def __init__(self, spine_length: int):
        super().__init__(
            f"No readable chapter content in {spine_length} spine entries"
        )
        self.spine_length = spine_length
