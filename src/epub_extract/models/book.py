"""Data models for book structure."""

from pydantic import BaseModel, ConfigDict, Field


class ManifestItem(BaseModel):
    """Single resource declared in the package manifest."""

    model_config = ConfigDict(frozen=True)

    id: str
    href: str  # Relative to the package document
    media_type: str = ""


class SpineItem(BaseModel):
    """Single entry of the reading order."""

    model_config = ConfigDict(frozen=True)

    idref: str
    linear: bool = True


class BookMetadata(BaseModel):
    """Book-level metadata."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    creator: str | None = None
    publisher: str | None = None
    date: str | None = None
    language: str | None = None


class PackageDocument(BaseModel):
    """Parsed package document (OPF)."""

    model_config = ConfigDict(frozen=True)

    path: str
    base_path: str = ""  # Archive directory hrefs are resolved against
    version: str | None = None
    metadata: BookMetadata = Field(default_factory=BookMetadata)
    manifest: dict[str, ManifestItem] = Field(default_factory=dict)
    spine: list[SpineItem] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class ChapterRecord(BaseModel):
    """Chapter preview and statistics."""

    model_config = ConfigDict(frozen=True)

    chapter_index: int = Field(ge=1)
    id: str
    title: str
    content_preview: str
    raw_content_length: int = Field(ge=0)
    href: str = ""


class ParseResult(BaseModel):
    """Complete extraction result for one book."""

    model_config = ConfigDict(frozen=True)

    metadata: BookMetadata
    chapters: tuple[ChapterRecord, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def chapter_count(self) -> int:
        return len(self.chapters)
