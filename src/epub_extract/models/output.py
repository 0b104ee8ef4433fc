"""Data models for the serialized response shape."""

from pydantic import BaseModel, ConfigDict, Field

from epub_extract.errors import ParseError
from epub_extract.models.book import BookMetadata, ChapterRecord, ParseResult


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class BookMetaOutput(_CamelModel):
    """Book metadata as exposed to API consumers."""

    title: str
    author: str
    publisher: str
    date: str
    language: str

    @classmethod
    def from_metadata(cls, metadata: BookMetadata) -> "BookMetaOutput":
        return cls(
            title=metadata.title or "",
            author=metadata.creator or "",
            publisher=metadata.publisher or "",
            date=metadata.date or "",
            language=metadata.language or "",
        )


class ChapterOutput(_CamelModel):
    """Single chapter entry of the response."""

    chapter_index: int = Field(alias="chapterIndex")
    title: str
    id: str
    content_preview: str = Field(alias="contentPreview")
    raw_content_length: int = Field(alias="rawContentLength")

    @classmethod
    def from_record(cls, record: ChapterRecord) -> "ChapterOutput":
        return cls(
            chapter_index=record.chapter_index,
            title=record.title,
            id=record.id,
            content_preview=record.content_preview,
            raw_content_length=record.raw_content_length,
        )


class BookOutput(_CamelModel):
    """Complete response body for a parsed book."""

    book_meta: BookMetaOutput = Field(alias="bookMeta")
    chapter_count: int = Field(alias="chapterCount")
    chapters: list[ChapterOutput]

    @classmethod
    def from_result(cls, result: ParseResult) -> "BookOutput":
        return cls(
            book_meta=BookMetaOutput.from_metadata(result.metadata),
            chapter_count=result.chapter_count,
            chapters=[ChapterOutput.from_record(c) for c in result.chapters],
        )

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)


class ErrorOutput(_CamelModel):
    """Error envelope returned instead of a book."""

    code: int
    error: str
    detail: str
    tip: str = "Check that the file is a valid EPUB, or try a smaller file"

    @classmethod
    def from_error(cls, exc: ParseError) -> "ErrorOutput":
        return cls(
            code=exc.http_status,
            error=type(exc).__name__,
            detail=exc.message,
        )

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)
