"""Extraction settings."""

from pydantic import BaseModel, ConfigDict, Field


class DefaultMetadata(BaseModel):
    """Strings substituted for metadata the package document leaves unset."""

    model_config = ConfigDict(frozen=True)

    title: str = "Unknown Title"
    creator: str = "Unknown Author"
    publisher: str = "Unknown Publisher"
    date: str = "Unknown Date"
    language: str = "Unknown Language"


class ExtractionSettings(BaseModel):
    """Constants that shape the extraction output."""

    model_config = ConfigDict(frozen=True)

    preview_length: int = Field(default=200, gt=0)
    truncation_marker: str = "..."
    untitled_template: str = "Chapter {position}"
    include_non_linear: bool = True
    default_metadata: DefaultMetadata = Field(default_factory=DefaultMetadata)
