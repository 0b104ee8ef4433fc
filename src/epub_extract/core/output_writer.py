"""Write parse results to disk."""

from pathlib import Path

from epub_extract.errors import ParseError
from epub_extract.models.book import ParseResult
from epub_extract.models.output import BookOutput, ErrorOutput


class OutputWriter:
    """Write the serialized response shape to a JSON file."""

    def __init__(self, output_path: Path):
        """Initialize output writer.

        Args:
            output_path: JSON file to write; parent directories are created
        """
        self.output_path = output_path
        self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def write_book(self, result: ParseResult) -> Path:
        """Write a successful result."""
        output = BookOutput.from_result(result)
        self.output_path.write_text(output.to_json(), encoding="utf-8")
        return self.output_path

    def write_error(self, error: ParseError) -> Path:
        """Write the error envelope for a failed parse."""
        output = ErrorOutput.from_error(error)
        self.output_path.write_text(output.to_json(), encoding="utf-8")
        return self.output_path
