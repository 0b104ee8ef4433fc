import pytest

from epub_samples import simple_epub, write_epub

FULL_METADATA = {
    "title": "A Tale",
    "creator": "Jane Writer",
    "publisher": "Small Press",
    "date": "2020-01-01",
    "language": "en",
}


@pytest.fixture
def book_bytes():
    return simple_epub(
        [
            ("Opening", "<p>It was a <b>dark</b> night.</p>"),
            (None, "<p>Second chapter text.</p>"),
            ("Ending", "<h1>Ending</h1><p>The end.</p>"),
        ],
        metadata=FULL_METADATA,
    )


@pytest.fixture
def book_path(tmp_path, book_bytes):
    return write_epub(tmp_path / "book.epub", book_bytes)
