import asyncio
import io
import zipfile

import pytest

from epub_extract import (
    DuplicateManifestId,
    EmptyBook,
    EpubParser,
    InvalidArchive,
    ParseError,
    UnresolvedSpineReference,
    parse_book,
)
from epub_extract.core.container import Container
from epub_extract.models.settings import ExtractionSettings
from epub_samples import OPF_PATH, build_epub, chapter_xhtml, package_opf, simple_epub


def test_two_chapter_scenario():
    intro_text = "x" * 50
    long_body = "<p><b>" + "y" * 240 + "</b></p><p>" + "z" * 230 + "</p>"
    data = simple_epub([("Intro", f"<p>{intro_text}</p>"), (None, long_body)])

    result = parse_book(data)

    assert result.chapter_count == 2
    first, second = result.chapters
    assert first.title == "Intro"
    assert first.content_preview == intro_text
    assert first.raw_content_length == 50
    assert second.title == "Chapter 2"
    assert second.content_preview == "y" * 200 + "..."
    assert second.raw_content_length == 470
    assert [c.id for c in result.chapters] == ["ch1", "ch2"]


def test_metadata_and_sources(book_bytes, book_path):
    for source in (book_bytes, book_path, str(book_path), io.BytesIO(book_bytes)):
        result = parse_book(source)
        assert result.metadata.title == "A Tale"
        assert result.metadata.creator == "Jane Writer"
        assert [c.chapter_index for c in result.chapters] == [1, 2, 3]
        assert result.warnings == ()


def test_missing_metadata_uses_defaults():
    result = parse_book(simple_epub([("One", "<p>text</p>")]))
    assert result.metadata.title == "Unknown Title"
    assert result.metadata.creator == "Unknown Author"
    assert result.metadata.publisher == "Unknown Publisher"
    assert result.metadata.date == "Unknown Date"
    assert result.metadata.language == "Unknown Language"


@pytest.mark.parametrize("count", [1, 4, 12])
def test_chapter_indexes_are_contiguous(count):
    data = simple_epub([(None, f"<p>chapter {n}</p>") for n in range(count)])
    result = parse_book(data)
    assert [c.chapter_index for c in result.chapters] == list(range(1, count + 1))
    assert [c.content_preview for c in result.chapters] == [
        f"chapter {n}" for n in range(count)
    ]


def test_unreadable_chapter_is_warning_not_failure():
    files = {
        "OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
        OPF_PATH: package_opf([("a", "a.xhtml"), ("gone", "gone.xhtml")], ["gone", "a"]),
    }
    result = parse_book(build_epub(files))
    assert [c.id for c in result.chapters] == ["a"]
    assert len(result.warnings) == 1


def test_unexpected_mimetype_is_warning():
    files = {
        "OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
        OPF_PATH: package_opf([("a", "a.xhtml")], ["a"]),
    }
    result = parse_book(build_epub(files, mimetype="application/zip"))
    assert result.chapter_count == 1
    assert "mimetype" in result.warnings[0]


def test_whitespace_only_book_is_empty():
    with pytest.raises(EmptyBook):
        parse_book(simple_epub([("Blank", "   \n\t ")]))


def test_duplicate_manifest_id_aborts():
    files = {
        "OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
        OPF_PATH: package_opf([("a", "a.xhtml"), ("a", "b.xhtml")], ["a"]),
    }
    with pytest.raises(DuplicateManifestId):
        parse_book(build_epub(files))


def test_unresolved_spine_reference_aborts():
    files = {
        "OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
        OPF_PATH: package_opf([("a", "a.xhtml")], ["a", "missing"]),
    }
    with pytest.raises(UnresolvedSpineReference) as exc:
        parse_book(build_epub(files))
    assert exc.value.item_id == "missing"


def test_invalid_archive_is_parse_error():
    with pytest.raises(ParseError) as exc:
        parse_book(b"definitely not an epub")
    assert isinstance(exc.value, InvalidArchive)
    assert exc.value.http_status == 400


@pytest.mark.parametrize(
    "files",
    [
        {"OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
         OPF_PATH: package_opf([("a", "a.xhtml"), ("a", "a.xhtml")], ["a"])},
        {OPF_PATH: package_opf([("a", "a.xhtml")], ["a"])},
        {"OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
         OPF_PATH: package_opf([("a", "a.xhtml")], ["a"])},
    ],
)
def test_container_released_on_every_exit_path(monkeypatch, files):
    closed = []
    original_close = Container.close

    def spy(self):
        closed.append(self)
        original_close(self)

    monkeypatch.setattr(Container, "close", spy)
    try:
        parse_book(build_epub(files))
    except ParseError:
        pass
    assert len(closed) == 1


def test_parser_instance_is_reusable_with_fresh_ids():
    files = {
        "OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
        OPF_PATH: package_opf([("a", "a.xhtml")], ["a", "a"]),
    }
    parser = EpubParser(build_epub(files))
    first = parser.parse()
    second = parser.parse()
    assert [c.id for c in first.chapters] == ["a", "chapter-1"]
    assert first == second


def test_constant_id_factory_terminates():
    files = {
        "OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
        OPF_PATH: package_opf([("a", "a.xhtml")], ["a", "a"]),
    }
    result = parse_book(build_epub(files), id_factory=lambda position: "a")
    assert [c.id for c in result.chapters] == ["a", "a-2"]


def test_concurrent_parses_are_independent(book_bytes):
    async def run():
        short = ExtractionSettings(preview_length=3)
        return await asyncio.gather(
            asyncio.to_thread(parse_book, book_bytes),
            asyncio.to_thread(parse_book, book_bytes, short),
        )

    default, short = asyncio.run(run())
    assert default.chapters[0].content_preview == "It was a dark night."
    assert short.chapters[0].content_preview == "It ..."


def test_corrupt_member_is_skipped():
    files = {
        "OEBPS/a.xhtml": chapter_xhtml("<p>Alpha</p>"),
        "OEBPS/b.xhtml": chapter_xhtml("<p>" + "Beta " * 50 + "</p>"),
        OPF_PATH: package_opf([("a", "a.xhtml"), ("b", "b.xhtml")], ["a", "b"]),
    }
    data = bytearray(build_epub(files))
    with zipfile.ZipFile(io.BytesIO(bytes(data))) as z:
        info = z.getinfo("OEBPS/b.xhtml")
    # Flip a byte inside the compressed payload of b.xhtml
    payload_start = info.header_offset + 30 + len(info.filename.encode()) + len(info.extra)
    data[payload_start + 5] ^= 0xFF

    result = parse_book(bytes(data))
    assert [c.id for c in result.chapters] == ["a"]
    assert "b.xhtml" in result.warnings[0]
