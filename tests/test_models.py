import pytest

from models import RESERVED_FILENAME_CHARS, Book, Chapter, sanitize_filename


def test_sanitize_is_identity_without_reserved_chars():
    title = "Mother of Learning - Arc 1 (Revised)"
    assert sanitize_filename(title) == title


@pytest.mark.parametrize("char", RESERVED_FILENAME_CHARS)
def test_sanitize_replaces_each_reserved_char(char):
    assert sanitize_filename(f"a{char}b") == "a b"


def test_sanitize_covers_all_nine_reserved_chars():
    assert len(RESERVED_FILENAME_CHARS) == 9
    assert sanitize_filename('/\\<>:"|?*') == " " * 9


def test_sanitize_is_idempotent():
    title = 'What? A "Story": Part 1/2'
    once = sanitize_filename(title)
    assert sanitize_filename(once) == once


def test_book_computes_safe_title_once():
    book = Book(
        url="https://www.royalroad.com/fiction/1/x",
        title="Re:Start?",
        author="Someone",
        cover_image_url="https://example.com/c.png",
        chapters=[],
    )
    assert book.safe_title == "Re Start "
    assert book.chapters == ()


def test_book_is_immutable():
    book = Book(url="u", title="t", author="a", cover_image_url="c", chapters=())
    with pytest.raises(AttributeError):
        book.title = "other"


def test_count_paragraphs_spans_chapters():
    chapters = (
        Chapter(url="u1", name="One", content="<p>a</p><p>b</p>"),
        Chapter(url="u2", name="Two", content="<div><p>c</p></div>"),
    )
    book = Book(url="u", title="t", author="a", cover_image_url="c", chapters=chapters)
    assert book.count_paragraphs() == 3
