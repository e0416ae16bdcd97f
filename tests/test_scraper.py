import pytest

from conftest import BOOK_URL, COVER_URL, IMAGE_URL, FakeFetcher, make_chapter_html
from errors import HttpStatusError
from extractors.base import parse_fragment
from extractors.images import canonical_markup
from scraper import scrape_book


def test_scrape_fetches_index_then_chapters_in_order(fetcher):
    book, warnings = scrape_book(fetcher, BOOK_URL, show_progress=False)
    assert fetcher.requested == [
        BOOK_URL,
        "https://www.royalroad.com/fiction/12345/the-test-story/chapter/1/prologue",
        "https://www.royalroad.com/fiction/12345/the-test-story/chapter/3/rain",
        "https://www.royalroad.com/fiction/12345/the-test-story/chapter/2/dust",
    ]
    assert [c.name for c in book.chapters] == ["Prologue", "Chapter 2: Rain", "Chapter 1: Dust"]
    assert warnings == []


def test_scraped_book_carries_metadata(fetcher):
    book, _ = scrape_book(fetcher, BOOK_URL, show_progress=False)
    assert book.url == BOOK_URL
    assert book.title == "The Test Story"
    assert book.author == "A. Writer"
    assert book.cover_image_url == COVER_URL
    assert book.safe_title == "The Test Story"


def test_image_variants_are_merged_across_chapters(fetcher):
    book, _ = scrape_book(fetcher, BOOK_URL, show_progress=False)
    assert list(book.images) == [IMAGE_URL]
    tags = book.images[IMAGE_URL]
    parsed = [parse_fragment(tag).img for tag in tags]
    assert {(img.get("alt"), tuple(img.get("class", ()))) for img in parsed} == {
        ("map", ()),
        (None, ("wide",)),
    }
    assert all(img["src"] == IMAGE_URL for img in parsed)


def test_recorded_tags_occur_in_canonical_chapter_markup(fetcher):
    book, _ = scrape_book(fetcher, BOOK_URL, show_progress=False)
    markups = [canonical_markup(chapter.content) for chapter in book.chapters]
    for tag in book.images[IMAGE_URL]:
        assert any(tag in markup for markup in markups)


def test_chapter_content_excludes_page_scaffold(fetcher):
    book, _ = scrape_book(fetcher, BOOK_URL, show_progress=False)
    for chapter in book.chapters:
        assert "chapter-nav" not in chapter.content
        assert "<script" not in chapter.content

PROLOGUE_URL = "https://www.royalroad.com/fiction/12345/the-test-story/chapter/1/prologue"
RAIN_URL = "https://www.royalroad.com/fiction/12345/the-test-story/chapter/3/rain"


class FailingFetcher(FakeFetcher):
    """Answers one address with an HTTP error."""

    def __init__(self, pages, failing_url):
        super().__init__(pages)
        self.failing_url = failing_url

    def fetch(self, url):
        if url == self.failing_url:
            self.requested.append(url)
            raise HttpStatusError(url, 503)
        return super().fetch(url)


def test_failed_chapter_carries_earlier_warnings(site_pages):
    site_pages[PROLOGUE_URL] = (make_chapter_html('<img src="/local.png">').encode("utf-8"), "text/html")
    fetcher = FailingFetcher(site_pages, RAIN_URL)
    with pytest.raises(HttpStatusError) as exc_info:
        scrape_book(fetcher, BOOK_URL, show_progress=False)
    assert [w.kind for w in exc_info.value.warnings] == ["unparsable_image_url"]
