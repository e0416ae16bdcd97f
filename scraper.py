"""scraper.py — Download a book's index and chapters and assemble a Book."""

from tqdm import tqdm

from errors import ArchiverError, RunWarning
from extractors import collect_images, extract_index, isolate_chapter_content, merge
from http_client import Fetcher
from models import Book, Chapter, ChapterRef, ImageMap


def fetch_chapter(fetcher: Fetcher, ref: ChapterRef) -> Chapter:
    markup = fetcher.fetch(ref.url).text()
    return Chapter(url=ref.url, name=ref.name, content=isolate_chapter_content(markup, ref.url))


def scrape_book(
    fetcher: Fetcher,
    book_url: str,
    show_progress: bool = True,
) -> tuple[Book, list[RunWarning]]:
    """
    Fetch the index page, then every chapter in index order, one at a time.
    Returns the finished Book and the warnings raised while reading it.
    A failed chapter fetch carries the warnings gathered so far on the error.
    """
    index = extract_index(fetcher.fetch(book_url).text(), book_url)

    chapters = []
    images: ImageMap = {}
    warnings: list[RunWarning] = []

    with tqdm(
        total=len(index.chapters),
        desc="  Chapters",
        unit="chapter",
        disable=not show_progress,
    ) as pbar:
        for ref in index.chapters:
            try:
                chapter = fetch_chapter(fetcher, ref)
            except ArchiverError as e:
                e.warnings.extend(warnings)
                raise
            chapter_images, chapter_warnings = collect_images(chapter.content)
            images = merge(images, chapter_images)
            warnings.extend(chapter_warnings)
            chapters.append(chapter)
            pbar.update(1)

    book = Book(
        url=book_url,
        title=index.title,
        author=index.author,
        cover_image_url=index.cover_image_url,
        chapters=tuple(chapters),
        images=images,
    )
    return book, warnings
