"""renderers/epub_renderer.py — Assemble a Book into an EPUB package with ebooklib."""

import html
import io
from collections.abc import Callable
from pathlib import Path

from ebooklib import epub
from tqdm import tqdm

from errors import ArchiverError, OutputExistsError, RenderError, RunWarning
from extractors import canonical_markup, replace_tag_source, strip_images
from http_client import Fetcher
from models import Book
from normalizer import Html2XhtmlNormalizer, Normalizer
from renderers.base import RenderResult, archive_timestamp, output_path_for, write_new_file

LANGUAGE = "en"

STYLESHEET = """
body { font-family: serif; margin: 0.5em; line-height: 1.5; }
p { margin-top: 0; margin-bottom: 0.6em; }
img { max-width: 100%; height: auto; }
.cover { text-align: center; }
.cover img { max-height: 60vh; }
.archive-note { font-size: 0.85em; color: #555; }
"""

COVER_PAGE = """<html xmlns="http://www.w3.org/1999/xhtml">
<head><title>{title}</title></head>
<body>
<div class="cover">
<h1>{title}</h1>
<h2>by {author}</h2>
<img src="{cover_file}" alt="Cover of {title}"/>
<p class="archive-note">Archived on {timestamp}</p>
<p class="archive-note">Source: <a href="{url}">{url}</a></p>
</div>
</body>
</html>
"""


def _attach_metadata(package: epub.EpubBook, book: Book) -> None:
    try:
        package.set_identifier(book.url)
        package.set_title(book.title)
        package.set_language(LANGUAGE)
        package.add_author(book.author)
    except (TypeError, ValueError) as e:
        raise RenderError(f"EPUB builder rejected book metadata: {e}") from e


def _attach_cover(package: epub.EpubBook, book: Book, fetcher: Fetcher,
                  stylesheet: epub.EpubItem, warnings: list[RunWarning]) -> epub.EpubHtml:
    response = fetcher.fetch(book.cover_image_url)
    content_type, extension, type_warnings = response.content_type_and_extension()
    warnings.extend(type_warnings)
    cover_file = f"cover.{extension}"

    package.add_item(epub.EpubImage(
        uid="cover-image",
        file_name=cover_file,
        media_type=content_type,
        content=response.content(),
    ))
    package.add_metadata(None, "meta", "", {"name": "cover", "content": "cover-image"})

    cover_page = epub.EpubHtml(title="Cover", file_name="cover.xhtml", lang=LANGUAGE)
    cover_page.content = COVER_PAGE.format(
        title=html.escape(book.title),
        author=html.escape(book.author),
        cover_file=cover_file,
        timestamp=archive_timestamp(),
        url=html.escape(book.url),
    )
    cover_page.add_item(stylesheet)
    package.add_item(cover_page)
    return cover_page


def _attach_images(package: epub.EpubBook, book: Book, fetcher: Fetcher,
                   warnings: list[RunWarning], show_progress: bool) -> dict[str, str]:
    """
    Download each distinct image once, in the map's iteration order, and
    register it as image_<n>.<ext>.
    Returns the old tag text -> rewritten tag text substitutions for every variant.
    """
    substitutions = {}
    with tqdm(total=book.image_count, desc="  Images", unit="image", disable=not show_progress) as pbar:
        for n, url in enumerate(book.images):
            response = fetcher.fetch(url)
            content_type, extension, type_warnings = response.content_type_and_extension()
            warnings.extend(type_warnings)

            file_name = f"images/image_{n}.{extension}"
            package.add_item(epub.EpubImage(
                uid=f"image_{n}",
                file_name=file_name,
                media_type=content_type,
                content=response.content(),
            ))
            for tag_text in book.images[url]:
                substitutions[tag_text] = replace_tag_source(tag_text, file_name)
            pbar.update(1)
    return substitutions


def _attach_chapters(package: epub.EpubBook, book: Book, normalizer: Normalizer,
                     substitutions: dict[str, str] | None,
                     stylesheet: epub.EpubItem) -> list[epub.EpubHtml]:
    sections = []
    for n, chapter in enumerate(book.chapters):
        if substitutions is None:
            markup = strip_images(chapter.content)
        else:
            markup = canonical_markup(chapter.content)
            for old, new in substitutions.items():
                markup = markup.replace(old, new)
        xhtml = normalizer.normalize(markup)

        section = epub.EpubHtml(title=chapter.name, file_name=f"chapter_{n}.xhtml", lang=LANGUAGE)
        section.content = xhtml.encode("utf-8")
        section.add_item(stylesheet)
        package.add_item(section)
        sections.append(section)
    return sections


def build_epub(
    book: Book,
    fetcher: Fetcher,
    normalizer: Normalizer,
    warnings: list[RunWarning],
    include_images: bool = True,
    show_progress: bool = True,
) -> bytes:
    """Build the whole package in memory. Non-fatal warnings are appended to `warnings`."""
    package = epub.EpubBook()
    _attach_metadata(package, book)

    stylesheet = epub.EpubItem(
        uid="style_default", file_name="style/default.css", media_type="text/css", content=STYLESHEET
    )
    package.add_item(stylesheet)

    cover_page = _attach_cover(package, book, fetcher, stylesheet, warnings)

    substitutions = None
    if include_images:
        substitutions = _attach_images(package, book, fetcher, warnings, show_progress)

    sections = _attach_chapters(package, book, normalizer, substitutions, stylesheet)

    package.toc = tuple(sections)
    package.add_item(epub.EpubNcx())
    package.add_item(epub.EpubNav())
    package.spine = [cover_page, "nav"] + sections

    buffer = io.BytesIO()
    try:
        epub.write_epub(buffer, package, {})
    except Exception as e:
        raise RenderError(f"Unable to assemble EPUB for '{book.title}': {e}") from e
    return buffer.getvalue()


def _release(normalizer: Normalizer) -> list[RunWarning]:
    close = getattr(normalizer, "close", None)
    if close is None:
        return []
    return close() or []


def render_epub(
    book: Book,
    output_dir: Path,
    fetcher: Fetcher,
    include_images: bool = True,
    normalizer_factory: Callable[[], Normalizer] = Html2XhtmlNormalizer,
    show_progress: bool = True,
) -> RenderResult:
    """
    Write <output_dir>/<safe title>.epub. Never overwrites an existing file.
    On failure the warnings gathered so far travel on the raised error.
    """
    output_path = output_path_for(book, output_dir, "epub")
    if output_path.exists():
        raise OutputExistsError(output_path)

    warnings: list[RunWarning] = []
    normalizer = normalizer_factory()
    try:
        data = build_epub(
            book, fetcher, normalizer, warnings,
            include_images=include_images,
            show_progress=show_progress,
        )
        write_new_file(output_path, data)
    except ArchiverError as e:
        warnings.extend(_release(normalizer))
        e.warnings.extend(warnings)
        raise
    except BaseException:
        _release(normalizer)
        raise

    warnings.extend(_release(normalizer))
    return RenderResult(output_path=output_path, warnings=warnings)
