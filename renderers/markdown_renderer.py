"""renderers/markdown_renderer.py — Write a Book as a single Markdown file."""

from pathlib import Path

from markdownify import ATX, MarkdownConverter

from errors import OutputExistsError
from extractors import strip_images
from models import Book
from renderers.base import RenderResult, archive_timestamp, output_path_for, write_new_file


class ChapterConverter(MarkdownConverter):
    """Markdown conversion that keeps <img> tags as raw HTML."""

    def convert_img(self, el, text, *args, **kwargs):
        return str(el)


def chapter_to_markdown(markup: str) -> str:
    return ChapterConverter(heading_style=ATX, bullets="-").convert(markup).strip()


def build_markdown(book: Book, chapter_titles: bool = True, image_tags: bool = True,
                   timestamp: str | None = None) -> str:
    lines = [
        f"# {book.title}",
        f"### by {book.author}",
        "",
        f"Archived on {timestamp or archive_timestamp()} from <{book.url}>",
        "",
        "---",
        "",
    ]
    for chapter in book.chapters:
        if chapter_titles:
            lines += [f"## {chapter.name}", ""]
        content = chapter.content if image_tags else strip_images(chapter.content)
        lines += [chapter_to_markdown(content), "", ""]
    return "\n".join(lines).rstrip() + "\n"


def render_markdown(
    book: Book,
    output_dir: Path,
    chapter_titles: bool = True,
    image_tags: bool = True,
) -> RenderResult:
    """Write <output_dir>/<safe title>.md. Never overwrites an existing file."""
    output_path = output_path_for(book, output_dir, "md")
    if output_path.exists():
        raise OutputExistsError(output_path)

    text = build_markdown(book, chapter_titles=chapter_titles, image_tags=image_tags)
    write_new_file(output_path, text.encode("utf-8"))
    return RenderResult(output_path=output_path)
