"""extractors/chapter_page.py — Isolate the narrative content of a chapter page."""

from errors import ContentIsolationError
from extractors.base import find_first, has_attr_value, parse_document

CONTENT_WRAPPER_CLASS = "chapter-inner chapter-content"
STRIPPED_TAGS = ["script", "noscript", "style"]


def isolate_chapter_content(markup: str, address: str) -> str:
    """
    Return the inner markup of the chapter content wrapper.
    The first wrapper in document order wins when the page nests duplicates.
    """
    soup = parse_document(markup)
    wrapper = find_first(soup, has_attr_value("class", CONTENT_WRAPPER_CLASS), name="div")
    if wrapper is None:
        raise ContentIsolationError(address)

    for tag in wrapper.find_all(STRIPPED_TAGS):
        tag.decompose()
    return wrapper.decode_contents().strip()
