"""extractors/index_page.py — Pull book metadata and the chapter list from an index page."""

import json
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

from errors import MissingFieldError, ParseError
from extractors.base import find_first, has_attr_value, own_text, parse_document, text_contains
from http_client import qualify_url
from models import ChapterRef

CHAPTER_LIST_MARKER = "window.chapters"
CHAPTER_LIST_PATTERN = re.compile(r"window\.chapters\s*=\s*(\[.*?\]);", re.DOTALL)

# field name -> (meta attribute, attribute value)
META_FIELDS = {
    "title": ("name", "twitter:title"),
    "author": ("property", "books:author"),
    "cover_image_url": ("property", "og:image"),
}


@dataclass(frozen=True)
class IndexPage:
    title: str
    author: str
    cover_image_url: str
    chapters: list[ChapterRef]


def _meta_content(soup: BeautifulSoup, field: str, address: str) -> str:
    attr, value = META_FIELDS[field]
    element = find_first(soup, has_attr_value(attr, value), name="meta")
    if element is None or element.get("content") is None:
        raise MissingFieldError(field, address)
    return element["content"].strip()


def extract_title(soup: BeautifulSoup, address: str) -> str:
    return _meta_content(soup, "title", address)


def extract_author(soup: BeautifulSoup, address: str) -> str:
    return _meta_content(soup, "author", address)


def extract_cover_image_url(soup: BeautifulSoup, address: str) -> str:
    return qualify_url(_meta_content(soup, "cover_image_url", address))


def extract_chapter_refs(soup: BeautifulSoup, address: str) -> list[ChapterRef]:
    """
    Read the chapter list embedded in the page as `window.chapters = [...];`.
    Each entry is a {"title": ..., "url": ...} object with a site-relative url.
    The returned order is the array's order.
    """
    script = find_first(soup, text_contains(CHAPTER_LIST_MARKER), name="script")
    if script is None:
        raise MissingFieldError("chapter_list", address)

    m = CHAPTER_LIST_PATTERN.search(own_text(script))
    if not m:
        raise ParseError(address, f"no JSON array follows '{CHAPTER_LIST_MARKER}'")

    try:
        entries = json.loads(m.group(1))
    except json.JSONDecodeError as e:
        raise ParseError(address, f"chapter list is not valid JSON: {e}") from e
    if not isinstance(entries, list):
        raise ParseError(address, "chapter list is not a JSON array")

    refs = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise ParseError(address, f"chapter entry {i} is not an object")
        name, url = entry.get("title"), entry.get("url")
        if not isinstance(name, str) or not isinstance(url, str):
            raise ParseError(address, f"chapter entry {i} lacks a string 'title' or 'url'")
        refs.append(ChapterRef(name=name, url=qualify_url(url)))
    return refs


def extract_index(markup: str, address: str) -> IndexPage:
    """Parse a book's index page. Raises before returning if any field is missing."""
    soup = parse_document(markup)
    return IndexPage(
        title=extract_title(soup, address),
        author=extract_author(soup, address),
        cover_image_url=extract_cover_image_url(soup, address),
        chapters=extract_chapter_refs(soup, address),
    )
