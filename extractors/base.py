"""extractors/base.py — Predicate search over parsed HTML."""

from collections.abc import Callable, Iterator

from bs4 import BeautifulSoup, NavigableString, Tag

HTML_PARSER = "lxml"

Predicate = Callable[[Tag], bool]


def parse_document(markup: str) -> BeautifulSoup:
    return BeautifulSoup(markup, HTML_PARSER)


def parse_fragment(markup: str) -> BeautifulSoup:
    """Parse a content fragment without adding <html>/<body> scaffolding."""
    return BeautifulSoup(markup, "html.parser")


def find_all(root: Tag, predicate: Predicate, name: str | None = None) -> Iterator[Tag]:
    """Yield every element under root (document order) for which predicate holds."""
    for element in root.find_all(name) if name else root.find_all(True):
        if predicate(element):
            yield element


def find_first(root: Tag, predicate: Predicate, name: str | None = None) -> Tag | None:
    return next(find_all(root, predicate, name), None)


def has_attr_value(attr: str, value: str) -> Predicate:
    """Match elements whose attribute equals value exactly."""
    def predicate(element: Tag) -> bool:
        actual = element.get(attr)
        if isinstance(actual, list):
            actual = " ".join(actual)
        return actual == value
    return predicate


def own_text(element: Tag) -> str:
    """Concatenate the element's direct string children (works for <script> bodies)."""
    return "".join(str(child) for child in element.contents if isinstance(child, NavigableString))


def text_contains(marker: str) -> Predicate:
    def predicate(element: Tag) -> bool:
        return marker in own_text(element)
    return predicate
