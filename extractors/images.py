"""extractors/images.py — Track <img> tags across a book's chapters."""

import re
from urllib.parse import urlsplit

from errors import RunWarning
from extractors.base import parse_fragment
from models import ImageMap

TAG_NAME_PATTERN = re.compile(r"<\s*[\w:-]+")
ATTR_PATTERN = re.compile(r"""\s([\w:-]+)\s*=\s*("[^"]*"|'[^']*'|[^\s>]+)""")


def _parse_absolute_url(src: str) -> str:
    parts = urlsplit(src.strip())
    if not parts.scheme or not parts.netloc:
        raise ValueError("relative URL without a base")
    return parts.geturl()


def canonical_markup(fragment: str) -> str:
    """
    The fragment as BeautifulSoup serializes it. Tag texts recorded by
    collect_images occur verbatim in this form of the fragment.
    """
    return str(parse_fragment(fragment))


def collect_images(fragment: str) -> tuple[ImageMap, list[RunWarning]]:
    """
    Map every absolute image address in the fragment to the tag texts using it.
    Tags whose src cannot be parsed are skipped with a warning.
    """
    images: ImageMap = {}
    warnings = []
    for img in parse_fragment(fragment).find_all("img"):
        src = img.get("src")
        if src is None:
            continue
        tag_text = str(img)
        try:
            url = _parse_absolute_url(src)
        except ValueError as e:
            warnings.append(RunWarning(
                kind="unparsable_image_url",
                message=f"Unable to parse url on image tag: {tag_text}",
                detail=str(e),
            ))
            continue
        images.setdefault(url, set()).add(tag_text)
    return images, warnings


def merge(a: ImageMap, b: ImageMap) -> ImageMap:
    """Union two image maps key by key. Neither input is modified."""
    merged = {url: set(tags) for url, tags in a.items()}
    for url, tags in b.items():
        merged.setdefault(url, set()).update(tags)
    return merged


def strip_images(fragment: str) -> str:
    """Remove every <img> tag from the fragment's markup."""
    soup = parse_fragment(fragment)
    for img in soup.find_all("img"):
        img.decompose()
    return str(soup)


def replace_tag_source(tag_text: str, new_src: str) -> str:
    """Point an <img> tag at new_src, leaving the rest of its text untouched."""
    m = TAG_NAME_PATTERN.match(tag_text)
    if not m:
        return tag_text
    # Attributes are consumed whole, so src= inside another value is never seen
    for attr in ATTR_PATTERN.finditer(tag_text, m.end()):
        if attr.group(1).lower() != "src":
            continue
        value = attr.group(2)
        start, end = attr.span(2)
        if value[:1] in ("'", '"'):
            start, end = start + 1, end - 1
        return tag_text[:start] + new_src + tag_text[end:]
    return tag_text
