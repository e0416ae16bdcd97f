"""
Shared fixtures: canned Royal Road pages and offline stand-ins for the
network and the html2xhtml normalizer.
"""

import json

import pytest
import requests

from http_client import FetchedResponse

BOOK_URL = "https://www.royalroad.com/fiction/12345/the-test-story"
COVER_URL = "https://www.royalroadcdn.com/public/covers-large/12345.jpg"
IMAGE_URL = "https://i.imgur.com/abc123.png"

CHAPTERS = [
    {"id": 1, "title": "Prologue", "url": "/fiction/12345/the-test-story/chapter/1/prologue"},
    {"id": 3, "title": "Chapter 2: Rain", "url": "/fiction/12345/the-test-story/chapter/3/rain"},
    {"id": 2, "title": "Chapter 1: Dust", "url": "/fiction/12345/the-test-story/chapter/2/dust"},
]


def make_index_html(title="The Test Story", author="A. Writer", cover=COVER_URL,
                    chapters=CHAPTERS, chapter_script=True) -> str:
    metas = []
    if title is not None:
        metas.append(f'<meta name="twitter:title" content="{title}">')
    if author is not None:
        metas.append(f'<meta property="books:author" content="{author}">')
    if cover is not None:
        metas.append(f'<meta property="og:image" content="{cover}">')
    script = ""
    if chapter_script:
        script = (
            "<script>\n"
            "    window.fictionId = 12345;\n"
            f"    window.chapters = {json.dumps(chapters)};\n"
            "    window.volumes = [];\n"
            "</script>"
        )
    return f"""<!DOCTYPE html>
<html><head>
<meta charset="utf-8">
{''.join(metas)}
<script>window.analytics = {{}};</script>
{script}
</head><body><div class="fic-header"><h1>{title}</h1></div></body></html>"""


def make_chapter_html(body: str) -> str:
    return f"""<!DOCTYPE html>
<html><head><title>Chapter</title></head><body>
<div class="chapter-nav"><a href="/prev">Previous</a></div>
<div class="chapter-inner chapter-content">{body}<script>window.ads = 1;</script></div>
<div class="author-note">Thanks for reading</div>
</body></html>"""


def make_response(url: str, body: bytes, status: int = 200, content_type: str | None = "text/html") -> FetchedResponse:
    response = requests.Response()
    response.status_code = status
    response._content = body
    response.encoding = "utf-8"
    response.url = url
    if content_type is not None:
        response.headers["Content-Type"] = content_type
    return FetchedResponse(url, response)


class FakeFetcher:
    """Serves canned bodies by URL and records every request in order."""

    def __init__(self, pages: dict[str, tuple[bytes, str | None]]):
        self.pages = pages
        self.requested = []

    def fetch(self, url: str) -> FetchedResponse:
        self.requested.append(url)
        if url not in self.pages:
            raise AssertionError(f"unexpected fetch: {url}")
        body, content_type = self.pages[url]
        return make_response(url, body, content_type=content_type)


class FakeNormalizer:
    """Wraps markup in a minimal XHTML document, like html2xhtml would."""

    def __init__(self):
        self.calls = []
        self.closed = False

    def normalize(self, markup: str) -> str:
        self.calls.append(markup)
        return (
            '<html xmlns="http://www.w3.org/1999/xhtml"><head><title></title></head>'
            f"<body>{markup}</body></html>"
        )

    def close(self):
        self.closed = True
        return []


@pytest.fixture
def chapter_bodies():
    return {
        "/fiction/12345/the-test-story/chapter/1/prologue":
            f'<p>It began.</p><p><img src="{IMAGE_URL}" alt="map"></p>',
        "/fiction/12345/the-test-story/chapter/3/rain":
            f'<p>Rain fell.</p><img class="wide" src="{IMAGE_URL}">',
        "/fiction/12345/the-test-story/chapter/2/dust":
            "<p>Dust rose.</p><p>&nbsp;</p><p>Then quiet.</p>",
    }


@pytest.fixture
def site_pages(chapter_bodies):
    pages = {BOOK_URL: (make_index_html().encode("utf-8"), "text/html; charset=utf-8")}
    for path, body in chapter_bodies.items():
        pages["https://www.royalroad.com" + path] = (make_chapter_html(body).encode("utf-8"), "text/html")
    pages[COVER_URL] = (b"\xff\xd8\xff\xe0fake-jpeg", "image/jpeg")
    pages[IMAGE_URL] = (b"\x89PNGfake-png", "image/png")
    return pages


@pytest.fixture
def fetcher(site_pages):
    return FakeFetcher(site_pages)
