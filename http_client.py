"""http_client.py — Fetch pages and images from the source site."""

from urllib.parse import urljoin

import requests

from config import Config
from errors import HttpStatusError, NetworkError, ResponseConsumedError, RunWarning

MIME_TO_EXTENSION = {
    "image/png": "png",
    "image/webp": "webp",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
}


def qualify_url(url: str, origin: str | None = None) -> str:
    """Turn a site-relative address ('/fiction/...') into an absolute one."""
    return urljoin((origin or Config.SITE_ORIGIN).rstrip("/") + "/", url)


class FetchedResponse:
    """An HTTP response whose body may be read exactly once."""

    def __init__(self, url: str, response: requests.Response):
        self.url = url
        self._response = response
        self._consumed = False

    @property
    def headers(self):
        return self._response.headers

    def _consume(self) -> None:
        if self._consumed:
            raise ResponseConsumedError(self.url)
        self._consumed = True

    def text(self) -> str:
        self._consume()
        return self._response.text

    def content(self) -> bytes:
        self._consume()
        return self._response.content

    def content_type_and_extension(self) -> tuple[str, str, list[RunWarning]]:
        """
        Return (mime_type, file_extension, warnings) from the Content-Type header.
        Unknown types give an empty extension; a missing header also adds a warning.
        """
        raw = self.headers.get("content-type")
        if not raw:
            warning = RunWarning(
                kind="missing_content_type",
                message="Unable to find or parse the content-type header",
                detail=self.url,
            )
            return "", "", [warning]
        content_type = raw.split(";", 1)[0].strip().lower()
        return content_type, MIME_TO_EXTENSION.get(content_type, ""), []


class Fetcher:
    """Sequential, retry-free HTTP access on a shared session."""

    def __init__(self, session: requests.Session | None = None, timeout: float | None = None):
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": Config.USER_AGENT})
        self.timeout = timeout if timeout is not None else Config.REQUEST_TIMEOUT

    def fetch(self, url: str) -> FetchedResponse:
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(url, e) from e
        if not response.ok:
            raise HttpStatusError(url, response.status_code)
        return FetchedResponse(url, response)

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
