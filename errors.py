"""errors.py — Error taxonomy and non-fatal run warnings for rrarchive."""

from dataclasses import dataclass

REPORT_URL = "https://github.com/Raine-gay/royal_road_archiver"


class ArchiverError(Exception):
    """
    Base class for every fatal error. The CLI exits 1 on any of these.
    `warnings` carries the non-fatal warnings gathered before the failure.
    """

    def __init__(self, *args):
        super().__init__(*args)
        self.warnings: list[RunWarning] = []


# Network

class NetworkError(ArchiverError):
    def __init__(self, address: str, error: Exception):
        self.address = address
        self.error = error
        super().__init__(f"Unable to fetch {address}: {error}")


class HttpStatusError(ArchiverError):
    def __init__(self, address: str, status: int):
        self.address = address
        self.status = status
        super().__init__(f"Server answered {status} for {address}")


class ResponseConsumedError(RuntimeError):
    """A response body was read twice. Always a bug in the caller."""

    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Response body for {address} has already been consumed")


# Source markup contract

class MissingFieldError(ArchiverError):
    def __init__(self, field: str, address: str):
        self.field = field
        self.address = address
        super().__init__(
            f"Unable to find {field} on {address}. "
            f"Royal Road have probably changed their front-end code, please report this at {REPORT_URL}"
        )


class ParseError(ArchiverError):
    def __init__(self, address: str, detail: str):
        self.address = address
        self.detail = detail
        super().__init__(f"Unable to parse chapter data on {address}: {detail}")


class ContentIsolationError(ArchiverError):
    def __init__(self, address: str):
        self.address = address
        super().__init__(f"Unable to isolate chapter content on {address}")


# Local environment

class OutputExistsError(ArchiverError, FileExistsError):
    def __init__(self, path):
        self.path = path
        super().__init__(f"Refusing to overwrite existing file: {path}")


class FileWriteError(ArchiverError):
    def __init__(self, path, error: OSError):
        self.path = path
        self.error = error
        super().__init__(f"Unable to write {path}: {error}")


# Generation

class UnsupportedModeError(ArchiverError):
    def __init__(self, mode: str):
        self.mode = mode
        super().__init__(f"The '{mode}' format is not implemented yet")


class NormalizationError(ArchiverError):
    pass


class RenderError(ArchiverError):
    pass


@dataclass(frozen=True)
class RunWarning:
    """A non-fatal condition, collected and reported once at the end of a run."""
    kind: str       # "unparsable_image_url", "missing_content_type", "scratch_cleanup"
    message: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}\n    {self.detail}"
        return self.message
