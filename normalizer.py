"""normalizer.py — Turn chapter HTML into well-formed XHTML with html2xhtml."""

import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Protocol

from bs4 import BeautifulSoup

from config import Config
from errors import NormalizationError, RunWarning

HTML2XHTML = "html2xhtml"


class Normalizer(Protocol):
    def normalize(self, markup: str) -> str: ...


def find_html2xhtml() -> Path | None:
    """Return the configured html2xhtml executable, or the one on PATH."""
    configured = Config.html2xhtml_path()
    if configured is not None:
        return configured if configured.exists() else None
    found = shutil.which(HTML2XHTML)
    return Path(found) if found else None


class Html2XhtmlNormalizer:
    """
    Runs html2xhtml once per chapter, markup on stdin and XHTML on stdout.
    Each instance owns a scratch directory used as the tool's working directory;
    use it as a context manager so the directory is removed on every exit path.
    """

    def __init__(self, executable: Path | None = None):
        self.executable = executable or find_html2xhtml()
        if self.executable is None:
            raise NormalizationError(
                f"{HTML2XHTML} not found. Install it or set HTML2XHTML_PATH in .env"
            )
        self._scratch = tempfile.TemporaryDirectory(prefix="rrarchive-")
        self.scratch_dir = Path(self._scratch.name)

    def normalize(self, markup: str) -> str:
        # Non-breaking spaces crash some e-readers.
        markup = markup.replace("&nbsp;", " ").replace("\u00a0", " ")
        cmd = [str(self.executable)]
        try:
            result = subprocess.run(
                cmd,
                input=markup.encode("utf-8"),
                capture_output=True,
                cwd=self.scratch_dir,
            )
        except OSError as e:
            raise NormalizationError(f"Unable to start {HTML2XHTML}: {e}") from e
        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            raise NormalizationError(
                f"{HTML2XHTML} exited with {result.returncode}\n"
                f"stderr: {stderr[-2000:]}"
            )

        xhtml = result.stdout.decode("utf-8", errors="replace")
        if BeautifulSoup(xhtml, "lxml-xml").find("body") is None:
            raise NormalizationError(f"{HTML2XHTML} produced output without a <body>")
        return xhtml

    def close(self) -> list[RunWarning]:
        """Remove the scratch directory. Failure is reported, never raised."""
        try:
            self._scratch.cleanup()
        except OSError as e:
            return [RunWarning(
                kind="scratch_cleanup",
                message=f"Unable to remove scratch directory {self.scratch_dir}",
                detail=str(e),
            )]
        return []

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()
