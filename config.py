"""
config.py — Runtime configuration for rrarchive.

Values come from environment variables (a .env file is loaded by the CLI)
with defaults that work against the live site.
"""

import os
from pathlib import Path

SITE_HOST = "www.royalroad.com"

DEFAULT_SITE_ORIGIN = f"https://{SITE_HOST}"
DEFAULT_USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64) rrarchive/0.3 (personal archiving)"
DEFAULT_TIMEOUT = "30"


class Config:
    """Archiver configuration from environment variables."""

    SITE_ORIGIN = os.getenv("RRARCHIVE_SITE_ORIGIN", DEFAULT_SITE_ORIGIN)

    USER_AGENT = os.getenv("RRARCHIVE_USER_AGENT", DEFAULT_USER_AGENT)
    REQUEST_TIMEOUT = float(os.getenv("RRARCHIVE_TIMEOUT", DEFAULT_TIMEOUT))

    # Explicit path to the html2xhtml executable; falls back to PATH lookup.
    HTML2XHTML_PATH = os.getenv("HTML2XHTML_PATH", "").strip() or None

    @classmethod
    def reload(cls) -> None:
        """Re-read the environment, e.g. after load_dotenv(). Unset variables revert to defaults."""
        cls.SITE_ORIGIN = os.getenv("RRARCHIVE_SITE_ORIGIN", DEFAULT_SITE_ORIGIN)
        cls.USER_AGENT = os.getenv("RRARCHIVE_USER_AGENT", DEFAULT_USER_AGENT)
        cls.REQUEST_TIMEOUT = float(os.getenv("RRARCHIVE_TIMEOUT", DEFAULT_TIMEOUT))
        cls.HTML2XHTML_PATH = os.getenv("HTML2XHTML_PATH", "").strip() or None

    @classmethod
    def html2xhtml_path(cls) -> Path | None:
        return Path(cls.HTML2XHTML_PATH).expanduser() if cls.HTML2XHTML_PATH else None
