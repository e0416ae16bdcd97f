"""models.py — Shared data types for rrarchive."""

from dataclasses import dataclass, field

from bs4 import BeautifulSoup

# Characters that are illegal in filenames on unix and windows.
RESERVED_FILENAME_CHARS = ("/", "\\", "<", ">", ":", '"', "|", "?", "*")
FILENAME_SUBSTITUTE = " "

# Image source address -> every distinct <img> tag text seen for it.
ImageMap = dict[str, set[str]]


def sanitize_filename(text: str) -> str:
    """Replace characters that cannot appear in a filename."""
    for char in RESERVED_FILENAME_CHARS:
        text = text.replace(char, FILENAME_SUBSTITUTE)
    return text


@dataclass(frozen=True)
class ChapterRef:
    name: str
    url: str


@dataclass(frozen=True)
class Chapter:
    url: str
    name: str
    content: str     # Isolated narrative markup, no page scaffold


@dataclass(frozen=True)
class Book:
    url: str
    title: str
    author: str
    cover_image_url: str
    chapters: tuple[Chapter, ...]
    images: ImageMap = field(default_factory=dict)
    safe_title: str = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "chapters", tuple(self.chapters))
        object.__setattr__(self, "safe_title", sanitize_filename(self.title))

    @property
    def image_count(self) -> int:
        return len(self.images)

    def count_paragraphs(self) -> int:
        total = 0
        for chapter in self.chapters:
            soup = BeautifulSoup(chapter.content, "lxml")
            total += len(soup.find_all("p"))
        return total
