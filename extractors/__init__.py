"""extractors/ — Read book data out of the source site's HTML."""

from extractors.chapter_page import isolate_chapter_content
from extractors.images import canonical_markup, collect_images, merge, replace_tag_source, strip_images
from extractors.index_page import IndexPage, extract_index

__all__ = [
    "IndexPage",
    "canonical_markup",
    "collect_images",
    "extract_index",
    "isolate_chapter_content",
    "merge",
    "replace_tag_source",
    "strip_images",
]
