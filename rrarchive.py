#!/usr/bin/env python3
"""
rrarchive — Archive a Royal Road web novel as an EPUB or Markdown file.

Output formats: epub, markdown (html and audiobook are announced, not implemented)

Quick start:
  1. Install html2xhtml (needed for epub), or set HTML2XHTML_PATH in .env
  2. python rrarchive.py https://www.royalroad.com/fiction/12345/some-story epub
  3. python rrarchive.py https://www.royalroad.com/fiction/12345/some-story ~/Books markdown
"""

import argparse
import sys
from pathlib import Path
from urllib.parse import urlsplit

from dotenv import load_dotenv

from config import SITE_HOST


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Archive a Royal Road web novel as an EPUB or Markdown file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # EPUB with images, into the current directory:
  python rrarchive.py https://www.royalroad.com/fiction/12345/some-story epub

  # Smaller EPUB without images:
  python rrarchive.py https://www.royalroad.com/fiction/12345/some-story epub --no-images

  # Markdown into ~/Books, without chapter headings:
  python rrarchive.py https://www.royalroad.com/fiction/12345/some-story ~/Books markdown -n
        """,
    )
    parser.add_argument("book_url", help="URL of the book's index page")
    parser.add_argument(
        "output_dir", nargs="?", type=Path, default=None,
        help="Directory for the generated file (default: current directory)",
    )
    subparsers = parser.add_subparsers(dest="output_format", required=True, metavar="FORMAT")

    audiobook = subparsers.add_parser("audiobook", help="Generate an audiobook (not implemented yet)")
    audiobook.add_argument(
        "-n", "--no-chapter-titles", action="store_true",
        help="Do not narrate chapter titles",
    )
    audiobook.add_argument(
        "-s", "--split-novel-by-chapters", action="store_true",
        help="Write one audio file per chapter",
    )

    epub = subparsers.add_parser("epub", help="Generate an EPUB")
    epub.add_argument(
        "-n", "--no-images", action="store_true",
        help="Leave images out. Much faster and a much smaller file",
    )

    subparsers.add_parser("html", help="Store the book as HTML pages (not implemented yet)")

    markdown = subparsers.add_parser("markdown", help="Generate a single Markdown file")
    markdown.add_argument(
        "-n", "--no-chapter-titles", action="store_true",
        help="Do not write a heading per chapter. Useful when chapters already start with one",
    )
    markdown.add_argument(
        "-i", "--no-image-tags", action="store_true",
        help="Drop the HTML <img> tags from the Markdown",
    )
    return parser.parse_args(argv)


def validate_book_url(book_url: str) -> str:
    book_url = book_url.strip().lower()
    try:
        parts = urlsplit(book_url)
    except ValueError as e:
        print(f"ERROR: Unable to parse url: {book_url}\n{e}", file=sys.stderr)
        sys.exit(1)
    if parts.scheme not in ("http", "https") or parts.hostname != SITE_HOST:
        print(f"ERROR: Please enter a Royal Road URL (https://{SITE_HOST}/...)", file=sys.stderr)
        sys.exit(1)
    return book_url


def prepare_output_dir(output_dir: Path | None) -> Path:
    output_dir = (output_dir or Path.cwd()).expanduser()
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"ERROR: Unable to create directory {output_dir}: {e}", file=sys.stderr)
        sys.exit(1)
    return output_dir


def print_warnings(warnings) -> None:
    if not warnings:
        return
    print(f"\nWarnings ({len(warnings)}):")
    for warning in warnings:
        print(f"  - {warning}")


def render(args, renderer, book, output_dir, fetcher):
    if args.output_format == "epub":
        return renderer(book, output_dir, fetcher, include_images=not args.no_images)
    return renderer(
        book, output_dir,
        chapter_titles=not args.no_chapter_titles,
        image_tags=not args.no_image_tags,
    )


def run(args) -> int:
    # Import pipeline modules lazily to keep --help fast
    from config import Config
    from errors import ArchiverError
    from http_client import Fetcher
    from renderers import get_renderer
    from scraper import scrape_book

    Config.reload()
    book_url = validate_book_url(args.book_url)
    output_dir = prepare_output_dir(args.output_dir)

    warnings = []
    try:
        # Unsupported formats fail here, before anything is fetched
        renderer = get_renderer(args.output_format)
        with Fetcher() as fetcher:
            print(f"Fetching: {book_url}")
            print("\nDownloading and processing chapters:")
            book, scrape_warnings = scrape_book(fetcher, book_url)
            warnings.extend(scrape_warnings)

            print(f"\nTitle:    {book.title}")
            print(f"Author:   {book.author}")
            print(f"Chapters: {len(book.chapters)}")
            print(f"Images:   {book.image_count}")

            print(f"\n=== Building {args.output_format} ===\n")
            result = render(args, renderer, book, output_dir, fetcher)
            warnings.extend(result.warnings)
    except ArchiverError as e:
        print(f"\nERROR: {e}", file=sys.stderr)
        print_warnings(warnings + e.warnings)
        return 1

    print(f"\nDone! Saved to: {result.output_path}")
    print_warnings(warnings)
    return 0


def main():
    args = parse_args()
    load_dotenv()
    sys.exit(run(args))


if __name__ == "__main__":
    main()
