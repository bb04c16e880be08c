#!/usr/bin/env python3
"""
Delete every book in the library except the ones you name.

Pages, translations and stored files go with each book.

Usage:
    python cli/delete_books.py --keep "The Forest Library"
    python cli/delete_books.py --keep "The Forest Library" --keep "Moon Picnic" --dry-run
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from storyforest.api.config import LOG_LEVEL
from storyforest.api.database import (
    AdminConfigRepository,
    BlobStorage,
    BookRepository,
    DraftRepository,
    get_bucket,
    get_firestore,
    init_firebase,
)
from storyforest.api.logging import configure_logging
from storyforest.api.models.documents import Book
from storyforest.api.services.book_service import BookService

logger = logging.getLogger("delete_books")


def partition_books(books: list[Book], keep_titles: set[str]) -> tuple[list[Book], list[Book]]:
    """Split books into (kept, doomed) by exact title match."""
    kept = [b for b in books if b.title in keep_titles]
    doomed = [b for b in books if b.title not in keep_titles]
    return kept, doomed


async def delete_books(service: BookService, keep_titles: set[str], dry_run: bool = False) -> dict[str, int]:
    """Delete every book whose title is not in keep_titles. Returns counts."""
    books = await service.list_all_books()
    print(f"Found {len(books)} books total.\n")

    kept, doomed = partition_books(books, keep_titles)
    for book in kept:
        print(f"  KEEPING: \"{book.title}\" ({book.id})")

    deleted = 0
    for book in doomed:
        if dry_run:
            print(f"  Would delete: \"{book.title}\" ({book.id})")
            continue
        print(f"  Deleting: \"{book.title}\" ({book.id})")
        await service.delete_book(book.id)
        deleted += 1

    print(f"\nDone! Kept: {len(kept)}, Deleted: {deleted}" + (" (dry run)" if dry_run else ""))
    return {"kept": len(kept), "deleted": deleted}


async def _run(keep_titles: set[str], dry_run: bool) -> None:
    init_firebase()
    db = get_firestore()
    service = BookService(
        books=BookRepository(db),
        drafts=DraftRepository(db),
        storage=BlobStorage(get_bucket()),
        admins=AdminConfigRepository(db),
    )
    await delete_books(service, keep_titles, dry_run=dry_run)


def main():
    parser = argparse.ArgumentParser(
        description="Delete all books except those with the given titles",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--keep", "-k",
        action="append",
        default=[],
        metavar="TITLE",
        help="Exact title of a book to keep (repeatable)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List what would be deleted without deleting anything",
    )
    args = parser.parse_args()

    if not args.keep and not args.dry_run:
        parser.error("refusing to delete every book; pass --keep or --dry-run")

    configure_logging(json_format=False, level=LOG_LEVEL)
    try:
        asyncio.run(_run(set(args.keep), args.dry_run))
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
