"""Command-line access to the directory: browse listings, keep local bookmarks."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

from .api_client import DirectoryApiClient
from .bookmarks import BookmarkStore
from .bookmarks import JsonFileStorage
from .config import API_BASE_URL
from .config import BOOKMARKS_FILE
from .config import LOG_LEVEL
from .config import PAGE_SIZE
from .errors import CatalogError
from .logging_config import setup_logging
from .pagination import PaginationController

logger = logging.getLogger(__name__)


def print_tools(tools, start: int = 1) -> None:
    for index, tool in enumerate(tools, start):
        category = tool.primary_category
        print(f"{index:4d}. {tool.title} [{category.name if category else 'AI Tool'}] ({tool.slug})")


async def browse(client: DirectoryApiClient, category: Optional[str], pages: int, page_size: int) -> int:
    """Print up to ``pages`` pages of a listing. Returns a process exit code."""
    controller = PaginationController(client.fetch_tools, page_size=page_size)
    await controller.load_initial(category)
    printed = 0
    loaded = 1
    while True:
        if controller.error is not None:
            print(f"Failed to load tools: {controller.error}", file=sys.stderr)
            return 1
        print_tools(controller.tools[printed:], printed + 1)
        printed = len(controller.tools)
        if not controller.has_next_page or loaded >= pages:
            break
        await controller.load_more()
        loaded += 1

    if controller.is_empty:
        print("No AI tools found.")
    elif controller.has_next_page:
        print(f"... more available after cursor {controller.cursor}")
    return 0


async def show_stats(client: DirectoryApiClient) -> int:
    try:
        stats = await client.fetch_stats()
    except CatalogError as exc:
        print(f"Failed to load stats: {exc}", file=sys.stderr)
        return 1
    print(f"{stats.tool_count} tools in {stats.category_count} categories")
    return 0


def manage_bookmarks(store: BookmarkStore, args: argparse.Namespace) -> int:
    if args.bookmark_command == "toggle":
        bookmarked = store.toggle(args.slug, args.name or args.slug)
        print(f"{args.slug}: {'bookmarked' if bookmarked else 'removed'}")
    elif args.bookmark_command == "remove":
        store.remove(args.slug)
        print(f"{args.slug}: removed")
    else:
        bookmarks = store.all()
        if not bookmarks:
            print("You haven't bookmarked any tools yet.")
        for slug, entry in bookmarks.items():
            print(f"{entry.get('name', slug)} ({slug})")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--api", default=API_BASE_URL, help="Base URL of the directory's JSON API")
    parser.add_argument("--bookmarks-file", type=Path, default=BOOKMARKS_FILE)
    subparsers = parser.add_subparsers(dest="command", required=True)

    browse_parser = subparsers.add_parser("browse", help="List tools, optionally in one category")
    browse_parser.add_argument("category", nargs="?", help="Category slug or name")
    browse_parser.add_argument("--pages", type=int, default=1, help="Pages to load")
    browse_parser.add_argument("--page-size", type=int, default=PAGE_SIZE)

    subparsers.add_parser("stats", help="Show tool and category counts")

    bookmarks_parser = subparsers.add_parser("bookmarks", help="Manage local bookmarks")
    bookmark_commands = bookmarks_parser.add_subparsers(dest="bookmark_command")
    bookmark_commands.add_parser("list")
    toggle_parser = bookmark_commands.add_parser("toggle")
    toggle_parser.add_argument("slug")
    toggle_parser.add_argument("name", nargs="?")
    remove_parser = bookmark_commands.add_parser("remove")
    remove_parser.add_argument("slug")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(LOG_LEVEL)

    if args.command == "bookmarks":
        return manage_bookmarks(BookmarkStore(JsonFileStorage(args.bookmarks_file)), args)

    client = DirectoryApiClient(args.api)
    if args.command == "stats":
        return asyncio.run(show_stats(client))
    return asyncio.run(browse(client, args.category, max(args.pages, 1), args.page_size))


if __name__ == "__main__":
    sys.exit(main())
