#!/usr/bin/env python3
"""Book search CLI - catalog and library aggregation."""
import argparse
import asyncio
import sys
import json
from typing import List, Optional
from tabulate import tabulate
from booksearch.aggregation import AggregationService
from booksearch.async_client import RemoteCatalogClient
from booksearch.database import Database, LocalInventoryClient
from booksearch.models import CandidateBook
from booksearch.config import Config
import psycopg2
import logging

logger = logging.getLogger(__name__)


def setup_database(config: Config) -> Optional[Database]:
    """Initialize database, or None if it can't be reached."""
    try:
        db = Database(config.DATABASE_URL)
    except psycopg2.Error as e:
        logger.warning(f"Library database unavailable, searching catalog only: {e}")
        return None
    
    try:
        db.init_schema()
    except psycopg2.Error as e:
        logger.warning(f"Library schema setup failed, searching catalog only: {e}")
        db.close()
        return None
    return db


async def search_books(args, config: Config) -> List[CandidateBook]:
    """Run one aggregated search."""
    db = None if args.no_local else setup_database(config)
    
    try:
        async with RemoteCatalogClient(
            base_url=config.OPEN_LIBRARY_BASE_URL,
            timeout=config.DEFAULT_TIMEOUT,
            limit=config.MAX_RESULTS
        ) as catalog:
            service = AggregationService(
                catalog,
                inventory=LocalInventoryClient(db) if db else None,
                limit=config.MAX_RESULTS
            )
            
            logger.info(f"Searching for: {args.query}")
            return await service.search(args.query)
    
    finally:
        if db:
            db.close()


def display_books(books: List[CandidateBook], format_type: str):
    """Display books in specified format."""
    if not books:
        print("No results.")
        return
    
    if format_type == "table":
        headers = ["Title", "Author", "Pages", "Source", "Owned"]
        rows = [
            [
                book.title[:50] + "..." if len(book.title) > 50 else book.title,
                book.author[:30] + "..." if len(book.author) > 30 else book.author,
                book.page_count,
                book.origin,
                "yes" if book.already_owned else ""
            ]
            for book in books
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))
    
    elif format_type == "json":
        print(json.dumps([book.to_dict() for book in books], indent=2))
    
    elif format_type == "compact":
        for i, book in enumerate(books, 1):
            marker = " [owned]" if book.already_owned else ""
            print(f"{i}. {book.title} - {book.author}{marker}")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Book Search - find books for your reading list",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Search catalog and library
  %(prog)s search "tolkien"
  
  # Catalog only, JSON output
  %(prog)s search "the gunslinger" --no-local --format json
        """
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")
    
    search_parser = subparsers.add_parser("search", help="Search for books")
    search_parser.add_argument("query", help="Title or author")
    search_parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")
    search_parser.add_argument("--no-local", action="store_true", help="Skip the library database")
    
    args = parser.parse_args(argv)
    
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )
    
    if not args.command:
        parser.print_help()
        sys.exit(1)
    
    config = Config()
    
    try:
        if args.command == "search":
            books = asyncio.run(search_books(args, config))
            display_books(books, args.format)
    
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
