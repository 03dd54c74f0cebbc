#!/usr/bin/env python3
"""Literary Catalog Explorer CLI - Gutendex & PostgreSQL."""
import argparse
import sys
import json
from tabulate import tabulate
from litcatalog.client import GutendexClient
from litcatalog.database import CatalogDatabase
from litcatalog.errors import CatalogError
from litcatalog.models import Book
from litcatalog.service import CatalogService
from litcatalog.config import Config
import logging

logger = logging.getLogger(__name__)


def truncate(text: str, width: int) -> str:
    return text[:width] + "..." if len(text) > width else text


def setup_database(config: Config) -> CatalogDatabase:
    """Initialize database."""
    db = CatalogDatabase(config.DATABASE_URL, config.DB_MIN_CONN, config.DB_MAX_CONN)
    db.init_schema()
    return db


def book_to_dict(book) -> dict:
    return {
        "id": book.id,
        "title": book.title,
        "authors": [author_to_dict(a) for a in book.authors],
        "languages": book.languages,
        "download_count": book.download_count
    }


def author_to_dict(author) -> dict:
    return {
        "id": author.id,
        "name": author.name,
        "birth_year": author.birth_year,
        "death_year": author.death_year,
        "alive": author.is_alive,
        "age": author.age
    }


def result_to_book(result) -> Book:
    """Unsaved Book view of a search result, for display."""
    return Book(
        title=result.title,
        authors=result.authors,
        languages=result.languages,
        download_count=result.download_count,
        summaries=result.summaries
    )


def display_books(books, format_type: str, ranked: bool = False):
    """Display books in specified format."""
    if format_type == "table":
        headers = ["Title", "Authors", "Languages", "Downloads"]
        rows = [
            [
                truncate(book.title, 50),
                truncate(book.authors_str, 30),
                book.languages_str,
                book.download_count
            ]
            for book in books
        ]
        if ranked:
            headers = ["#"] + headers
            rows = [[i] + row for i, row in enumerate(rows, 1)]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        print(json.dumps([book_to_dict(book) for book in books], indent=2, ensure_ascii=False))

    elif format_type == "compact":
        for i, book in enumerate(books, 1):
            print(f"{i}. {book.title} - {book.authors_str}")


def display_authors(authors, format_type: str):
    """Display authors in specified format."""
    if format_type == "table":
        headers = ["Name", "Born", "Died", "Lifespan", "Age", "Status"]
        rows = [
            [
                truncate(author.name, 40),
                author.birth_year or "Unknown",
                author.death_year or "-",
                author.lifespan_str,
                author.age if author.age is not None else "-",
                "Alive" if author.is_alive else "Deceased"
            ]
            for author in authors
        ]
        print("\n" + tabulate(rows, headers=headers, tablefmt="grid"))

    elif format_type == "json":
        print(json.dumps([author_to_dict(a) for a in authors], indent=2, ensure_ascii=False))

    elif format_type == "compact":
        for i, author in enumerate(authors, 1):
            print(f"{i}. {author.name} ({author.lifespan_str})")


def run_command(args, service: CatalogService):
    """Dispatch one subcommand."""
    if args.command == "search":
        response = service.search(args.title, page=args.page)
        if not response.results:
            print("No book found")
            return
        # Preview only: nothing is written to the catalog
        results = response.results if args.all else [response.first]
        books = [result_to_book(r) for r in results]
        display_books(books, args.format)
        if args.format != "json":
            print(f"\n{response.total} match(es) on the search service")
            if not args.all and books[0].first_summary:
                print(f"\nSummary: {books[0].first_summary}")

    elif args.command == "import":
        book = service.import_by_title(args.title)
        if book is None:
            print("No book found")
            return
        display_books([book], args.format)
        if book.first_summary:
            print(f"\nSummary: {book.first_summary}")

    elif args.command == "author":
        author = service.find_author(args.name)
        if author is None:
            print("No author found with this name")
            return
        display_authors([author], args.format)

    elif args.command == "books-by-author":
        books = service.books_by_author(args.name)
        if not books:
            print("No author found with this name")
            return
        display_books(books, args.format)
        if args.summary:
            summary = service.summary_for_title(args.summary)
            print(f"\nSummary: {summary}" if summary else "\nNo summary found")

    elif args.command == "books":
        books = service.list_books()
        if not books:
            print("No books catalogued")
            return
        display_books(books, args.format)

    elif args.command == "authors":
        authors = service.list_authors()
        if not authors:
            print("No authors catalogued")
            return
        display_authors(authors, args.format)

    elif args.command == "alive":
        authors = service.authors_alive_in_year(args.year)
        if not authors:
            print(f"No authors alive in {args.year}")
            return
        display_authors(authors, args.format)

    elif args.command == "language":
        books = service.books_in_language(args.code)
        if not books:
            print(f"No books in language: {args.code}")
            return
        display_books(books, args.format)

    elif args.command == "top":
        books = service.top_books(args.limit)
        if not books:
            print("No books available for ranking")
            return
        display_books(books, args.format, ranked=True)

    elif args.command == "stats":
        stats = service.stats()

        print("\n" + "=" * 50)
        print("CATALOG STATISTICS")
        print("=" * 50)
        print(f"Authors catalogued: {stats['total_authors']}")
        print(f"Books catalogued: {stats['total_books']}")
        print("=" * 50 + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Literary Catalog Explorer - Gutendex & PostgreSQL CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Look at the first match before importing it
  %(prog)s search "Dom Casmurro"

  # Import the first match for a title
  %(prog)s import "Dom Casmurro"

  # Authors alive in a given year
  %(prog)s alive 1900

  # Most downloaded books as JSON
  %(prog)s --format json top
        """
    )
    parser.add_argument("--format", choices=["table", "json", "compact"], default="table", help="Output format")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    search_parser = subparsers.add_parser("search", help="Preview search results without cataloguing")
    search_parser.add_argument("title", help="Book title")
    search_parser.add_argument("--page", type=int, default=1, help="Result page (default: 1)")
    search_parser.add_argument("--all", action="store_true", help="Show every result, not only the first")

    import_parser = subparsers.add_parser("import", help="Search a title and catalog the first result")
    import_parser.add_argument("title", help="Book title")

    author_parser = subparsers.add_parser("author", help="Find a catalogued author by (partial) name")
    author_parser.add_argument("name", help="Author name")

    by_author_parser = subparsers.add_parser("books-by-author", help="List books of a catalogued author")
    by_author_parser.add_argument("name", help="Author name")
    by_author_parser.add_argument("--summary", metavar="TITLE", help="Also fetch the summary of this title")

    subparsers.add_parser("books", help="List catalogued books")
    subparsers.add_parser("authors", help="List catalogued authors")

    alive_parser = subparsers.add_parser("alive", help="List authors alive in a year")
    alive_parser.add_argument("year", help="Year, e.g. 1900")

    language_parser = subparsers.add_parser("language", help="List books in a language")
    language_parser.add_argument("code", help="2-letter code: es, en, fr, pt, ...")

    top_parser = subparsers.add_parser("top", help="Most downloaded books")
    top_parser.add_argument("--limit", type=int, default=10, help="Max rows (default: 10)")

    subparsers.add_parser("stats", help="Show catalog statistics")

    return parser


def main():
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    config = Config()

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        with setup_database(config) as db, GutendexClient(
            base_url=config.GUTENDEX_URL,
            timeout=config.DEFAULT_TIMEOUT,
            max_retries=config.DEFAULT_MAX_RETRIES
        ) as client:
            run_command(args, CatalogService(db, client))

    except CatalogError as e:
        logger.error(f"{type(e).__name__}: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)


if __name__ == "__main__":
    main()
