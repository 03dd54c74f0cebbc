"""Command surface used by front ends.

Every method either returns a value (None / [] for "nothing found")
or raises one of the CatalogError subclasses.
"""
import logging
from typing import List, Optional, Dict, Any

from litcatalog import importer, queries
from litcatalog.errors import ValidationFailure
from litcatalog.models import Author, Book, SearchResponse
from litcatalog.normalize import normalize, normalize_for_query, contains_normalized
from litcatalog.validation import (
    validate_title, validate_author_name, validate_year, validate_language
)

logger = logging.getLogger(__name__)


class CatalogService:
    """Catalog operations over an injected store and search client."""

    def __init__(self, store, client):
        """
        Args:
            store: Catalog store (e.g. CatalogDatabase)
            client: Search client (e.g. GutendexClient)
        """
        self.store = store
        self.client = client

    def search(self, title: str, page: int = 1) -> SearchResponse:
        """Search the remote service; the full result list is returned."""
        if page < 1:
            raise ValidationFailure("Page must be at least 1")
        title = validate_title(title)
        query = normalize_for_query(title)
        if not query:
            raise ValidationFailure("Title has no searchable characters")

        logger.info(f"Searching for: {query}")
        return self.client.search(query, page=page)

    def import_by_title(self, title: str) -> Optional[Book]:
        """
        Search by title and import the first result.

        Returns:
            The imported Book, or None if the search found nothing
        """
        response = self.search(title)
        result = response.first
        if result is None:
            logger.info(f"No results for: {title}")
            return None
        return importer.import_book(self.store, result)

    def find_author(self, name: str) -> Optional[Author]:
        return self.store.search_author_by_name(validate_author_name(name))

    def books_by_author(self, name: str) -> List[Book]:
        return queries.books_by_author(self.store, validate_author_name(name))

    def summary_for_title(self, title: str) -> Optional[str]:
        """
        Look up a summary on the remote service.

        Only results whose title contains the requested title
        (normalized) are considered.

        Returns:
            First non-blank summary, or None
        """
        response = self.search(title)
        wanted = normalize(title)

        for result in response.results:
            if not contains_normalized(result.title, wanted):
                continue
            for summary in result.summaries:
                if summary and summary.strip():
                    return summary
        return None

    def list_books(self) -> List[Book]:
        return queries.list_books(self.store)

    def list_authors(self) -> List[Author]:
        return queries.list_authors(self.store)

    def authors_alive_in_year(self, year) -> List[Author]:
        return queries.authors_alive_in_year(self.store, validate_year(year))

    def books_in_language(self, code: str) -> List[Book]:
        return queries.books_in_language(self.store, validate_language(code))

    def top_books(self, n: int = 10) -> List[Book]:
        if n < 1:
            raise ValidationFailure("Ranking size must be at least 1")
        return queries.top_books(self.store, n)

    def top10(self) -> List[Book]:
        return self.top_books(10)

    def stats(self) -> Dict[str, Any]:
        return self.store.get_stats()
