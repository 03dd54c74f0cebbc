"""Read-only queries over the catalog."""
from typing import List

from litcatalog.models import Author, Book

TOP_N_DEFAULT = 10


def list_books(store) -> List[Book]:
    return store.list_books()


def list_authors(store) -> List[Author]:
    return store.list_authors()


def authors_alive_in_year(store, year: int) -> List[Author]:
    """Authors alive in `year`; authors without a birth year never qualify."""
    return [author for author in store.list_authors() if author.is_alive_in(year)]


def books_in_language(store, code: str) -> List[Book]:
    """Books whose language codes include `code`, ignoring case."""
    wanted = (code or "").strip().lower()
    return [
        book for book in store.list_books()
        if any(language.lower() == wanted for language in book.languages)
    ]


def books_by_author(store, name: str) -> List[Book]:
    """Books of the first author matching `name` (partial, fuzzy), or []."""
    author = store.search_author_by_name(name)
    if author is None:
        return []
    return store.list_books_by_author(author.id)


def top_books(store, n: int = TOP_N_DEFAULT) -> List[Book]:
    """Most downloaded books, highest first."""
    return store.top_books_by_downloads(n)
