"""Shared fixtures: an in-memory catalog store and sample search results."""
from dataclasses import replace

import pytest
from litcatalog.errors import DuplicateTitle
from litcatalog.models import Author, Book, SearchResult, SearchResponse
from litcatalog.normalize import normalize


class MemoryCatalogStore:
    """Dict-backed store with the same contract as CatalogDatabase."""

    def __init__(self):
        self.authors = {}
        self.books = {}
        self.book_authors = {}
        self._next_author_id = 1
        self._next_book_id = 1

    def find_author_by_name(self, name):
        wanted = normalize(name)
        for author in self.authors.values():
            if normalize(author.name) == wanted:
                return author
        return None

    def search_author_by_name(self, query):
        wanted = normalize(query)
        for author in self.authors.values():
            if wanted in normalize(author.name):
                return author
        return None

    def save_author(self, author):
        if author.id is not None:
            return author
        existing = self.find_author_by_name(author.name)
        if existing:
            return existing
        saved = Author(
            id=self._next_author_id,
            name=author.name,
            birth_year=author.birth_year,
            death_year=author.death_year
        )
        self.authors[saved.id] = saved
        self._next_author_id += 1
        return saved

    def list_authors(self):
        return list(self.authors.values())

    def save_book(self, book):
        title = book.title.strip()
        if self.find_book_by_title(title):
            raise DuplicateTitle(title)
        authors = [self.save_author(a) for a in book.authors]
        saved = Book(
            id=self._next_book_id,
            title=title,
            authors=authors,
            languages=list(book.languages),
            download_count=book.download_count
        )
        self.books[saved.id] = saved
        self.book_authors[saved.id] = [a.id for a in authors]
        self._next_book_id += 1
        return replace(saved, authors=list(authors), languages=list(saved.languages))

    def find_book_by_title(self, title):
        for book in self.books.values():
            if book.title == title.strip():
                return book
        return None

    def list_books(self):
        return list(self.books.values())

    def list_books_by_author(self, author_id):
        return [
            book for book_id, book in self.books.items()
            if author_id in self.book_authors[book_id]
        ]

    def top_books_by_downloads(self, limit=10):
        # sorted() is stable, so ties keep insertion order
        ranked = sorted(self.books.values(), key=lambda b: b.download_count, reverse=True)
        return ranked[:max(limit, 0)]

    def get_stats(self):
        return {"total_authors": len(self.authors), "total_books": len(self.books)}


class StubSearchClient:
    """Returns canned responses keyed by query text."""

    def __init__(self, responses=None):
        self.responses = responses or {}
        self.queries = []

    def search(self, query, page=1):
        self.queries.append(query)
        return self.responses.get(query, SearchResponse(total=0, results=[]))


@pytest.fixture
def store():
    return MemoryCatalogStore()


@pytest.fixture
def dom_casmurro():
    return SearchResult(
        title="Dom Casmurro",
        authors=[Author(name="Machado de Assis", birth_year=1839, death_year=1908)],
        languages=["pt"],
        download_count=5000,
        summaries=["Bentinho recalls his life with Capitu."]
    )


@pytest.fixture
def search_client(dom_casmurro):
    return StubSearchClient({
        "dom casmurro": SearchResponse(total=1, results=[dom_casmurro]),
    })
