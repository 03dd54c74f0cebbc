"""Materialize search results as catalogued books, deduplicating authors."""
import logging
from dataclasses import replace
from typing import List

from litcatalog.errors import DuplicateTitle
from litcatalog.models import Author, Book, SearchResult

logger = logging.getLogger(__name__)


def resolve_author(store, entry: Author) -> Author:
    """
    Map a fetched author entry onto the catalog.

    An author already stored under the same normalized name is reused
    as-is; the fetched birth/death years are ignored.

    Args:
        store: Catalog store
        entry: Author parsed from a search result

    Returns:
        Persisted Author
    """
    existing = store.find_author_by_name(entry.name)
    if existing:
        logger.info(f"Reusing catalogued author: {existing.name} (id={existing.id})")
        return existing

    return store.save_author(Author(
        name=entry.name.strip(),
        birth_year=entry.birth_year,
        death_year=entry.death_year
    ))


def import_book(store, result: SearchResult) -> Book:
    """
    Persist one search result as a Book.

    Not transactional across authors and book: an interrupted import
    can leave new authors without a book.

    Args:
        store: Catalog store
        result: Search result to import

    Returns:
        Persisted Book with ids populated

    Raises:
        DuplicateTitle: A book with the same title is already catalogued
    """
    title = result.title.strip()

    # Checked before any write so a rejected import leaves the catalog untouched
    if store.find_book_by_title(title):
        raise DuplicateTitle(title)

    authors: List[Author] = []
    for entry in result.authors:
        author = resolve_author(store, entry)
        if all(a.id != author.id for a in authors):
            authors.append(author)

    languages = list(dict.fromkeys(code.strip().lower() for code in result.languages if code))

    saved = store.save_book(Book(
        title=title,
        authors=authors,
        languages=languages,
        download_count=result.download_count or 0,
    ))
    # Summaries ride along on a copy; the stored book never carries them
    book = replace(saved, summaries=list(result.summaries))

    logger.info(f"Imported book: {book.title} by {book.authors_str}")
    return book
