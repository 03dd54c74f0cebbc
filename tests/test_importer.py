"""Tests for importing search results into the catalog."""
import pytest

from litcatalog.errors import DuplicateTitle
from litcatalog.importer import import_book, resolve_author
from litcatalog.models import Author, SearchResult


def test_import_new_book(store, dom_casmurro):
    """A fresh import creates the book and its author."""
    book = import_book(store, dom_casmurro)

    assert book.id is not None
    assert book.title == "Dom Casmurro"
    assert book.languages == ["pt"]
    assert book.download_count == 5000
    assert book.authors[0].id is not None
    assert book.authors[0].name == "Machado de Assis"
    assert store.get_stats() == {"total_authors": 1, "total_books": 1}


def test_import_carries_summaries_without_storing(store, dom_casmurro):
    """Summaries are returned for display but not kept in the catalog."""
    book = import_book(store, dom_casmurro)

    assert book.first_summary == "Bentinho recalls his life with Capitu."
    assert store.list_books()[0].summaries == []


def test_import_reuses_author_with_same_normalized_name(store, dom_casmurro):
    """An author spelled with other case/accents maps to the stored one."""
    first = import_book(store, dom_casmurro)
    second = import_book(store, SearchResult(
        title="Quincas Borba",
        authors=[Author(name="  MACHADO   DE ÁSSIS ", birth_year=1900, death_year=None)],
        languages=["pt"],
        download_count=800
    ))

    assert second.authors[0].id == first.authors[0].id
    assert len(store.list_authors()) == 1


def test_existing_author_record_wins(store, dom_casmurro):
    """Fetched birth/death years never overwrite the catalogued ones."""
    import_book(store, dom_casmurro)
    resolved = resolve_author(store, Author(name="Machado de Assis", birth_year=1, death_year=2))

    assert resolved.birth_year == 1839
    assert resolved.death_year == 1908


def test_dedup_does_not_match_partial_names(store):
    """Dedup needs the whole normalized name, not a substring."""
    store.save_author(Author(name="Machado de Assis"))

    resolved = resolve_author(store, Author(name="Assis"))

    assert resolved.name == "Assis"
    assert len(store.list_authors()) == 2


def test_duplicate_title_fails_and_leaves_counts(store, dom_casmurro):
    """Re-importing a title raises DuplicateTitle; nothing new is stored."""
    import_book(store, dom_casmurro)
    before = store.get_stats()

    with pytest.raises(DuplicateTitle) as exc_info:
        import_book(store, SearchResult(
            title="Dom Casmurro",
            authors=[Author(name="Someone Else", birth_year=1950)],
            languages=["en"],
            download_count=1
        ))

    assert exc_info.value.title == "Dom Casmurro"
    assert store.get_stats() == before


def test_title_uniqueness_is_exact(store, dom_casmurro):
    """Titles differing only in case are distinct books."""
    import_book(store, dom_casmurro)
    other = import_book(store, SearchResult(title="DOM CASMURRO", download_count=1))

    assert other.id != store.find_book_by_title("Dom Casmurro").id
    assert store.get_stats()["total_books"] == 2


def test_import_without_authors_or_languages(store):
    """Zero authors and an empty language set are legal."""
    book = import_book(store, SearchResult(title="Anonymous Tales"))

    assert book.authors == []
    assert book.languages == []
    assert book.download_count == 0


def test_import_missing_download_count_defaults_to_zero(store):
    book = import_book(store, SearchResult(title="Unknown Popularity", download_count=None))

    assert book.download_count == 0


def test_same_author_listed_twice_is_linked_once(store):
    book = import_book(store, SearchResult(
        title="Collected Letters",
        authors=[Author(name="Eça de Queirós"), Author(name="Eca de Queiros")],
        languages=["PT", "pt"]
    ))

    assert len(book.authors) == 1
    assert book.languages == ["pt"]
    assert len(store.list_authors()) == 1


def test_import_does_not_mutate_stored_book(store, dom_casmurro):
    """Summaries go on a copy even when the store returns its own instance."""
    original_save = store.save_book

    def save_and_return_stored(book):
        saved = original_save(book)
        return store.books[saved.id]

    store.save_book = save_and_return_stored

    book = import_book(store, dom_casmurro)

    assert book.summaries == ["Bentinho recalls his life with Capitu."]
    assert store.books[book.id].summaries == []
    assert book is not store.books[book.id]
