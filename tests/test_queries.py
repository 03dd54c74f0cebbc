"""Tests for read-only catalog queries."""
from datetime import date

from litcatalog import queries
from litcatalog.models import Author, Book


def add_book(store, title, downloads=0, languages=None, authors=None):
    return store.save_book(Book(
        title=title,
        download_count=downloads,
        languages=languages or [],
        authors=authors or []
    ))


def test_author_alive_with_known_death():
    """Birth and death years are both inclusive."""
    author = Author(name="A", birth_year=1800, death_year=1850)

    for year in (1800, 1825, 1850):
        assert author.is_alive_in(year)
    for year in (1799, 1851):
        assert not author.is_alive_in(year)


def test_author_alive_without_death():
    """No death year: alive from birth onwards, including today."""
    author = Author(name="B", birth_year=1800)

    assert author.is_alive_in(1800)
    assert author.is_alive_in(1950)
    assert author.is_alive_in(date.today().year)
    assert not author.is_alive_in(1799)


def test_author_without_birth_never_alive():
    author = Author(name="C", death_year=1900)

    assert not author.is_alive_in(1850)


def test_author_lifespan_and_age():
    assert Author(name="D", birth_year=1839, death_year=1908).lifespan_str == "1839 - 1908"
    assert Author(name="D", birth_year=1839, death_year=1908).age == 69
    assert Author(name="E", birth_year=1980).lifespan_str == "1980 - present"
    assert Author(name="F").lifespan_str == "Unknown"
    assert Author(name="F").age is None


def test_authors_alive_in_year(store):
    store.save_author(Author(name="Machado de Assis", birth_year=1839, death_year=1908))
    store.save_author(Author(name="Jane Austen", birth_year=1775, death_year=1817))
    store.save_author(Author(name="No Dates"))

    alive = queries.authors_alive_in_year(store, 1900)

    assert [a.name for a in alive] == ["Machado de Assis"]


def test_books_in_language_is_case_insensitive(store):
    add_book(store, "Dom Casmurro", languages=["pt"])
    add_book(store, "Emma", languages=["en"])
    add_book(store, "Bilingual Edition", languages=["en", "pt"])

    upper = queries.books_in_language(store, "PT")
    lower = queries.books_in_language(store, "pt")

    assert [b.title for b in upper] == ["Dom Casmurro", "Bilingual Edition"]
    assert upper == lower


def test_books_in_language_exact_code(store):
    """Codes are compared whole, not as substrings."""
    add_book(store, "Emma", languages=["en"])

    assert queries.books_in_language(store, "e") == []
    assert queries.books_in_language(store, "es") == []


def test_books_by_author_partial_name(store):
    machado = store.save_author(Author(name="Machado de Assis"))
    austen = store.save_author(Author(name="Jane Austen"))
    add_book(store, "Dom Casmurro", authors=[machado])
    add_book(store, "Quincas Borba", authors=[machado])
    add_book(store, "Emma", authors=[austen])

    books = queries.books_by_author(store, "assis")

    assert [b.title for b in books] == ["Dom Casmurro", "Quincas Borba"]


def test_books_by_unknown_author(store):
    assert queries.books_by_author(store, "Nobody") == []


def test_top_books_limits_and_orders(store):
    """Top 10 of 15 books: exactly the ten most downloaded, descending."""
    for i in range(15):
        add_book(store, f"Book {i}", downloads=(i * 37) % 15 * 100)

    top = queries.top_books(store, 10)
    downloads = [b.download_count for b in top]
    all_downloads = sorted((b.download_count for b in store.list_books()), reverse=True)

    assert len(top) == 10
    assert downloads == sorted(downloads, reverse=True)
    assert downloads == all_downloads[:10]


def test_top_books_ties_keep_insertion_order(store):
    add_book(store, "First", downloads=50)
    add_book(store, "Second", downloads=50)
    add_book(store, "Third", downloads=70)

    assert [b.title for b in queries.top_books(store, 3)] == ["Third", "First", "Second"]


def test_queries_do_not_mutate(store):
    add_book(store, "Emma", downloads=5, languages=["en"])
    before = store.get_stats()

    queries.list_books(store)
    queries.list_authors(store)
    queries.books_in_language(store, "en")
    queries.authors_alive_in_year(store, 1900)
    queries.top_books(store)

    assert store.get_stats() == before


def test_author_is_alive_without_death_year():
    assert Author(name="G", birth_year=1970).is_alive
    assert not Author(name="H", birth_year=1839, death_year=1908).is_alive
