"""PostgreSQL catalog store for authors and books."""
import psycopg2
import psycopg2.errors
from psycopg2 import pool
from contextlib import contextmanager
from typing import Optional, List, Dict, Any, Sequence
import logging

from litcatalog.errors import DuplicateTitle, StorageFailure
from litcatalog.models import Author, Book
from litcatalog.normalize import normalize

logger = logging.getLogger(__name__)

AUTHOR_COLUMNS = "id, name, birth_year, death_year"
BOOK_COLUMNS = "id, title, download_count"


def _escape_like(text: str) -> str:
    """Escape LIKE wildcards so the text matches literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _row_to_author(row: Sequence[Any]) -> Author:
    return Author(id=row[0], name=row[1], birth_year=row[2], death_year=row[3])


class CatalogDatabase:
    """PostgreSQL catalog store with connection pooling."""

    def __init__(self, connection_string: str, min_conn: int = 1, max_conn: int = 5):
        """
        Initialize database connection pool.

        Args:
            connection_string: PostgreSQL connection string
            min_conn: Minimum connections in pool
            max_conn: Maximum connections in pool
        """
        try:
            self.connection_pool = pool.SimpleConnectionPool(
                min_conn,
                max_conn,
                connection_string
            )
        except psycopg2.Error as e:
            logger.error(f"Failed to create connection pool: {e}")
            raise StorageFailure(f"Database unreachable: {e}") from e

        logger.info("Database connection pool created successfully")

    @contextmanager
    def _cursor(self):
        """Yield a cursor inside a transaction; commit on success, roll back otherwise."""
        try:
            conn = self.connection_pool.getconn()
        except psycopg2.Error as e:
            raise StorageFailure(f"No database connection available: {e}") from e

        try:
            with conn.cursor() as cur:
                yield cur
            conn.commit()
        except psycopg2.Error as e:
            conn.rollback()
            logger.error(f"Database operation failed: {e}")
            raise StorageFailure(f"Database operation failed: {e}") from e
        except Exception:
            conn.rollback()
            raise
        finally:
            self.connection_pool.putconn(conn)

    def init_schema(self):
        """Create database tables if they don't exist."""
        with self._cursor() as cur:
            cur.execute("""
                CREATE TABLE IF NOT EXISTS authors (
                    id SERIAL PRIMARY KEY,
                    name VARCHAR(200) NOT NULL,
                    name_normalized VARCHAR(200) NOT NULL UNIQUE,
                    birth_year INTEGER,
                    death_year INTEGER,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cur.execute("""
                CREATE TABLE IF NOT EXISTS books (
                    id SERIAL PRIMARY KEY,
                    title VARCHAR(500) NOT NULL UNIQUE,
                    download_count INTEGER NOT NULL DEFAULT 0 CHECK (download_count >= 0),
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cur.execute("""
                CREATE TABLE IF NOT EXISTS book_languages (
                    book_id INTEGER NOT NULL REFERENCES books(id),
                    language VARCHAR(10) NOT NULL,
                    PRIMARY KEY (book_id, language)
                )
            """)

            cur.execute("""
                CREATE TABLE IF NOT EXISTS book_authors (
                    book_id INTEGER NOT NULL REFERENCES books(id),
                    author_id INTEGER NOT NULL REFERENCES authors(id),
                    position INTEGER NOT NULL DEFAULT 0,
                    PRIMARY KEY (book_id, author_id)
                )
            """)

            # Ranking and reverse lookups
            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_books_downloads
                ON books (download_count DESC, id)
            """)

            cur.execute("""
                CREATE INDEX IF NOT EXISTS idx_book_authors_author
                ON book_authors (author_id)
            """)

        logger.info("Database schema initialized successfully")

    # -- authors -------------------------------------------------------------

    def find_author_by_name(self, name: str) -> Optional[Author]:
        """Get the author whose normalized name equals the normalized input."""
        with self._cursor() as cur:
            cur.execute(f"""
                SELECT {AUTHOR_COLUMNS} FROM authors
                WHERE name_normalized = %s
            """, (normalize(name),))

            row = cur.fetchone()
            return _row_to_author(row) if row else None

    def search_author_by_name(self, query: str) -> Optional[Author]:
        """
        Find the first author whose name contains the query.

        Matching is case and diacritic insensitive.

        Args:
            query: Full or partial author name

        Returns:
            First matching Author in catalog order, or None
        """
        pattern = f"%{_escape_like(normalize(query))}%"

        with self._cursor() as cur:
            cur.execute(f"""
                SELECT {AUTHOR_COLUMNS} FROM authors
                WHERE name_normalized LIKE %s ESCAPE '\\'
                ORDER BY id
                LIMIT 1
            """, (pattern,))

            row = cur.fetchone()
            return _row_to_author(row) if row else None

    def save_author(self, author: Author) -> Author:
        """
        Persist an author unless one with the same normalized name exists.

        The stored record wins: an existing author is returned as-is and
        the incoming birth/death years are ignored.

        Args:
            author: Author to persist

        Returns:
            Persisted Author with id populated
        """
        if author.id is not None:
            return author

        with self._cursor() as cur:
            return self._insert_or_fetch_author(cur, author)

    def _insert_or_fetch_author(self, cur, author: Author) -> Author:
        cur.execute(f"""
            INSERT INTO authors (name, name_normalized, birth_year, death_year)
            VALUES (%s, %s, %s, %s)
            ON CONFLICT (name_normalized) DO NOTHING
            RETURNING {AUTHOR_COLUMNS}
        """, (author.name.strip(), author.normalized_name, author.birth_year, author.death_year))

        row = cur.fetchone()
        if row:
            logger.info(f"Saved new author: {author.name}")
            return _row_to_author(row)

        # Lost the insert: someone already holds this normalized name
        cur.execute(f"""
            SELECT {AUTHOR_COLUMNS} FROM authors
            WHERE name_normalized = %s
        """, (author.normalized_name,))
        return _row_to_author(cur.fetchone())

    def list_authors(self) -> List[Author]:
        """List all authors in catalog order."""
        with self._cursor() as cur:
            cur.execute(f"SELECT {AUTHOR_COLUMNS} FROM authors ORDER BY id")
            return [_row_to_author(row) for row in cur.fetchall()]

    # -- books ---------------------------------------------------------------

    def save_book(self, book: Book) -> Book:
        """
        Insert a book with its languages and author links.

        Authors without an id are persisted first, in the same
        transaction. Nothing is written if the title is taken.

        Args:
            book: Book to persist

        Returns:
            Persisted Book with ids populated

        Raises:
            DuplicateTitle: A book with this exact title exists
        """
        if book.id is not None:
            return book

        title = book.title.strip()

        with self._cursor() as cur:
            authors = [
                a if a.id is not None else self._insert_or_fetch_author(cur, a)
                for a in book.authors
            ]

            try:
                cur.execute("""
                    INSERT INTO books (title, download_count)
                    VALUES (%s, %s)
                    RETURNING id
                """, (title, book.download_count or 0))
            except psycopg2.errors.UniqueViolation as e:
                logger.warning(f"Duplicate title rejected: {title}")
                raise DuplicateTitle(title) from e

            book_id = cur.fetchone()[0]

            languages = list(dict.fromkeys(book.languages))
            for language in languages:
                cur.execute("""
                    INSERT INTO book_languages (book_id, language)
                    VALUES (%s, %s)
                """, (book_id, language))

            linked = set()
            for position, author in enumerate(authors):
                if author.id in linked:
                    continue
                linked.add(author.id)
                cur.execute("""
                    INSERT INTO book_authors (book_id, author_id, position)
                    VALUES (%s, %s, %s)
                """, (book_id, author.id, position))

        logger.info(f"Saved book: {title} (id={book_id})")

        unique_authors = list({a.id: a for a in authors}.values())
        return Book(
            id=book_id,
            title=title,
            authors=unique_authors,
            languages=languages,
            download_count=book.download_count or 0,
            summaries=list(book.summaries)
        )

    def find_book_by_title(self, title: str) -> Optional[Book]:
        """Get a book by exact (trimmed) title."""
        books = self._select_books("WHERE title = %s", (title.strip(),))
        return books[0] if books else None

    def list_books(self) -> List[Book]:
        """List all books with authors and languages loaded."""
        return self._select_books("ORDER BY id")

    def list_books_by_author(self, author_id: int) -> List[Book]:
        """List the books linked to an author."""
        return self._select_books(
            "WHERE id IN (SELECT book_id FROM book_authors WHERE author_id = %s) ORDER BY id",
            (author_id,)
        )

    def top_books_by_downloads(self, limit: int = 10) -> List[Book]:
        """
        Rank books by download count.

        Ties keep insertion order (ascending id).

        Args:
            limit: Maximum number of books

        Returns:
            Books, most downloaded first
        """
        if limit <= 0:
            return []
        return self._select_books(
            "ORDER BY download_count DESC, id ASC LIMIT %s",
            (limit,)
        )

    def _select_books(self, clause: str, params: Sequence[Any] = ()) -> List[Book]:
        """Run a books query and hydrate languages and authors for the rows."""
        with self._cursor() as cur:
            cur.execute(f"SELECT {BOOK_COLUMNS} FROM books {clause}", tuple(params))
            rows = cur.fetchall()
            if not rows:
                return []

            books: Dict[int, Book] = {
                row[0]: Book(id=row[0], title=row[1], download_count=row[2])
                for row in rows
            }
            book_ids = list(books)

            cur.execute("""
                SELECT book_id, language FROM book_languages
                WHERE book_id = ANY(%s)
                ORDER BY book_id, language
            """, (book_ids,))
            for book_id, language in cur.fetchall():
                books[book_id].languages.append(language)

            cur.execute("""
                SELECT ba.book_id, a.id, a.name, a.birth_year, a.death_year
                FROM book_authors ba
                JOIN authors a ON a.id = ba.author_id
                WHERE ba.book_id = ANY(%s)
                ORDER BY ba.book_id, ba.position
            """, (book_ids,))
            for row in cur.fetchall():
                books[row[0]].authors.append(_row_to_author(row[1:]))

        # Dict keeps the order of the main query
        return list(books.values())

    def get_stats(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        with self._cursor() as cur:
            cur.execute("SELECT COUNT(*) FROM authors")
            author_count = cur.fetchone()[0]

            cur.execute("SELECT COUNT(*) FROM books")
            book_count = cur.fetchone()[0]

            return {
                "total_authors": author_count,
                "total_books": book_count
            }

    def close(self):
        """Close all connections in the pool."""
        if self.connection_pool:
            self.connection_pool.closeall()
            logger.info("Database connection pool closed")

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
