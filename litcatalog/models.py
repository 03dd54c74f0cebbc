"""Data models for authors and books."""
from dataclasses import dataclass, field
from datetime import date
from typing import Optional, List

from litcatalog.normalize import normalize


@dataclass
class Author:
    """Catalogued author. `id` is None until persisted."""
    name: str
    birth_year: Optional[int] = None
    death_year: Optional[int] = None
    id: Optional[int] = None

    @property
    def normalized_name(self) -> str:
        """Name used for uniqueness and lookups."""
        return normalize(self.name)

    @property
    def is_alive(self) -> bool:
        """No recorded death year means presumed alive."""
        return self.death_year is None

    def is_alive_in(self, year: int) -> bool:
        """
        Check whether the author was alive in a given year.

        Both ends are inclusive. Without a birth year the author
        cannot be proven alive.

        Args:
            year: Year to check

        Returns:
            True if alive in that year
        """
        if self.birth_year is None:
            return False
        if year < self.birth_year:
            return False
        return self.death_year is None or year <= self.death_year

    @property
    def age(self) -> Optional[int]:
        """Age at death, or current age if alive."""
        if self.birth_year is None:
            return None
        reference = self.death_year if self.death_year is not None else date.today().year
        return reference - self.birth_year

    @property
    def lifespan_str(self) -> str:
        """Format life period, e.g. '1839 - 1908'."""
        if self.birth_year is None:
            return "Unknown"
        end = self.death_year if self.death_year is not None else "present"
        return f"{self.birth_year} - {end}"


@dataclass
class Book:
    """Catalogued book. Summaries are carried for display only."""
    title: str
    authors: List[Author] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    download_count: int = 0
    summaries: List[str] = field(default_factory=list)
    id: Optional[int] = None

    @property
    def authors_str(self) -> str:
        """Format authors as comma-separated string."""
        return ", ".join(a.name for a in self.authors) if self.authors else "Unknown"

    @property
    def languages_str(self) -> str:
        """Format languages as comma-separated string."""
        return ", ".join(self.languages) if self.languages else "None"

    @property
    def first_summary(self) -> Optional[str]:
        """First non-blank summary, if any."""
        for summary in self.summaries:
            if summary and summary.strip():
                return summary
        return None


@dataclass
class SearchResult:
    """One record from the search service, before it touches the catalog."""
    title: str
    authors: List[Author] = field(default_factory=list)
    languages: List[str] = field(default_factory=list)
    download_count: int = 0
    summaries: List[str] = field(default_factory=list)


@dataclass
class SearchResponse:
    """Full search response; `total` is the service-side match count."""
    total: int
    results: List[SearchResult] = field(default_factory=list)

    @property
    def first(self) -> Optional[SearchResult]:
        """The result picked for import."""
        return self.results[0] if self.results else None
