"""Parse and normalize Gutendex API responses."""
import logging
from typing import Dict, Any, List, Optional

from litcatalog.models import Author, SearchResult, SearchResponse

logger = logging.getLogger(__name__)


def _optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def parse_author(item: Dict[str, Any]) -> Optional[Author]:
    """
    Parse one entry of a record's `authors` list.

    Args:
        item: Author object from the API

    Returns:
        Unsaved Author or None if the entry has no name
    """
    name = (item.get("name") or "").strip()
    if not name:
        return None

    return Author(
        name=name,
        birth_year=_optional_int(item.get("birth_year")),
        death_year=_optional_int(item.get("death_year")),
    )


def parse_result(item: Dict[str, Any]) -> Optional[SearchResult]:
    """
    Parse a single book record from Gutendex.

    Args:
        item: Single entry of the `results` list

    Returns:
        SearchResult or None if parsing fails
    """
    try:
        title = (item.get("title") or "").strip()
        if not title:
            return None

        authors = []
        for entry in item.get("authors") or []:
            author = parse_author(entry)
            if author:
                authors.append(author)

        # Language codes are kept lower-case and unique
        languages = []
        for code in item.get("languages") or []:
            code = (code or "").strip().lower()
            if code and code not in languages:
                languages.append(code)

        download_count = max(int(item.get("download_count") or 0), 0)
        summaries = [s for s in item.get("summaries") or [] if s]

        return SearchResult(
            title=title,
            authors=authors,
            languages=languages,
            download_count=download_count,
            summaries=summaries
        )
    except (TypeError, ValueError, AttributeError) as e:
        # Log but don't crash - APIs can be unpredictable
        logger.warning(f"Failed to parse search result: {e}")
        return None


def parse_search_response(response_json: Dict[str, Any]) -> SearchResponse:
    """
    Parse full Gutendex search response.

    Args:
        response_json: Complete API response JSON

    Returns:
        SearchResponse (empty results if nothing matched)
    """
    results: List[SearchResult] = []

    for item in response_json.get("results") or []:
        result = parse_result(item)
        if result:
            results.append(result)

    total = response_json.get("count")
    if total is None:
        total = len(results)

    return SearchResponse(total=int(total), results=results)
