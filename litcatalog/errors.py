"""Typed failures raised by the catalog.

Callers only ever see one of these; driver and transport errors are
wrapped and chained.
"""


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    pass


class ValidationFailure(CatalogError):
    """Malformed caller input (empty title, out of range year, ...)."""

    pass


class SearchFailure(CatalogError):
    """Transport error or non-success response from the search service."""

    pass


class DuplicateTitle(CatalogError):
    """A book with the same title is already catalogued."""

    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Book already catalogued: {title}")


class StorageFailure(CatalogError):
    """Database unreachable or a write was rejected."""

    pass
