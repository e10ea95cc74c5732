"""Failures raised while reading the catalogue."""


class CatalogError(Exception):
    """Base class for catalogue failures."""

    status_code = 500


class NetworkFailure(CatalogError):
    """Transport error, non-2xx status, or a GraphQL error payload."""


class ParseFailure(CatalogError):
    """Response body did not have the expected shape."""


class NotFound(CatalogError):
    """Requested tool or category does not exist."""

    status_code = 404


class BookmarkLimitReached(Exception):
    """Adding a bookmark would outgrow the storage it lives in."""
