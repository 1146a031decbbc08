"""Exceptions raised while building or rewriting a table catalog."""


class CatalogError(Exception):
    """Base class for catalog build and rewrite failures."""

    pass


class QueryRewriteError(CatalogError):
    """Raised when a definition query cannot be retargeted to another database."""

    def __init__(self, database: str, target_database: str, query: str):
        self.database = database
        self.target_database = target_database
        self.query = query
        super().__init__(
            f"error when try to replace database `{database}` to "
            f"`{target_database}` in query: {query}"
        )


class CatalogBuildCancelled(CatalogError):
    """Raised when a remote catalog build is cancelled by the caller."""

    pass


class PatternError(ValueError):
    """Raised for a malformed table glob pattern."""

    pass
