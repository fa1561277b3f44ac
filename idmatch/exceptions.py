"""
Domain-specific exception classes for catalog ID matching.
"""


class IdMatchError(Exception):
    """Base exception class for catalog ID matching."""


class MalformedRowError(IdMatchError):
    """Raised when a tokenized row does not fit its row contract.

    Loaders catch this, log a warning and skip the row.
    """


class FatalCatalogError(IdMatchError):
    """Raised when the internal catalog itself is corrupt (bad or repeated id)."""


class ConfigError(IdMatchError):
    """Raised for configuration-related errors."""
