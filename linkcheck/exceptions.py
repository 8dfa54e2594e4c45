"""
Exceptions raised by the link checker.

Per-URL failures never surface as exceptions; they are recorded as results.
Only construction-time problems are raised to the caller.
"""


class LinkCheckError(ValueError):
    """Base exception for link checker failures."""
    pass


class InvalidSeedURLError(LinkCheckError):
    """Raised when the seed URL is not an absolute http(s) URL."""
    pass


class ConfigError(LinkCheckError):
    """Raised when configuration values are missing or out of range."""
    pass
