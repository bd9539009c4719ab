"""Analytics domain exceptions module."""


class AnalyticsError(Exception):
    """Base class for analytics errors."""


class InvalidArgument(AnalyticsError, ValueError):
    """Caller input is malformed or out of range."""


class StoreUnavailable(AnalyticsError):
    """The transaction store cannot be reached or timed out."""
