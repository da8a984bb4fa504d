class EphemTimeError(Exception):
    """Base error."""

class DomainRangeError(EphemTimeError, ValueError):
    """Raised when a constructor argument lies outside its valid range."""

class UnsupportedOperationError(EphemTimeError, NotImplementedError):
    """Raised by operations that are intentionally not implemented yet."""

class DataSourceError(EphemTimeError):
    """Raised when an external data file cannot be read."""
