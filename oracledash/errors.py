"""Custom exceptions for the oracle dashboard."""


class OracleDashError(Exception):
    """Base exception for oracle dashboard errors."""
    pass


class TransportFailure(OracleDashError):
    """Raised when the oracle fetch could not complete (network, HTTP status, decode)."""
    pass


class MalformedPayload(OracleDashError):
    """Raised when a decoded oracle payload is not a sequence of records."""
    pass


class ConfigurationError(OracleDashError):
    """Raised when configuration is invalid."""
    pass
