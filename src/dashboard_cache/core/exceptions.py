"""Cache exceptions.

All errors raised by dashboard-cache inherit from CacheError and carry an
error code plus structured details, so API layers can render them
consistently.
"""

from typing import Any, Dict, Optional


class CacheError(Exception):
    """Base exception for all cache errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class InvalidPatternError(CacheError, ValueError):
    """Raised when an invalidation pattern is not a valid regular expression."""

    def __init__(self, pattern: str, reason: str, cache_name: Optional[str] = None):
        super().__init__(
            f"Invalid invalidation pattern '{pattern}': {reason}",
            details={"pattern": pattern, "cache_name": cache_name},
        )
        self.pattern = pattern


class CacheConfigurationError(CacheError, ValueError):
    """Raised when a cache configuration value is invalid."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        super().__init__(message, details={"config_key": config_key} if config_key else None)
        self.config_key = config_key


class UnknownEventKindError(CacheError, ValueError):
    """Raised when an event key does not name a known domain/action pair."""

    def __init__(self, event_key: str):
        super().__init__(f"Unknown invalidation event kind: {event_key}", details={"event_key": event_key})
        self.event_key = event_key


def create_error_response(exception: CacheError) -> Dict[str, Any]:
    """Create standardized error response from exception."""
    return {
        "error": {
            "code": exception.error_code,
            "message": exception.message,
            "details": exception.details,
            "type": exception.__class__.__name__,
        }
    }
