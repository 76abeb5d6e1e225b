"""Exception hierarchy for the phone directory."""

from typing import Any, Dict, Optional


class PhoneDirectoryError(Exception):
    """Base exception for all phone directory errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(PhoneDirectoryError, ValueError):
    """Raised when a proposed field value is rejected."""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, details)
        self.field = field


class PersistenceError(PhoneDirectoryError):
    """Raised when durable storage cannot be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        details = {"path": path} if path else {}
        super().__init__(message, details)
        self.path = path
