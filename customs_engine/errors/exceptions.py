"""Custom exception hierarchy for the customs engine.

Unclassified items and unmatched lines are ordinary results, not errors.
Exceptions are reserved for broken contracts and misconfigured rule tables.
"""
from typing import Any, Dict, Optional


class CustomsEngineError(Exception):
    """Base exception for all customs engine errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """Initialize error with message and optional structured details."""
        super().__init__(message)
        self.message = message
        self.details = details or {}


class IntegrityViolationError(CustomsEngineError):
    """Raised when an operation would corrupt declaration data.

    Covers a reconciliation that would drop declaration lines and a pairing
    that assigns the same declaration line or item twice.
    """
    pass


class RuleConfigurationError(CustomsEngineError):
    """Raised when a rule table is invalid (duplicate precedence, bad regex)."""
    pass


class ProductDirectoryError(CustomsEngineError):
    """Raised by product directory collaborators when a lookup fails."""
    pass
