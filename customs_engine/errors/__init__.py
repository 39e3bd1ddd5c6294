"""Error handling module."""
from customs_engine.errors.exceptions import (
    CustomsEngineError,
    IntegrityViolationError,
    RuleConfigurationError,
    ProductDirectoryError,
)

__all__ = [
    "CustomsEngineError",
    "IntegrityViolationError",
    "RuleConfigurationError",
    "ProductDirectoryError",
]
