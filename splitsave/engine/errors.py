"""
Engine Exceptions

DESIGN DECISION: The engine fails loudly and specifically.
There are no transient failures in pure computation, so nothing here
is retryable. The integrating layer turns these into user-facing messages.

The only sanctioned silent defaults are:
1. Disposable income floored at zero
2. The 50/50 fallback ratio when neither partner has disposable income
"""

from typing import Optional


class EngineError(Exception):
    """Base exception for budget engine errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class ValidationError(EngineError):
    """Invalid input shape or out-of-domain value."""
    pass


class ConfigurationError(EngineError):
    """Policy input out of range (e.g. coverage months <= 0)."""
    pass
