"""
Custom exceptions for the scheduling engine.

Ordinary user interaction never raises: rejected drops and exhausted slot
searches are returned as results. These exceptions cover malformed input and
programmer errors only.
"""

from typing import Any, Optional


class PlanboardError(Exception):
    """Base exception for planboard."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(PlanboardError):
    """Resource not found."""

    pass


class ValidationError(PlanboardError):
    """Malformed input (bad duration, inconsistent intent, etc.)."""

    pass


class ConfigurationError(PlanboardError):
    """Invalid engine configuration."""

    pass


class SessionStateError(PlanboardError):
    """Illegal interaction state transition."""

    def __init__(self, message: str, current: str, target: str):
        super().__init__(message, details={"current": current, "target": target})
        self.current = current
        self.target = target
