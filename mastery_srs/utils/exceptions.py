"""Custom exception classes for the scheduling engine."""
from typing import Any, Dict, Optional


class MasterySRSException(Exception):
    """Base exception for the library."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(MasterySRSException):
    """Invalid engine or store wiring."""
    pass


class SessionMemoryError(MasterySRSException):
    """Session memory lifecycle errors."""
    pass
