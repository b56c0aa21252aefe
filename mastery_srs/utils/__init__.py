"""Utility helpers package."""

from mastery_srs.utils.exceptions import (
    ConfigurationError,
    MasterySRSException,
    SessionMemoryError,
)

__all__ = ["ConfigurationError", "MasterySRSException", "SessionMemoryError"]
