"""
Core package.

Exceptions and logging setup shared by the ingestion services.
"""

from .exceptions import (
    IngestError,
    ConfigurationError,
    AuthError,
    ListError,
    InvocationError,
)

__all__ = [
    "IngestError",
    "ConfigurationError",
    "AuthError",
    "ListError",
    "InvocationError",
]
