"""Leaf contracts shared by every modelize subsystem.

This package performs no I/O and imports nothing from the rest of modelize,
so any module may depend on it.
"""

from modelize.contracts.enums import (
    Association,
    HttpMethod,
    OperationClass,
    ValidationErrorCode,
)
from modelize.contracts.errors import (
    ConfigurationError,
    CredentialsError,
    ModelizeError,
    TransportError,
    ValidationIssue,
)
from modelize.contracts.events import FetchFailed, ValidationFailed
from modelize.contracts.results import ValidationResult

__all__ = [
    "Association",
    "ConfigurationError",
    "CredentialsError",
    "FetchFailed",
    "HttpMethod",
    "ModelizeError",
    "OperationClass",
    "TransportError",
    "ValidationErrorCode",
    "ValidationFailed",
    "ValidationIssue",
    "ValidationResult",
]
