"""Exception taxonomy and structured error payloads.

Three classes of failure exist:

- ConfigurationError: programmer errors detected while compiling schemas or
  defining models. Fatal, raised synchronously.
- Validation failures: expected and recoverable. Never raised; returned as
  ValidationIssue entries inside a ValidationResult.
- TransportError: remote failures. Raised by transports and payload parsing,
  then caught at the fetch boundary and surfaced as lifecycle flags.
"""

from typing import Any, NotRequired, TypedDict

from modelize.contracts.enums import ValidationErrorCode


class ValidationIssue(TypedDict):
    """One failed entry of a validation field list."""

    field: Any  # Field name, or the offending list entry for SYNTAX_ERROR
    error: ValidationErrorCode
    value: NotRequired[Any]  # Current value, present for NOT_VALID


class ModelizeError(Exception):
    """Base class for all errors raised by modelize."""


class ConfigurationError(ModelizeError):
    """Raised when a schema, model or engine is configured incorrectly.

    Examples: a field without a type, a schema without exactly one primary
    key, authorization required without a token provider.
    """


class CredentialsError(ModelizeError):
    """Raised when the auth token provider returns no token.

    A private endpoint cannot be called without credentials, so this is
    raised to the caller instead of being converted into a failure state.
    """


class TransportError(ModelizeError):
    """Raised when a request cannot be completed or returns a non-success status.

    Attributes:
        status: HTTP status code, None when no response was received
        response: Raw response object from the transport, if any
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response: Any = None,
    ) -> None:
        self.status = status
        self.response = response
        super().__init__(message)
