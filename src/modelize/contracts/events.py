"""Events broadcast to the error sink.

Emitted through modelize.core.events.EventBus. Subscribers receive the
event instance; nothing is published on a process-wide bus.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from modelize.contracts.enums import HttpMethod
from modelize.contracts.errors import ValidationIssue


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class FetchFailed:
    """Emitted when a fetch or save settles in the Failure state.

    Attributes:
        model: Name of the model the request was issued for
        method: HTTP verb of the failed request
        url: Full request URL
        status: HTTP status code, None when no response was received
        reason: Human-readable description (timeout, status, transport error)
        response: Raw transport response, if any
        error: Exception that ended the request (TransportError for a bad status)
        timestamp: When the failure was recorded (UTC)
    """

    model: str
    method: HttpMethod
    url: str
    status: int | None
    reason: str
    response: Any = None
    error: BaseException | None = None
    timestamp: datetime = field(default_factory=_now)


@dataclass(frozen=True, slots=True)
class ValidationFailed:
    """Emitted by Entity.valid() when the field list does not validate.

    Attributes:
        model: Name of the model of the validated entity
        errors: Every collected validation issue
        timestamp: When validation ran (UTC)
    """

    model: str
    errors: tuple[ValidationIssue, ...]
    timestamp: datetime = field(default_factory=_now)
