"""Validation result contract."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from modelize.contracts.errors import ValidationIssue


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of validating a field list against an entity.

    Purely derived data: every error is collected, not just the first one,
    so callers can report all invalid fields at once.

    Attributes:
        is_valid: False if any entry of the field list failed
        errors: Every failure, in field list order (nested failures inline)
    """

    is_valid: bool
    errors: tuple[ValidationIssue, ...] = ()

    def __bool__(self) -> bool:
        return self.is_valid

    @classmethod
    def success(cls) -> ValidationResult:
        return cls(is_valid=True)

    @classmethod
    def failure(cls, issue: ValidationIssue) -> ValidationResult:
        return cls(is_valid=False, errors=(issue,))

    @classmethod
    def combine(cls, results: Iterable[ValidationResult]) -> ValidationResult:
        """Aggregate results; the combination fails if any part failed."""
        is_valid = True
        errors: list[ValidationIssue] = []
        for result in results:
            if not result.is_valid:
                is_valid = False
                errors.extend(result.errors)
        return cls(is_valid=is_valid, errors=tuple(errors))

    def error_fields(self) -> list[object]:
        """Field names (or offending entries) of every recorded error."""
        return [issue["field"] for issue in self.errors]
