"""Per-field validator state and the recursive field-list validator.

A field list names what the caller is about to send. Each entry is:

- ``"field"``: check one field directly.
- ``("field", [...])``: check an association field and recurse into the
  referenced record(s) with the nested list. For has_many the collection
  itself is checked first, then every item.
- anything else: recorded as SYNTAX_ERROR.

Every entry is processed even after a failure, so all errors are reported
at once. Checked fields are the ones the serializer will include.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from modelize.contracts.enums import Association, ValidationErrorCode
from modelize.contracts.results import ValidationResult
from modelize.schema import FieldConfig, Schema

if TYPE_CHECKING:
    from modelize.model.records import Entity


@dataclass(slots=True)
class ValidatorState:
    """Validation bookkeeping of one field of one entity.

    Attributes:
        field: Resolved field configuration
        checked: Whether the field was validated (or bypasses validation);
            only checked fields are serialized
    """

    field: FieldConfig
    checked: bool = False

    def is_valid(self, value: Any, owner: Any = None) -> bool:
        return self.field.is_acceptable(value, owner)


def build_validator(schema: Schema) -> dict[str, ValidatorState]:
    """Fresh validator map; bypassing fields start out checked."""
    return {fc.name: ValidatorState(field=fc, checked=fc.bypass_validation) for fc in schema}


def _not_found(name: Any) -> ValidationResult:
    return ValidationResult.failure({"field": name, "error": ValidationErrorCode.NOT_FOUND})


def _check_direct(entity: Entity, name: str) -> ValidationResult:
    if name not in entity or name not in entity.validator:
        return _not_found(name)

    state = entity.validator[name]
    state.checked = True
    value = entity[name]
    if not state.is_valid(value, entity):
        return ValidationResult.failure({"field": name, "error": ValidationErrorCode.NOT_VALID, "value": value})
    return ValidationResult.success()


def _check_association(entity: Entity, name: Any, nested: Any) -> ValidationResult:
    if nested is None:
        nested = ()
    if not isinstance(name, str) or not isinstance(nested, (list, tuple)):
        return ValidationResult.failure({"field": (name, nested), "error": ValidationErrorCode.SYNTAX_ERROR})
    if name not in entity or name not in entity.validator:
        return _not_found(name)

    state = entity.validator[name]
    state.checked = True
    association = state.field.type.association
    value = entity[name]

    if association in (Association.BELONGS_TO, Association.HAS_ONE):
        if not state.field.type.target.is_entity(value):
            # Nothing to descend into; report the field itself
            return _check_direct(entity, name)
        return mark_valid(value, nested)

    if association is Association.HAS_MANY:
        results = [_check_direct(entity, name)]
        if state.field.type.target.is_collection(value):
            results.extend(mark_valid(item, nested) for item in value)
        return ValidationResult.combine(results)

    # Static field used with a nested list: validate it as a direct field
    return _check_direct(entity, name)


def mark_valid(entity: Entity, field_list: Sequence[Any]) -> ValidationResult:
    """Validate a field list against an entity, marking each listed field checked.

    Args:
        entity: Entity to validate (nested entities are reached through pairs)
        field_list: Field names and (association, nested list) pairs

    Returns:
        ValidationResult with every failure in list order

    Raises:
        TypeError: If field_list is not a list or tuple
    """
    if not isinstance(field_list, (list, tuple)):
        raise TypeError(f"field list must be a list or tuple, got {type(field_list).__name__}")

    results: list[ValidationResult] = []
    for entry in field_list:
        if isinstance(entry, str):
            results.append(_check_direct(entity, entry))
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            results.append(_check_association(entity, entry[0], entry[1]))
        else:
            results.append(ValidationResult.failure({"field": entry, "error": ValidationErrorCode.SYNTAX_ERROR}))
    return ValidationResult.combine(results)
