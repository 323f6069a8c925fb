"""Association field types, parameterized by the referenced model.

- belongs_to: a single foreign-keyed record; defaults to a stub entity
- has_one: a single dependent record sharing the owner's primary key
- has_many: an ordered collection; defaults to an empty collection

Serialization and deserialization delegate to the referenced model, so
nested records are validated, serialized and constructed recursively.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from modelize.contracts.enums import Association
from modelize.types.base import FieldType

if TYPE_CHECKING:
    from modelize.model.kind import Model


def _is_none(value: Any) -> bool:
    return value is None


def _single_from_wire(target: Model) -> Any:
    def from_wire(value: Any) -> Any:
        if value is None or target.is_entity(value):
            return value
        return target.from_wire(value)

    return from_wire


def _single_is_valid(target: Model) -> Any:
    def is_valid(value: Any) -> bool:
        if not target.is_entity(value):
            return False
        pk_field = target.schema.primary_key_field
        return pk_field.name in value and not pk_field.type.is_blank(value[pk_field.name])

    return is_valid


def belongs_to(target: Model) -> FieldType:
    """Field referencing one record of target, owned through a foreign key."""
    return FieldType(
        name=f"belongs_to:{target.name}",
        default_value=lambda: target.build(),
        is_blank=_is_none,
        is_valid=_single_is_valid(target),
        to_wire=target.to_wire,
        from_wire=_single_from_wire(target),
        association=Association.BELONGS_TO,
        target=target,
    )


def has_one(target: Model) -> FieldType:
    """Field holding the single dependent record of target for this owner.

    The default dependent is built with the owner's primary key.
    """
    return FieldType(
        name=f"has_one:{target.name}",
        default_value=lambda primary_key: target.build(primary_key=primary_key),
        is_blank=_is_none,
        is_valid=_single_is_valid(target),
        to_wire=target.to_wire,
        from_wire=_single_from_wire(target),
        association=Association.HAS_ONE,
        target=target,
    )


def has_many(target: Model) -> FieldType:
    """Field holding an ordered collection of target records."""

    def from_wire(value: Any) -> Any:
        if value is None or target.is_collection(value):
            return value
        return target.from_wire(list(value))

    return FieldType(
        name=f"has_many:{target.name}",
        default_value=lambda: target.collection(),
        is_blank=lambda value: value is None or len(value) == 0,
        is_valid=target.is_collection,
        to_wire=target.to_wire,
        from_wire=from_wire,
        association=Association.HAS_MANY,
        target=target,
    )
