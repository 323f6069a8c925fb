"""Serialization of records into wire payloads.

Only fields that are checked (validated, or bypassing validation) AND
currently acceptable are included. Unchecked or failing fields are omitted
silently: the payload is a best-effort partial update of exactly what was
validated, so callers run valid() with the same field list before saving.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modelize.model.records import Collection, Entity


def entity_payload(entity: Entity) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for name, state in entity.validator.items():
        if name not in entity or not state.checked:
            continue
        value = entity[name]
        if state.is_valid(value, entity):
            payload[name] = state.field.type.to_wire(value)
    return payload


def to_wire_payload(record: Entity | Collection) -> dict[str, Any] | list[dict[str, Any]]:
    """Serialize an entity to a dict, or a collection to a list of dicts."""
    if record.is_collection:
        return [entity_payload(item) for item in record]
    return entity_payload(record)
