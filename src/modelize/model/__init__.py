"""Records, validation, serialization and the model factory."""

from modelize.model.kind import Model
from modelize.model.lifecycle import LifecycleStates
from modelize.model.records import Collection, Entity, Record
from modelize.model.serialization import to_wire_payload
from modelize.model.validation import ValidatorState, mark_valid

__all__ = [
    "Collection",
    "Entity",
    "LifecycleStates",
    "Model",
    "Record",
    "ValidatorState",
    "mark_valid",
    "to_wire_payload",
]
