"""Field type contract: the five-operation bundle every field type implements."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from modelize.contracts.enums import Association

if TYPE_CHECKING:
    from modelize.model.kind import Model


@dataclass(frozen=True, slots=True)
class FieldType:
    """Immutable description of how one kind of field behaves.

    Contract:
    - is_valid and is_blank never raise for values of the expected runtime
      shape. They are evaluated independently of each other.
    - from_wire(to_wire(v)) is semantically equal to v for every valid v of a
      static type.

    Attributes:
        name: Registry key (e.g. "string", "integer")
        default_value: Constant, or a factory taking no argument or the owning
            record's primary key. Constants are copied on each use.
        is_blank: Whether a value counts as "not filled in"
        is_valid: Whether a non-blank value is acceptable for this type
        to_wire: Serialize a client value for the JSON payload
        from_wire: Deserialize a JSON value into a client value
        association: Relation kind for association types, None for static types
        target: Referenced model for association types
    """

    name: str
    default_value: Any
    is_blank: Callable[[Any], bool]
    is_valid: Callable[[Any], bool]
    to_wire: Callable[[Any], Any]
    from_wire: Callable[[Any], Any]
    association: Association | None = None
    target: Model | None = None

    @property
    def is_association(self) -> bool:
        return self.association is not None

    def __repr__(self) -> str:
        if self.target is not None:
            return f"FieldType({self.association}:{self.target.name})"
        return f"FieldType({self.name})"


def identity(value: Any) -> Any:
    return value
