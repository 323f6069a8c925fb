"""Registration table of named field types.

Schemas may reference a static type by name. The table only grows through
explicit register() calls on a registry owned by an engine, never through
mutation of a shared module-level object.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from modelize.contracts.errors import ConfigurationError
from modelize.types.base import FieldType
from modelize.types.scalars import STATIC_TYPES


class TypeRegistry:
    """Name -> FieldType lookup table.

    Example:
        registry = builtin_registry()
        registry.register(FieldType(name="siret", ...))
        registry.get("siret")
    """

    def __init__(self, field_types: Iterable[FieldType] = ()) -> None:
        self._types: dict[str, FieldType] = {}
        for field_type in field_types:
            self.register(field_type)

    def register(self, field_type: FieldType, *, replace: bool = False) -> FieldType:
        """Add a field type under its name.

        Raises:
            ConfigurationError: If the name is taken and replace is False,
                or if field_type is an association type
        """
        if field_type.is_association:
            raise ConfigurationError(
                f"Association type '{field_type.name}' is parameterized by a model and cannot be registered"
            )
        if field_type.name in self._types and not replace:
            raise ConfigurationError(f"Field type '{field_type.name}' is already registered")
        self._types[field_type.name] = field_type
        return field_type

    def get(self, name: str) -> FieldType:
        """Look up a field type by name.

        Raises:
            ConfigurationError: If no type is registered under that name
        """
        try:
            return self._types[name]
        except KeyError:
            raise ConfigurationError(
                f"Unknown field type '{name}'. Registered types: {', '.join(sorted(self._types))}"
            ) from None

    def names(self) -> list[str]:
        return list(self._types)

    def copy(self) -> TypeRegistry:
        return TypeRegistry(self._types.values())

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[FieldType]:
        return iter(self._types.values())

    def __len__(self) -> int:
        return len(self._types)


def builtin_registry() -> TypeRegistry:
    """Fresh registry holding every static type."""
    return TypeRegistry(STATIC_TYPES)
