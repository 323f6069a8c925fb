"""Schema compilation.

Turns a raw ``{field_name: field_spec}`` mapping into an immutable Schema:
types resolved, defaults normalized to factories, exactly one primary key
identified and the bypass-validation policy applied. All configuration
errors surface here, when a model is defined, never when records are built.

Field spec keys:
    type (required): FieldType, or the name of a registered type
    default: constant or factory (no argument, or the record's primary key)
    allow_blank: accept blank values (default False)
    primary_key: mark the primary-key field (exactly one per schema)
    custom_valid: extra predicate ``(value, owner) -> bool`` (default: always true)
"""

from __future__ import annotations

import copy
import inspect
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from modelize.contracts.errors import ConfigurationError
from modelize.types.base import FieldType
from modelize.types.registry import TypeRegistry, builtin_registry

logger = structlog.get_logger(__name__)

DefaultFactory = Callable[[Any], Any]
CustomValid = Callable[[Any, Any], bool]
BypassPolicy = Callable[[str], bool]

_FIELD_SPEC_KEYS = frozenset({"type", "default", "allow_blank", "primary_key", "custom_valid"})

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def _always_valid(value: Any, owner: Any) -> bool:
    return True


def _never_bypass(name: str) -> bool:
    return False


def always_sent(field_names: Iterable[str]) -> BypassPolicy:
    """Bypass policy exempting a fixed set of field names from validation."""
    names = frozenset(field_names)
    return names.__contains__


@dataclass(frozen=True, slots=True)
class FieldConfig:
    """Resolved configuration of one schema field.

    Attributes:
        name: Field name, as used on the wire
        type: Field type contract
        default_factory: Called with the record's primary key (or None)
        allow_blank: Whether a blank value is acceptable
        primary_key: Whether this is the schema's primary-key field
        bypass_validation: Starts out checked, so it is always serialized
        custom_valid: Extra predicate evaluated with the owning record
    """

    name: str
    type: FieldType
    default_factory: DefaultFactory
    allow_blank: bool = False
    primary_key: bool = False
    bypass_validation: bool = False
    custom_valid: CustomValid = _always_valid

    def default(self, primary_key: Any = None) -> Any:
        return self.default_factory(primary_key)

    def is_acceptable(self, value: Any, owner: Any = None) -> bool:
        """Blank-and-allowed or non-blank-and-valid, AND the custom predicate."""
        is_blank = self.type.is_blank(value)
        if is_blank:
            accepted = self.allow_blank
        else:
            accepted = self.type.is_valid(value)
        return accepted and bool(self.custom_valid(value, owner))


@dataclass(frozen=True, slots=True)
class Schema:
    """Ordered, immutable set of resolved fields with exactly one primary key."""

    fields: tuple[FieldConfig, ...]

    _by_name: dict[str, FieldConfig] = field(default_factory=dict, repr=False, compare=False, hash=False)
    _primary_key: str = field(default="", repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        """Index fields by name and locate the primary key.

        Raises:
            ConfigurationError: On duplicate names or a primary-key count other than one
        """
        by_name: dict[str, FieldConfig] = {}
        for fc in self.fields:
            if fc.name in by_name:
                raise ConfigurationError(f"Duplicate field '{fc.name}' in schema")
            by_name[fc.name] = fc

        primary_keys = [fc.name for fc in self.fields if fc.primary_key]
        if not primary_keys:
            raise ConfigurationError("Required property 'primary_key' not found in the schema")
        if len(primary_keys) > 1:
            raise ConfigurationError(f"Schema declares several primary keys: {', '.join(primary_keys)}")

        object.__setattr__(self, "_by_name", by_name)
        object.__setattr__(self, "_primary_key", primary_keys[0])

    @property
    def primary_key(self) -> str:
        """Name of the primary-key field."""
        return self._primary_key

    @property
    def primary_key_field(self) -> FieldConfig:
        return self._by_name[self._primary_key]

    def get(self, name: str) -> FieldConfig | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [fc.name for fc in self.fields]

    def __getitem__(self, name: str) -> FieldConfig:
        return self._by_name[name]

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __iter__(self) -> Iterator[FieldConfig]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)


def normalize_default(default: Any) -> DefaultFactory:
    """Wrap a constant or factory into a one-argument factory.

    Factories declaring a required positional parameter receive the record's
    primary key; others are called without arguments. Constants are deep
    copied so records never share a mutable default.
    """
    if not callable(default):
        return lambda primary_key: copy.deepcopy(default)

    try:
        parameters = list(inspect.signature(default).parameters.values())
    except (TypeError, ValueError):
        # Builtins without introspectable signatures (dict, list, ...)
        return lambda primary_key: default()

    wants_key = any(
        (p.kind in _POSITIONAL and p.default is inspect.Parameter.empty) or p.kind is inspect.Parameter.VAR_POSITIONAL
        for p in parameters
    )
    if wants_key:
        return default
    return lambda primary_key: default()


def _compile_field(
    name: str,
    spec: Mapping[str, Any],
    registry: TypeRegistry,
    bypass: BypassPolicy,
) -> FieldConfig:
    if not isinstance(spec, Mapping):
        raise ConfigurationError(f"Field '{name}' must be declared with a mapping, got {type(spec).__name__}")

    unknown = set(spec) - _FIELD_SPEC_KEYS
    if unknown:
        raise ConfigurationError(f"Field '{name}' has unknown options: {', '.join(sorted(unknown))}")

    if "type" not in spec:
        raise ConfigurationError(f"`type` is required on field '{name}'")
    field_type = spec["type"]
    if isinstance(field_type, str):
        field_type = registry.get(field_type)
    elif not isinstance(field_type, FieldType):
        raise ConfigurationError(f"Field '{name}' has an invalid type: {field_type!r}")

    default = spec["default"] if "default" in spec else field_type.default_value
    primary_key = bool(spec.get("primary_key", False))

    return FieldConfig(
        name=name,
        type=field_type,
        default_factory=normalize_default(default),
        allow_blank=bool(spec.get("allow_blank", False)),
        primary_key=primary_key,
        bypass_validation=primary_key or bypass(name),
        custom_valid=spec.get("custom_valid", _always_valid),
    )


def compile_schema(
    fields: Mapping[str, Mapping[str, Any]],
    *,
    registry: TypeRegistry | None = None,
    bypass: BypassPolicy | None = None,
) -> Schema:
    """Compile a raw field mapping into a Schema.

    Args:
        fields: Ordered mapping of field name to field spec
        registry: Table used to resolve type names (default: builtin types)
        bypass: Policy naming non-key fields that skip validation

    Returns:
        Compiled, immutable Schema

    Raises:
        ConfigurationError: Missing or unknown type, unknown spec option,
            or a primary-key count other than one
    """
    registry = registry if registry is not None else builtin_registry()
    bypass = bypass if bypass is not None else _never_bypass

    schema = Schema(fields=tuple(_compile_field(name, spec, registry, bypass) for name, spec in fields.items()))
    logger.debug("schema compiled", field_count=len(schema), primary_key=schema.primary_key)
    return schema
