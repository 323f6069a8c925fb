"""Entity and Collection records.

A record is either an Entity (one typed record) or a Collection (an ordered
list of entities plus a server-side total count). The variant is fixed when
the record is constructed.

Records are mutated in place and never replaced: when a fetch or save
completes, the fresh server data is merged into the existing object, so
observers holding a reference (UI bindings, caches) see the update.

Concurrency: records are not locked. Issuing a second operation on the same
record before the first settles is a race where the last completion wins.
Callers serialize operations per record if that matters to them.
"""

from __future__ import annotations

import json
import types
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from typing import TYPE_CHECKING, Any, ClassVar

import structlog

from modelize.client.fetch import perform
from modelize.client.request import RequestOptions
from modelize.contracts.enums import HttpMethod
from modelize.contracts.events import ValidationFailed
from modelize.contracts.results import ValidationResult
from modelize.model.lifecycle import LifecycleStates
from modelize.model.serialization import to_wire_payload
from modelize.model.validation import ValidatorState, build_validator, mark_valid

if TYPE_CHECKING:
    from modelize.model.kind import Model

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_LIMIT = 20


class Record:
    """State shared by both record variants: owning model and lifecycle flags."""

    __slots__ = ("_last_request", "_model", "_states")

    is_collection: ClassVar[bool]

    def __init__(self, model: Model) -> None:
        object.__setattr__(self, "_model", model)
        object.__setattr__(self, "_states", LifecycleStates())
        object.__setattr__(self, "_last_request", None)

    @property
    def model(self) -> Model:
        return self._model

    @property
    def states(self) -> LifecycleStates:
        return self._states

    @property
    def last_request(self) -> RequestOptions | None:
        """Options of the last request that completed successfully."""
        return self._last_request

    def remember_request(self, options: RequestOptions) -> None:
        object.__setattr__(self, "_last_request", options)

    # Lifecycle flags (read-only)

    @property
    def fetch_in_progress(self) -> bool:
        return self._states.fetch_in_progress

    @property
    def fetch_success_once(self) -> bool:
        return self._states.fetch_success_once

    @property
    def fetch_success(self) -> bool:
        return self._states.fetch_success

    @property
    def fetch_failure(self) -> bool:
        return self._states.fetch_failure

    @property
    def save_in_progress(self) -> bool:
        return self._states.save_in_progress

    @property
    def save_success(self) -> bool:
        return self._states.save_success

    @property
    def save_failure(self) -> bool:
        return self._states.save_failure

    def to_wire(self) -> Any:
        """Wire payload of the validated fields (see model.serialization)."""
        return to_wire_payload(self)

    def to_json(self) -> str:
        return json.dumps(self.to_wire())


class Entity(Record):
    """One typed record of a model.

    Fields are reachable as attributes (``user.name``) or items
    (``user["name"]``). Item access always works, including for field names
    shadowed by Entity methods or properties.
    """

    __slots__ = ("_is_new", "_original", "_validator", "_values")

    is_collection = False

    def __init__(
        self,
        model: Model,
        data: Mapping[str, Any],
        *,
        is_new: bool,
        original: Mapping[str, Any] | None = None,
    ) -> None:
        """Wrap already-formatted field values.

        Use Model.build() or Model.from_wire() instead of calling this directly.

        Args:
            model: Owning model
            data: Field values in client representation
            is_new: True if never persisted, False if loaded from the wire
            original: Data the record was constructed from (defaults to data)
        """
        super().__init__(model)
        object.__setattr__(self, "_values", dict(data))
        object.__setattr__(self, "_is_new", is_new)
        object.__setattr__(self, "_validator", build_validator(model.schema))
        object.__setattr__(self, "_original", types.MappingProxyType(dict(original if original is not None else data)))

    # Field access

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        if name not in self._model.schema and name not in self._values:
            raise KeyError(f"'{name}' is not a field of {self._model.name}")
        self._values[name] = value

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails; private names never map to fields
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[name]
        except KeyError:
            raise AttributeError(f"{self._model.name} entity has no field '{name}'") from None

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_"):
            raise AttributeError(f"cannot set private attribute '{name}'")
        try:
            self[name] = value
        except KeyError as e:
            raise AttributeError(str(e)) from None

    def __repr__(self) -> str:
        return f"<{self._model.name} {self._model.schema.primary_key}={self.primary_key!r} is_new={self._is_new}>"

    def keys(self) -> list[str]:
        return list(self._values)

    def to_dict(self) -> dict[str, Any]:
        """Shallow copy of the field values (client representation)."""
        return dict(self._values)

    @property
    def primary_key(self) -> Any:
        return self._values.get(self._model.schema.primary_key)

    @property
    def is_new(self) -> bool:
        """True until the record has been loaded from, or saved to, the server."""
        return self._is_new

    @property
    def validator(self) -> dict[str, ValidatorState]:
        return self._validator

    def base_data(self) -> Mapping[str, Any]:
        """Read-only view of the data this record was constructed from."""
        return self._original

    # Validation

    def validate_quietly(self, field_list: Sequence[Any]) -> ValidationResult:
        """Validate a field list without notifying the error sink."""
        return mark_valid(self, field_list)

    def valid(self, field_list: Sequence[Any]) -> bool:
        """Validate a field list; failures are broadcast as ValidationFailed.

        Call this with the field list of the next save: only checked and
        valid fields are serialized.
        """
        result = self.validate_quietly(field_list)
        if not result.is_valid:
            logger.debug("validation failed", model=self._model.name, error_count=len(result.errors))
            self._model.emit(ValidationFailed(model=self._model.name, errors=result.errors))
        return result.is_valid

    def error(self, name: str) -> bool:
        """True if the field was checked and is currently not acceptable.

        Cheap enough to call at render time; does not re-run a field list.
        """
        state = self._validator[name]
        if not state.checked:
            return False
        return name not in self._values or not state.is_valid(self._values[name], self)

    # Mutation

    def mutate(self, updated: Entity) -> None:
        """Merge a freshly parsed entity into this one, keeping identity.

        Nested records are merged recursively; other values are overwritten.
        Validator state is kept.
        """
        for name, value in updated._values.items():
            current = self._values.get(name)
            if isinstance(value, Record) and isinstance(current, Record) and value.is_collection == current.is_collection:
                current.mutate(value)
            else:
                self._values[name] = value
        object.__setattr__(self, "_is_new", updated._is_new)
        object.__setattr__(self, "_original", updated._original)

    # Requests

    async def get(self, primary_key: Any, *, action: str | None = None) -> Entity:
        """Load the record identified by primary_key into this entity."""
        return await perform(self, RequestOptions(method=HttpMethod.GET, primary_key=primary_key, action=action))

    async def post(self, *, action: str | None = None) -> Entity:
        """Create the record from its validated fields."""
        return await perform(self, RequestOptions(method=HttpMethod.POST, action=action))

    async def put(self, primary_key: Any = None, *, action: str | None = None) -> Entity:
        """Replace the record (default key: this entity's primary key)."""
        key = primary_key if primary_key is not None else self.primary_key
        return await perform(self, RequestOptions(method=HttpMethod.PUT, primary_key=key, action=action))

    async def patch(self, primary_key: Any = None, *, action: str | None = None) -> Entity:
        """Partially update the record (default key: this entity's primary key)."""
        key = primary_key if primary_key is not None else self.primary_key
        return await perform(self, RequestOptions(method=HttpMethod.PATCH, primary_key=key, action=action))

    async def save(self, *, action: str | None = None) -> Entity:
        """Create the record if it is new, replace it otherwise."""
        if self._is_new:
            return await self.post(action=action)
        return await self.put(action=action)


class Collection(Record):
    """Ordered entities of one model plus the server-side total count.

    total_count may exceed the number of loaded items (pagination). It is
    overwritten only by server-supplied counts and adjusted by add/remove.
    """

    __slots__ = ("_items", "_total_count")

    is_collection = True

    def __init__(
        self,
        model: Model,
        items: Iterable[Entity | Mapping[str, Any]] = (),
        *,
        total_count: int | None = None,
        is_new: bool = True,
    ) -> None:
        """Build a collection from entities or raw item payloads.

        Args:
            model: Owning model
            items: Entities, or payloads built with is_new
            total_count: Server-side total (default: number of items)
            is_new: How raw payloads are built (new records, or from the wire)
        """
        super().__init__(model)
        object.__setattr__(self, "_items", [])
        object.__setattr__(self, "_total_count", 0)
        for item in items:
            self.add(item, is_new=is_new)
        if total_count is not None:
            object.__setattr__(self, "_total_count", total_count)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"cannot set attribute '{name}' on a collection")

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Entity]:
        return iter(self._items)

    def __getitem__(self, index: int) -> Entity:
        return self._items[index]

    def __repr__(self) -> str:
        return f"<{self._model.name} collection loaded={len(self._items)} total_count={self._total_count}>"

    @property
    def items(self) -> list[Entity]:
        """The live item list (same object across mutations)."""
        return self._items

    @property
    def total_count(self) -> int:
        return self._total_count

    def is_empty(self) -> bool:
        return not self._items

    def has_more(self) -> bool:
        """Whether more items exist on the server than are loaded."""
        return len(self._items) < self._total_count

    def clear(self) -> list[Entity]:
        """Remove every loaded item and return them; total_count is unchanged."""
        removed = list(self._items)
        del self._items[:]
        return removed

    def _matcher(self, ref: Any) -> Callable[[Entity], bool]:
        if callable(ref):
            return ref
        if isinstance(ref, Entity):
            key = ref.primary_key
        elif isinstance(ref, Mapping):
            key = ref.get(self._model.schema.primary_key)
        else:
            key = ref
        if key is None:
            # A record without a key matches nothing
            return lambda item: False
        return lambda item: item.primary_key == key

    def find(self, primary_key: Any) -> Entity | None:
        """First item with this primary key, or None."""
        for item in self._items:
            if item.primary_key == primary_key:
                return item
        return None

    def exists(self, ref: Any) -> bool:
        """Whether an item matches ref (entity, payload, primary key or predicate)."""
        check = self._matcher(ref)
        return any(check(item) for item in self._items)

    def remove(self, ref: Any) -> int | None:
        """Remove the first matching item.

        Returns:
            Index of the removed item, or None when nothing matched
        """
        check = self._matcher(ref)
        for index, item in enumerate(self._items):
            if check(item):
                del self._items[index]
                object.__setattr__(self, "_total_count", self._total_count - 1)
                return index
        return None

    def add(self, item: Entity | Mapping[str, Any] | None = None, *, is_new: bool = True) -> Entity:
        """Append an entity, building it from a payload if needed.

        Raises:
            TypeError: If item is an entity of another model
        """
        if isinstance(item, Entity):
            if item.model is not self._model:
                raise TypeError(f"cannot add a {item.model.name} entity to a {self._model.name} collection")
            instance = item
        elif is_new:
            instance = self._model.build(item or {})
        else:
            instance = self._model.entity_from_wire(item or {})

        self._items.append(instance)
        object.__setattr__(self, "_total_count", self._total_count + 1)
        return instance

    def toggle(self, item: Entity | Mapping[str, Any], check: Any = None) -> Entity | int | None:
        """Remove the item if it exists, add it otherwise."""
        ref = check if check is not None else item
        if self.exists(ref):
            return self.remove(ref)
        return self.add(item)

    def mutate(self, updated: Collection, *, extend: bool = False) -> None:
        """Take the items and total count of a freshly parsed collection.

        Args:
            updated: Collection parsed from the server response
            extend: Append the new items instead of replacing the loaded ones
        """
        object.__setattr__(self, "_total_count", updated._total_count)
        if extend:
            self._items.extend(updated._items)
        else:
            self._items[:] = updated._items

    # Requests

    async def get_collection(
        self,
        *,
        action: str | None = None,
        params: Mapping[str, Any] | None = None,
        extend: bool = False,
    ) -> Collection:
        """Load one page of items (default page: limit=20, offset=0)."""
        query = dict(params or {})
        if not query.get("limit"):
            query["limit"] = DEFAULT_PAGE_LIMIT
        if not query.get("offset"):
            query["offset"] = 0
        options = RequestOptions(method=HttpMethod.GET, action=action, params=query, extend=extend)
        return await perform(self, options)

    async def get_more(self) -> Collection:
        """Append the next page, replaying the last request with offset += limit.

        Raises:
            RuntimeError: If no get_collection() has completed yet
        """
        last = self._last_request
        if last is None or last.params is None:
            raise RuntimeError("get_more() requires a previous successful get_collection()")
        params = dict(last.params)
        params["offset"] = params["offset"] + params["limit"]
        return await self.get_collection(action=last.action, params=params, extend=True)
