"""Model: a compiled schema bound to an endpoint and an engine.

A Model builds entities and collections, deserializes wire payloads into
records and carries what requests need (URL, auth, transport, error sink).
Models are created with Modelize.define().
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from modelize.contracts.errors import ConfigurationError
from modelize.contracts.enums import Association
from modelize.model.records import Collection, Entity, Record
from modelize.model.serialization import to_wire_payload
from modelize.schema import Schema

if TYPE_CHECKING:
    from modelize.client.transport import Transport
    from modelize.core.config import ModelizeSettings
    from modelize.engine import Modelize


class Model:
    """Factory and request context for records of one schema."""

    def __init__(
        self,
        name: str,
        schema: Schema,
        *,
        engine: Modelize,
        endpoint: str | None = None,
        require_auth: bool = False,
    ) -> None:
        """Bind a compiled schema to an engine.

        Args:
            name: Model name, unique within the engine
            schema: Compiled schema
            engine: Engine supplying settings, transport, auth and events
            endpoint: Path appended to the engine's base URL, None for
                local-only models
            require_auth: Send an Authorization header on every request
        """
        self.name = name
        self.schema = schema
        self.endpoint = endpoint.strip("/") if endpoint is not None else None
        self.require_auth = require_auth
        self._engine = engine

    def __repr__(self) -> str:
        return f"Model({self.name!r}, endpoint={self.endpoint!r})"

    # Engine context

    @property
    def settings(self) -> ModelizeSettings:
        return self._engine.settings

    @property
    def transport(self) -> Transport:
        return self._engine.transport

    @property
    def url(self) -> str | None:
        """Endpoint base URL (base_url/endpoint), None without an endpoint."""
        if self.endpoint is None:
            return None
        return f"{self.settings.base_url}/{self.endpoint}"

    def request_url(self) -> str:
        """Endpoint base URL for a request.

        Raises:
            ConfigurationError: If the model has no endpoint
        """
        url = self.url
        if url is None:
            raise ConfigurationError(f"Model '{self.name}' has no endpoint; it cannot issue requests")
        return url

    async def auth_token(self) -> str | None:
        return await self._engine.auth_token()

    def emit(self, event: Any) -> None:
        self._engine.events.emit(event)

    # Construction

    def _build_association(self, field_name: str, value: Any) -> Any:
        """Deserialize raw nested payloads given for association fields."""
        field_type = self.schema[field_name].type
        if field_type.association is Association.HAS_MANY:
            if isinstance(value, (list, tuple)):
                return field_type.from_wire(value)
        elif field_type.is_association and isinstance(value, Mapping):
            return field_type.from_wire(value)
        return value

    def build_raw(self, partial: Mapping[str, Any] | None = None, *, primary_key: Any = None) -> dict[str, Any]:
        """Complete a partial payload with defaults for every schema field.

        The primary key is resolved first: the value in partial, else the
        primary_key argument, else the key field's default. Factory defaults
        receive the resolved key. Keys outside the schema are dropped.

        Args:
            partial: Field values to keep
            primary_key: Key to use when partial does not carry one

        Returns:
            Dict with one entry per schema field
        """
        partial = partial or {}
        pk_name = self.schema.primary_key

        key = partial.get(pk_name)
        if key is None:
            key = primary_key
        if key is None:
            key = self.schema.primary_key_field.default()

        raw: dict[str, Any] = {}
        for fc in self.schema:
            if fc.name == pk_name:
                raw[fc.name] = key
            elif fc.name in partial:
                value = partial[fc.name]
                raw[fc.name] = self._build_association(fc.name, value) if fc.type.is_association else value
            else:
                raw[fc.name] = fc.default(key)
        return raw

    def build(self, partial: Mapping[str, Any] | None = None, *, primary_key: Any = None) -> Entity:
        """Build a new (never persisted) entity with defaults filled in."""
        return Entity(self, self.build_raw(partial, primary_key=primary_key), is_new=True, original=partial or {})

    def collection(
        self,
        items: Iterable[Entity | Mapping[str, Any]] = (),
        *,
        total_count: int | None = None,
        is_new: bool = True,
    ) -> Collection:
        """Build a collection of this model.

        Args:
            items: Entities, or raw payloads
            total_count: Server-side total (default: number of items)
            is_new: Build raw payloads as new records (True) or as wire data
        """
        return Collection(self, items, total_count=total_count, is_new=is_new)

    def entity_from_wire(self, payload: Mapping[str, Any]) -> Entity:
        """Entity holding exactly the payload's keys, schema fields deserialized.

        No defaults are filled in. Keys outside the schema are kept as-is.
        """
        if not isinstance(payload, Mapping):
            raise TypeError(f"{self.name} payload must be an object, got {type(payload).__name__}")
        data = {
            name: self.schema[name].type.from_wire(value) if name in self.schema else value
            for name, value in payload.items()
        }
        return Entity(self, data, is_new=False, original=payload)

    def from_wire(self, payload: Mapping[str, Any] | Sequence[Any], *, total_count: int | None = None) -> Entity | Collection:
        """Deserialize a wire payload: an object gives an Entity, an array a Collection.

        Raises:
            TypeError: If the payload is neither an object nor an array
        """
        if isinstance(payload, (list, tuple)):
            return Collection(self, payload, total_count=total_count, is_new=False)
        return self.entity_from_wire(payload)

    def to_wire(self, record: Record | None) -> Any:
        if record is None:
            return None
        return to_wire_payload(record)

    def is_entity(self, value: Any) -> bool:
        return isinstance(value, Entity) and value.model is self

    def is_collection(self, value: Any) -> bool:
        return isinstance(value, Collection) and value.model is self
