"""Modelize engine: owns settings, transport, credentials and the error sink.

Example:
    engine = Modelize(load_settings(Path("modelize.yaml")), auth_token=get_token)
    Author = engine.define("authors", {
        "id": {"type": types.IDENTIFIER, "primary_key": True},
        "name": {"type": types.STRING},
    }, endpoint="authors")

    author = await Author.build().get("42")
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

import structlog

from modelize.client.request import resolve_token
from modelize.client.transport import HttpxTransport, Transport
from modelize.contracts.errors import ConfigurationError
from modelize.contracts.events import FetchFailed, ValidationFailed
from modelize.core.config import ModelizeSettings
from modelize.core.events import EventBus, EventBusProtocol
from modelize.model.kind import Model
from modelize.schema import always_sent, compile_schema
from modelize.types.registry import TypeRegistry, builtin_registry

logger = structlog.get_logger(__name__)

TokenProvider = Callable[[], "str | None | Awaitable[str | None]"]


class Modelize:
    """Defines models and provides them with everything requests need."""

    def __init__(
        self,
        settings: ModelizeSettings,
        *,
        transport: Transport | None = None,
        auth_token: TokenProvider | None = None,
        registry: TypeRegistry | None = None,
        event_bus: EventBusProtocol | None = None,
    ) -> None:
        """Create an engine.

        Args:
            settings: Engine-wide settings
            transport: Request transport (default: HttpxTransport, created
                on first use and closed by aclose())
            auth_token: Sync or async callable returning the bearer token
            registry: Named field types (default: the builtin static types)
            event_bus: Error sink (default: a fresh EventBus)

        Raises:
            ConfigurationError: If settings require auth but no token
                provider is given
        """
        if settings.require_auth and auth_token is None:
            raise ConfigurationError("require_auth is set but no auth_token provider was given")

        self.settings = settings
        self.types = registry if registry is not None else builtin_registry()
        self.events: EventBusProtocol = event_bus if event_bus is not None else EventBus()
        self._token_provider = auth_token
        self._transport = transport
        self._owns_transport = transport is None
        self._models: dict[str, Model] = {}

    @property
    def transport(self) -> Transport:
        if self._transport is None:
            self._transport = HttpxTransport()
        return self._transport

    @property
    def models(self) -> Mapping[str, Model]:
        return MappingProxyType(self._models)

    async def auth_token(self) -> str | None:
        if self._token_provider is None:
            return None
        return await resolve_token(self._token_provider)

    def define(
        self,
        name: str,
        fields: Mapping[str, Mapping[str, Any]],
        *,
        endpoint: str | None = None,
        require_auth: bool | None = None,
    ) -> Model:
        """Compile a schema and register it as a model.

        Args:
            name: Unique model name
            fields: Ordered mapping of field name to field spec
            endpoint: Path under base_url; None for a model that never fetches
            require_auth: Override the engine-wide auth setting

        Returns:
            The new Model

        Raises:
            ConfigurationError: Invalid schema, duplicate model name, or auth
                required without a token provider
        """
        if name in self._models:
            raise ConfigurationError(f"Model '{name}' is already defined")

        require_auth = self.settings.require_auth if require_auth is None else require_auth
        if require_auth and self._token_provider is None:
            raise ConfigurationError(f"Model '{name}' requires auth but no auth_token provider was given")

        schema = compile_schema(fields, registry=self.types, bypass=always_sent(self.settings.always_sent_fields))
        model = Model(name, schema, engine=self, endpoint=endpoint, require_auth=require_auth)
        self._models[name] = model
        logger.debug("model defined", model=name, endpoint=endpoint, require_auth=require_auth)
        return model

    def on_fetch_failure(self, handler: Callable[[FetchFailed], None]) -> None:
        self.events.subscribe(FetchFailed, handler)

    def on_validation_failure(self, handler: Callable[[ValidationFailed], None]) -> None:
        self.events.subscribe(ValidationFailed, handler)

    async def aclose(self) -> None:
        """Close the transport if the engine created it."""
        if self._owns_transport and isinstance(self._transport, HttpxTransport):
            await self._transport.aclose()
            self._transport = None

    async def __aenter__(self) -> Modelize:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
