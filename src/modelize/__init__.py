"""
Modelize: schema-driven entity and collection models for REST backends.

Declare a schema once; get typed records with defaults, field-list
validation, wire serialization and a fetch lifecycle whose state flags
drive the UI.
"""

from modelize.contracts import (
    Association,
    ConfigurationError,
    CredentialsError,
    FetchFailed,
    HttpMethod,
    ModelizeError,
    TransportError,
    ValidationErrorCode,
    ValidationFailed,
    ValidationResult,
)
from modelize.core.config import CollectionPattern, ModelizeSettings, load_settings
from modelize.engine import Modelize
from modelize.model import Collection, Entity, Model
from modelize.schema import FieldConfig, Schema, compile_schema

__version__ = "0.1.0"

__all__ = [
    "Association",
    "Collection",
    "CollectionPattern",
    "ConfigurationError",
    "CredentialsError",
    "Entity",
    "FetchFailed",
    "FieldConfig",
    "HttpMethod",
    "Model",
    "Modelize",
    "ModelizeError",
    "ModelizeSettings",
    "Schema",
    "TransportError",
    "ValidationErrorCode",
    "ValidationFailed",
    "ValidationResult",
    "__version__",
    "compile_schema",
    "load_settings",
]
