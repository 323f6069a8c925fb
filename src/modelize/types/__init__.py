"""Field type contracts: static types, association constructors and the registry.

Usage:
    from modelize import types

    fields = {
        "id": {"type": types.IDENTIFIER, "primary_key": True},
        "email": {"type": types.EMAIL},
        "author": {"type": types.belongs_to(Author)},
    }
"""

from modelize.types.associations import belongs_to, has_many, has_one
from modelize.types.base import FieldType
from modelize.types.registry import TypeRegistry, builtin_registry
from modelize.types.scalars import (
    ADDRESS,
    ARRAY,
    BOOLEAN,
    DATE,
    DATETIME,
    EMAIL,
    FILE,
    FLOAT,
    IDENTIFIER,
    INTEGER,
    IP,
    OBJECT,
    PHONE,
    STATIC_TYPES,
    STRING,
    URL,
)

__all__ = [
    "ADDRESS",
    "ARRAY",
    "BOOLEAN",
    "DATE",
    "DATETIME",
    "EMAIL",
    "FILE",
    "FLOAT",
    "IDENTIFIER",
    "INTEGER",
    "IP",
    "OBJECT",
    "PHONE",
    "STATIC_TYPES",
    "STRING",
    "URL",
    "FieldType",
    "TypeRegistry",
    "belongs_to",
    "builtin_registry",
    "has_many",
    "has_one",
]
