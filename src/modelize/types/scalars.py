"""Static field types.

Stateless contracts for primitive and structured JSON values. Validity rules
are deliberately shallow: they check shape and format, never business rules,
which belong in a field's custom_valid predicate.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from modelize.core.formatting import format_date_only, format_phone, generate_identifier
from modelize.core.predicates import (
    is_email,
    is_file,
    is_integer,
    is_ip,
    is_number,
    is_url,
)
from modelize.types.base import FieldType, identity


def _is_empty_string(value: Any) -> bool:
    return value == ""


def _is_none(value: Any) -> bool:
    return value is None


def _is_str(value: Any) -> bool:
    return isinstance(value, str)


def _text_type(name: str, is_valid: Any = _is_str, to_wire: Any = identity) -> FieldType:
    return FieldType(
        name=name,
        default_value="",
        is_blank=_is_empty_string,
        is_valid=is_valid,
        to_wire=to_wire,
        from_wire=identity,
    )


def _strip_dashes(value: Any) -> Any:
    # Servers may send canonical dashed UUIDs; locally generated ids have none
    return value.replace("-", "") if isinstance(value, str) else value


def _parse_int(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return value
    return value


def _parse_float(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return value
    return value


def _date_to_wire(value: Any) -> Any:
    return format_date_only(value) if isinstance(value, date) else value


def _date_from_wire(value: Any) -> Any:
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        # Left as-is so validation reports it
        return value


def _datetime_to_wire(value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value


def _datetime_from_wire(value: Any) -> Any:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return value


_ADDRESS_REQUIRED = ("street", "postcode", "city")


def _address_default() -> dict[str, str]:
    return {"street": "", "postcode": "", "city": "", "latitude": "", "longitude": ""}


def _address_is_blank(value: Any) -> bool:
    if value is None:
        return True
    if not isinstance(value, dict):
        return False
    return all(value.get(key) == "" for key in _ADDRESS_REQUIRED)


def _address_is_valid(value: Any) -> bool:
    return isinstance(value, dict) and all(key in value for key in _ADDRESS_REQUIRED)


def _array_is_blank(value: Any) -> bool:
    return value is None or len(value) == 0


STRING = _text_type("string")

IDENTIFIER = FieldType(
    name="identifier",
    default_value=generate_identifier,
    is_blank=_is_empty_string,
    is_valid=_is_str,
    to_wire=identity,
    from_wire=_strip_dashes,
)

EMAIL = _text_type("email", is_valid=is_email)
PHONE = _text_type("phone", to_wire=format_phone)
URL = _text_type("url", is_valid=is_url)
FILE = _text_type("file", is_valid=is_file)
IP = _text_type("ip", is_valid=is_ip)

BOOLEAN = FieldType(
    name="boolean",
    default_value=None,
    is_blank=_is_none,
    is_valid=lambda value: isinstance(value, bool),
    to_wire=identity,
    from_wire=identity,
)

INTEGER = FieldType(
    name="integer",
    default_value=None,
    is_blank=_is_none,
    is_valid=lambda value: is_integer(value) and value >= 0,
    to_wire=identity,
    from_wire=_parse_int,
)

FLOAT = FieldType(
    name="float",
    default_value=None,
    is_blank=_is_none,
    is_valid=lambda value: is_number(value) and value >= 0,
    to_wire=identity,
    from_wire=_parse_float,
)

DATE = FieldType(
    name="date",
    default_value=None,
    is_blank=_is_none,
    is_valid=lambda value: isinstance(value, date) and not isinstance(value, datetime),
    to_wire=_date_to_wire,
    from_wire=_date_from_wire,
)

DATETIME = FieldType(
    name="datetime",
    default_value=None,
    is_blank=_is_none,
    is_valid=lambda value: isinstance(value, datetime),
    to_wire=_datetime_to_wire,
    from_wire=_datetime_from_wire,
)

ADDRESS = FieldType(
    name="address",
    default_value=_address_default,
    is_blank=_address_is_blank,
    is_valid=_address_is_valid,
    to_wire=identity,
    from_wire=identity,
)

OBJECT = FieldType(
    name="object",
    default_value=dict,
    is_blank=_is_none,
    is_valid=lambda value: isinstance(value, dict),
    to_wire=identity,
    from_wire=identity,
)

ARRAY = FieldType(
    name="array",
    default_value=list,
    is_blank=_array_is_blank,
    is_valid=lambda value: isinstance(value, list),
    to_wire=identity,
    from_wire=identity,
)

STATIC_TYPES: tuple[FieldType, ...] = (
    STRING,
    IDENTIFIER,
    EMAIL,
    PHONE,
    URL,
    FILE,
    IP,
    BOOLEAN,
    INTEGER,
    FLOAT,
    DATE,
    DATETIME,
    ADDRESS,
    OBJECT,
    ARRAY,
)
