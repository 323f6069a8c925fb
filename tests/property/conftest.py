# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Strategy Categories:
- Valid values per static field type (the domain of the round-trip law)
- Field names and schema specs

Usage:
    from tests.property.conftest import valid_values

    @given(value=valid_values["integer"])
    def test_integer_round_trip(value: int) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS
#
# Tiers: STATE_MACHINE (200), STANDARD (100), QUICK (20)
# =============================================================================

from __future__ import annotations

from datetime import UTC
from typing import Any

from hypothesis import strategies as st

# =============================================================================
# JSON-safe values
# =============================================================================

json_primitives = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-(2**53), max_value=2**53),
    st.floats(allow_nan=False, allow_infinity=False),
    st.text(max_size=20),
)

json_values = st.recursive(
    json_primitives,
    lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=10,
)


# =============================================================================
# Valid values per static type
# =============================================================================

_addresses = st.fixed_dictionaries(
    {
        "street": st.text(max_size=20),
        "postcode": st.text(max_size=8),
        "city": st.text(max_size=20),
        "latitude": st.text(max_size=10),
        "longitude": st.text(max_size=10),
    }
)

_urls = st.from_regex(r"https?://[a-z0-9][a-z0-9.-]{0,20}(/[a-z0-9_]{0,10})?", fullmatch=True)

valid_values: dict[str, st.SearchStrategy[Any]] = {
    "string": st.text(),
    # Identifiers generated locally carry no dashes
    "identifier": st.text(min_size=1).filter(lambda s: "-" not in s),
    "email": st.from_regex(r"[a-z0-9._-]{1,12}@[a-z0-9-]{1,12}\.[a-z]{2,6}", fullmatch=True),
    # Sanitized numbers: optional leading + then digits
    "phone": st.from_regex(r"\+?[0-9]{1,15}", fullmatch=True),
    "url": _urls,
    "file": _urls | st.from_regex(r"data:image/png;base64,[A-Za-z0-9+/]{4,40}={0,2}", fullmatch=True),
    "ip": st.ip_addresses(v=4).map(str),
    "boolean": st.booleans(),
    "integer": st.integers(min_value=0),
    "float": st.floats(min_value=0, allow_nan=False, allow_infinity=False),
    "date": st.dates(),
    "datetime": st.datetimes(timezones=st.none() | st.just(UTC)),
    "address": _addresses,
    "object": st.dictionaries(st.text(max_size=8), json_values, max_size=5),
    "array": st.lists(json_values, max_size=5),
}


# =============================================================================
# Schema shapes
# =============================================================================

field_names = st.from_regex(r"[a-z][a-z0-9_]{0,11}", fullmatch=True).filter(lambda n: n != "id")
