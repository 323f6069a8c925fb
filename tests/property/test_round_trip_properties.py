# tests/property/test_round_trip_properties.py
"""Property tests for the static type round-trip law.

For every static type T and every valid value v:
    T.from_wire(T.to_wire(v)) == v
and the wire form survives a JSON encode/decode.
"""

from __future__ import annotations

import json

import pytest
from hypothesis import example, given
from hypothesis import strategies as st

from modelize import types
from tests.property.conftest import valid_values
from tests.property.settings import STANDARD_SETTINGS

STATIC_TYPE_NAMES = [field_type.name for field_type in types.STATIC_TYPES]


def test_every_static_type_has_a_strategy() -> None:
    assert set(STATIC_TYPE_NAMES) == set(valid_values)


@pytest.mark.parametrize("type_name", STATIC_TYPE_NAMES)
class TestRoundTripLaw:
    @given(data=st.data())
    @STANDARD_SETTINGS
    def test_from_wire_inverts_to_wire(self, type_name: str, data: st.DataObject) -> None:
        field_type = types.builtin_registry().get(type_name)
        value = data.draw(valid_values[type_name])

        assert field_type.is_valid(value)
        assert field_type.from_wire(field_type.to_wire(value)) == value

    @given(data=st.data())
    @STANDARD_SETTINGS
    def test_wire_form_is_json_stable(self, type_name: str, data: st.DataObject) -> None:
        field_type = types.builtin_registry().get(type_name)
        value = data.draw(valid_values[type_name])

        wire = field_type.to_wire(value)
        assert field_type.from_wire(json.loads(json.dumps(wire))) == value


class TestPredicatesNeverRaise:
    @given(value=st.one_of(st.none(), st.booleans(), st.integers(), st.floats(), st.text(), st.lists(st.integers())))
    @example(value="².1.1.1")
    @STANDARD_SETTINGS
    def test_is_blank_and_is_valid_are_total_on_scalars(self, value: object) -> None:
        for field_type in (types.STRING, types.EMAIL, types.URL, types.FILE, types.IP, types.BOOLEAN, types.INTEGER, types.FLOAT, types.DATE):
            assert isinstance(field_type.is_valid(value), bool)
            assert isinstance(field_type.is_blank(value), bool)
