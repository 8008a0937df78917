"""
Hivemind — Entity Schema Tests
==============================

What:  Decoding and encoding rules of Sensor and Switch.

What we test:
    ✅ Wire field names and order
    ✅ Case-insensitive field matching, unknown fields, nulls
    ✅ Strict field types
    ✅ Non-object bodies are decode failures, null is the zero value
    ✅ Value stays within the signed 64-bit range
    ✅ Bare-scalar parsing used by PUT
"""

import json

import pytest

from hivemind.exceptions import DecodeError
from hivemind.schemas.entities import ENTITY_KINDS, INT64_MAX, INT64_MIN, Sensor, Switch


class TestEncode:

    def test_sensor_field_names_and_order(self):
        sensor = Sensor(id="test", name="Test", unit="C", type="generic", value=64)
        assert sensor.encode() == (
            b'{"ID":"test","Name":"Test","Unit":"C","Type":"generic","Value":64}'
        )

    def test_switch_field_names_and_order(self):
        switch = Switch(id="lamp", name="Lamp", type="relay", state=True)
        assert switch.encode() == b'{"ID":"lamp","Name":"Lamp","Type":"relay","State":true}'

    def test_zero_value(self):
        assert json.loads(Sensor().encode()) == {
            "ID": "", "Name": "", "Unit": "", "Type": "", "Value": 0,
        }
        assert json.loads(Switch().encode()) == {
            "ID": "", "Name": "", "Type": "", "State": False,
        }

    def test_encode_many(self):
        payload = Sensor.encode_many([Sensor(id="a", value=1), Sensor(id="b", value=2)])
        assert [item["ID"] for item in json.loads(payload)] == ["a", "b"]

    def test_encode_many_empty_is_array(self):
        assert Sensor.encode_many([]) == b"[]"


class TestDecode:

    def test_decode_full_object(self):
        sensor = Sensor.decode(
            b'{"ID": "third", "Name": "Third", "Unit": "C", "Type": "generic", "Value": 3}'
        )
        assert sensor == Sensor(id="third", name="Third", unit="C", type="generic", value=3)

    def test_field_names_are_case_insensitive(self):
        sensor = Sensor.decode(b'{"id": "x", "VALUE": 5, "name": "X"}')
        assert sensor.id == "x"
        assert sensor.value == 5
        assert sensor.name == "X"

    def test_exact_field_name_wins(self):
        sensor = Sensor.decode(b'{"id": "lower", "ID": "exact"}')
        assert sensor.id == "exact"

    def test_unknown_fields_are_ignored(self):
        switch = Switch.decode(b'{"ID": "s", "State": true, "Colour": "red"}')
        assert switch == Switch(id="s", state=True)

    def test_missing_fields_take_zero_value(self):
        assert Sensor.decode(b'{"ID": "only-id"}') == Sensor(id="only-id")

    def test_null_leaves_zero_value(self):
        sensor = Sensor.decode(b'{"ID": "n", "Value": null, "Name": null}')
        assert sensor.value == 0
        assert sensor.name == ""

    @pytest.mark.parametrize("body", [
        b'{"ID": "s", "Value": "12"}',
        b'{"ID": "s", "Value": 12.5}',
        b'{"ID": "s", "Value": true}',
        b'{"ID": 7, "Value": 1}',
    ])
    def test_sensor_types_are_strict(self, body):
        with pytest.raises(DecodeError):
            Sensor.decode(body)

    @pytest.mark.parametrize("body", [
        b'{"ID": "s", "State": 1}',
        b'{"ID": "s", "State": "true"}',
    ])
    def test_switch_types_are_strict(self, body):
        with pytest.raises(DecodeError):
            Switch.decode(body)

    @pytest.mark.parametrize("body", [b"", b"{", b"12", b"[]", b'"text"', b"true"])
    def test_non_object_bodies_fail(self, body):
        with pytest.raises(DecodeError) as info:
            Sensor.decode(body)
        assert info.value.kind == "sensor"

    def test_null_body_is_zero_value(self):
        assert Sensor.decode(b"null") == Sensor()
        assert Switch.decode(b" null ") == Switch()

    @pytest.mark.parametrize("value", [INT64_MIN, INT64_MAX])
    def test_value_accepts_int64_bounds(self, value):
        body = json.dumps({"ID": "edge", "Value": value}).encode()
        assert Sensor.decode(body).value == value

    @pytest.mark.parametrize("value", [INT64_MAX + 1, INT64_MIN - 1, 99999999999999999999999])
    def test_value_outside_int64_fails(self, value):
        body = json.dumps({"ID": "edge", "Value": value}).encode()
        with pytest.raises(DecodeError):
            Sensor.decode(body)


class TestScalars:

    @pytest.mark.parametrize("text,expected", [
        ("12", 12),
        ("-3", -3),
        ("+7", 7),
        ("0", 0),
    ])
    def test_sensor_decimal(self, text, expected):
        assert Sensor.parse_scalar(text) == expected

    @pytest.mark.parametrize("text", ["", "12.0", " 12", "12\n", "1e3", "0x10", "twelve"])
    def test_sensor_not_a_decimal(self, text):
        assert Sensor.parse_scalar(text) is None

    def test_sensor_decimal_range(self):
        assert Sensor.parse_scalar("9223372036854775807") == INT64_MAX
        assert Sensor.parse_scalar("-9223372036854775808") == INT64_MIN
        assert Sensor.parse_scalar("9223372036854775808") is None
        assert Sensor.parse_scalar("99999999999999999999999") is None

    @pytest.mark.parametrize("text", ["1", "t", "T", "TRUE", "true", "True"])
    def test_switch_true_literals(self, text):
        assert Switch.parse_scalar(text) is True

    @pytest.mark.parametrize("text", ["0", "f", "F", "FALSE", "false", "False"])
    def test_switch_false_literals(self, text):
        assert Switch.parse_scalar(text) is False

    @pytest.mark.parametrize("text", ["", "yes", "on", "tRuE", "2"])
    def test_switch_not_a_literal(self, text):
        assert Switch.parse_scalar(text) is None

    def test_with_scalar_keeps_other_fields(self):
        sensor = Sensor(id="t", name="Temp", unit="C", value=1).with_scalar(99)
        assert sensor == Sensor(id="t", name="Temp", unit="C", value=99)


def test_kinds_registry():
    assert ENTITY_KINDS == {"sensor": Sensor, "switch": Switch}
