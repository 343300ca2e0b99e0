from collections.abc import Callable
from typing import Any

import pytest
from hypothesis import given
from hypothesis import strategies as st

from protocheck.schema.descriptors import FieldDescriptor, FieldKind, OneofDescriptor, ScalarType
from protocheck.validation.presence import active_oneof_member, get_field_value, is_field_set, is_set, is_value_set
from tests.conftest import INTEGER_SCALARS, non_empty_text, non_zero_ints, scalar_field


class TestIsValueSet:
    @pytest.mark.parametrize("scalar", INTEGER_SCALARS)
    def test_integer_zero_is_unset(self, scalar: ScalarType) -> None:
        assert not is_value_set(0, FieldKind.SCALAR, scalar)

    @pytest.mark.parametrize("scalar", [ScalarType.FLOAT, ScalarType.DOUBLE])
    def test_floating_zero_is_unset(self, scalar: ScalarType) -> None:
        assert not is_value_set(0.0, FieldKind.SCALAR, scalar)
        assert is_value_set(-0.5, FieldKind.SCALAR, scalar)

    @given(value=non_zero_ints)
    def test_non_zero_integers_are_set(self, value: int) -> None:
        assert is_value_set(value, FieldKind.SCALAR, ScalarType.INT64)

    @pytest.mark.parametrize("value", [True, False])
    def test_booleans_are_always_set(self, value: bool) -> None:
        assert is_value_set(value, FieldKind.SCALAR, ScalarType.BOOL)

    def test_empty_string_and_bytes_are_unset(self) -> None:
        assert not is_value_set("", FieldKind.SCALAR, ScalarType.STRING)
        assert not is_value_set(b"", FieldKind.SCALAR, ScalarType.BYTES)
        assert is_value_set(b"\x00", FieldKind.SCALAR, ScalarType.BYTES)

    @given(value=non_empty_text)
    def test_non_empty_strings_are_set(self, value: str) -> None:
        assert is_value_set(value, FieldKind.SCALAR, ScalarType.STRING)

    def test_enum_zero_is_unset(self) -> None:
        assert not is_value_set(0, FieldKind.ENUM)
        assert is_value_set(2, FieldKind.ENUM)

    def test_message_is_set_unless_none(self) -> None:
        assert is_value_set({}, FieldKind.MESSAGE)
        assert not is_value_set(None, FieldKind.MESSAGE)

    @pytest.mark.parametrize("kind", [FieldKind.LIST, FieldKind.MAP])
    def test_collections_are_set_when_non_empty(self, kind: FieldKind) -> None:
        empty: Any = [] if kind == FieldKind.LIST else {}
        full: Any = [0] if kind == FieldKind.LIST else {"a": 0}
        assert not is_value_set(empty, kind, ScalarType.INT32)
        assert is_value_set(full, kind, ScalarType.INT32)

    @given(kind=st.sampled_from(list(FieldKind)), scalar=st.sampled_from(list(ScalarType)))
    def test_none_is_unset_for_every_kind(self, kind: FieldKind, scalar: ScalarType) -> None:
        assert not is_value_set(None, kind, scalar)

    def test_wrongly_typed_values_do_not_raise(self) -> None:
        assert is_value_set("ADMIN", FieldKind.ENUM)
        assert is_value_set(5, FieldKind.SCALAR, ScalarType.STRING)


class TestFieldAccess:
    def test_mapping_is_read_by_accessor(self) -> None:
        field = scalar_field("given_name", ScalarType.STRING, accessor="givenName")
        assert get_field_value({"givenName": "Ada", "given_name": "x"}, field) == "Ada"
        assert get_field_value({}, field) is None

    def test_object_is_read_by_attribute(self, proto_message: Callable[..., Any]) -> None:
        field = scalar_field("age", ScalarType.INT32)
        assert get_field_value(proto_message(age=3), field) == 3
        assert get_field_value(proto_message(), field) is None

    def test_unset_message_field_uses_has_field(self, proto_message: Callable[..., Any]) -> None:
        field = FieldDescriptor("address", FieldKind.MESSAGE, message_type="test.Address")
        assert get_field_value(proto_message(address=None), field) is None
        address = {"city": "Oslo"}
        assert get_field_value(proto_message(address=address), field) is address

    def test_is_field_set_combines_access_and_presence(self) -> None:
        field = scalar_field("count", ScalarType.UINT32)
        assert not is_field_set({"count": 0}, field)
        assert is_field_set({"count": 4}, field)
        assert not is_set(None, field)

    def test_none_message_has_no_values(self) -> None:
        assert get_field_value(None, scalar_field("x", ScalarType.STRING)) is None


class TestActiveOneofMember:
    email = scalar_field("email", ScalarType.STRING, oneof="contact")
    phone = scalar_field("phone", ScalarType.STRING, oneof="contact")
    contact = OneofDescriptor("contact", (email, phone))

    def test_member_with_default_value_is_active(self) -> None:
        assert active_oneof_member({"phone": ""}, self.contact) == self.phone

    def test_no_member_set(self) -> None:
        assert active_oneof_member({"other": 1}, self.contact) is None

    def test_which_oneof_is_used_for_proto_like_objects(self, proto_message: Callable[..., Any]) -> None:
        message = proto_message(oneofs={"contact": "email"}, email="", phone=None)
        assert active_oneof_member(message, self.contact) == self.email
        assert active_oneof_member(proto_message(oneofs={}), self.contact) is None
