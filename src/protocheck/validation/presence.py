"""Field presence rules.

A value counts as "set" when it differs from its kind's default, with one
exception: booleans always count as set because both ``True`` and ``False``
are observable assignments. Numeric zero and the zero enum value therefore
read as unset, exactly like an untouched proto3 field.
"""

from collections.abc import Mapping, Sequence, Sized
from typing import Any

from protocheck.schema.descriptors import FieldDescriptor, FieldKind, OneofDescriptor, ScalarType


def get_field_value(message: Any, field: FieldDescriptor) -> Any:
    """Read a field's current value from a message instance.

    Mappings are read by key, any other object by attribute. Objects exposing
    protobuf's ``HasField`` report unset singular message fields as None.

    Args:
        message: The message instance
        field: The field to read

    Returns:
        The value, or None when the instance does not carry the field
    """
    if message is None:
        return None
    if isinstance(message, Mapping):
        return message.get(field.accessor)
    if field.kind == FieldKind.MESSAGE and callable(getattr(message, "HasField", None)):
        if not message.HasField(field.name):
            return None
    return getattr(message, field.accessor, None)


def is_list_value(value: Any) -> bool:
    """True for sequences that can back a repeated field; strings and bytes do not count."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def is_value_set(value: Any, kind: FieldKind, scalar: ScalarType | None = None) -> bool:
    """Decide whether a single value of the given kind counts as set."""
    if value is None:
        return False

    if kind == FieldKind.LIST:
        return is_list_value(value) and len(value) > 0

    if kind == FieldKind.MAP:
        return isinstance(value, Mapping) and len(value) > 0

    if kind == FieldKind.MESSAGE:
        return True

    if kind == FieldKind.ENUM:
        return bool(value != 0)

    if scalar == ScalarType.BOOL:
        return True

    if scalar in (ScalarType.STRING, ScalarType.BYTES):
        return len(value) > 0 if isinstance(value, Sized) else True

    return bool(value != 0)


def is_set(value: Any, field: FieldDescriptor) -> bool:
    """Decide whether ``value`` counts as set for ``field``."""
    return is_value_set(value, field.kind, field.scalar)


def is_field_set(message: Any, field: FieldDescriptor) -> bool:
    return is_set(get_field_value(message, field), field)


def active_oneof_member(message: Any, oneof: OneofDescriptor) -> FieldDescriptor | None:
    """Return the member of ``oneof`` currently holding a value, if any.

    Oneof members track presence explicitly, so a member assigned a default
    value (``0``, ``""``) is still the active one. Objects exposing protobuf's
    ``WhichOneof`` are asked directly.
    """
    which_oneof = getattr(message, "WhichOneof", None)
    if callable(which_oneof) and not isinstance(message, Mapping):
        name = which_oneof(oneof.name)
        return next((member for member in oneof.fields if member.name == name), None)

    for member in oneof.fields:
        if get_field_value(message, member) is not None:
            return member
    return None
