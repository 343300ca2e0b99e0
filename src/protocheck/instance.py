"""Load message instances from YAML or JSON documents."""

from pathlib import Path
from typing import Any

import yaml

from protocheck import log
from protocheck.schema.descriptors import FieldDescriptor, FieldKind, MessageSchema


def load_instance(path: Path) -> Any:
    """Read a YAML or JSON document (JSON is parsed as YAML).

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the document is not valid YAML/JSON.
        TypeError: If the document root is not a mapping.
    """
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise TypeError(f"Instance root must be a mapping, got {type(data).__name__}")
    return data


def enum_number(field: FieldDescriptor, value: Any) -> Any:
    """Map an enum value name to its number; numbers and unknown names are returned unchanged."""
    if isinstance(value, str) and value in field.enum_values:
        return field.enum_values.index(value)
    if isinstance(value, str):
        log.warning(f"Unknown value '{value}' for enum field {field.name}")
    return value


def _coerce_value(schema: MessageSchema, field: FieldDescriptor, value: Any, seen: frozenset[int]) -> Any:
    if field.value_kind == FieldKind.ENUM:
        return enum_number(field, value)
    nested = schema.nested_schema(field)
    if nested is not None:
        return coerce_instance(nested, value, seen)
    return value


def coerce_instance(schema: MessageSchema, data: Any, _seen: frozenset[int] = frozenset()) -> Any:
    """Return a copy of ``data`` with enum names replaced by their numbers.

    Nested messages are coerced with their own schema. Values that do not
    have the shape the schema expects are left for the validator to judge.
    """
    if not isinstance(data, dict) or id(data) in _seen:
        return data
    seen = _seen | {id(data)}

    result = dict(data)
    for field in schema.fields:
        if field.accessor not in result or field.value_kind not in (FieldKind.ENUM, FieldKind.MESSAGE):
            continue
        value = result[field.accessor]
        if field.kind == FieldKind.LIST and isinstance(value, list):
            result[field.accessor] = [_coerce_value(schema, field, item, seen) for item in value]
        elif field.kind == FieldKind.MAP and isinstance(value, dict):
            result[field.accessor] = {key: _coerce_value(schema, field, item, seen) for key, item in value.items()}
        else:
            result[field.accessor] = _coerce_value(schema, field, value, seen)
    return result
