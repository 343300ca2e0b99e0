"""Shared plumbing for constraint rules."""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any

from protocheck import log
from protocheck.schema.descriptors import FieldDescriptor, FieldKind, MessageSchema
from protocheck.validation.presence import get_field_value, is_list_value
from protocheck.validation.violations import ConstraintViolation

NestedValidator = Callable[[MessageSchema, Any, int], list[ConstraintViolation]]


@dataclass(frozen=True)
class ValidationContext:
    """Per-call state handed to every rule.

    Args:
        validate_nested: Runs the full rule set on a nested message at the given depth
        depth: Nesting depth of the message being validated (0 for the root)
        max_depth: Deepest nesting level that is still validated
    """

    validate_nested: NestedValidator
    depth: int = 0
    max_depth: int = 64


Rule = Callable[[MessageSchema, Any, list[ConstraintViolation], ValidationContext], None]


def iter_entries(field: FieldDescriptor, value: Any) -> list[tuple[str, Any]]:
    """Pair each element of a list or map value with its index or key.

    A value that does not have the container shape of its field is logged and
    yields no entries.
    """
    if field.kind == FieldKind.LIST and is_list_value(value):
        return [(str(index), element) for index, element in enumerate(value)]
    if field.kind == FieldKind.MAP and isinstance(value, Mapping):
        return [(str(key), entry) for key, entry in value.items()]
    log.warning(f"Expected a {field.kind.value} value for field {field.name}, got {type(value).__name__}")
    return []


def iter_values(message: Any, field: FieldDescriptor) -> Iterator[tuple[tuple[str, ...], Any]]:
    """Yield ``(path, value)`` for each value of a scalar or list field.

    Singular fields yield ``((name,), value)`` when the value is not None;
    lists yield one entry per element with the index as the last path segment.
    Map fields yield nothing.
    """
    value = get_field_value(message, field)
    if value is None or field.kind == FieldKind.MAP:
        return
    if field.kind == FieldKind.LIST:
        for index, element in iter_entries(field, value):
            yield (field.name, index), element
    else:
        yield (field.name,), value
