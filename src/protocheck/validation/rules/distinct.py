"""``distinct``: elements of a repeated scalar or enum field must be unique."""

from collections.abc import Hashable
from typing import Any

from protocheck.schema.constraints import ConstraintKind, Distinct
from protocheck.schema.descriptors import FieldKind, MessageSchema
from protocheck.validation.presence import get_field_value
from protocheck.validation.rules.base import ValidationContext, iter_entries
from protocheck.validation.violations import ConstraintViolation, create_violation

DEFAULT_MESSAGE = (
    "Duplicate value found in repeated field. "
    "Value {value} at index {duplicate_index} is a duplicate of the value at index {first_index}."
)


def find_duplicates(values: list[Any]) -> list[tuple[int, int]]:
    """Return ``(first_index, duplicate_index)`` for every repeated occurrence.

    Each later occurrence is reported once, against the first occurrence of
    its value, so ``[1, 2, 1, 3, 2, 4]`` yields two entries.
    """
    first_seen: dict[Any, int] = {}
    unhashable: list[tuple[Any, int]] = []
    duplicates: list[tuple[int, int]] = []

    for index, value in enumerate(values):
        if isinstance(value, Hashable):
            # NaN never equals itself, even when the same object repeats.
            if value != value:
                continue
            if value in first_seen:
                duplicates.append((first_seen[value], index))
            else:
                first_seen[value] = index
            continue

        first_index = next((seen_index for seen, seen_index in unhashable if seen == value), None)
        if first_index is None:
            unhashable.append((value, index))
        else:
            duplicates.append((first_index, index))

    return duplicates


def validate_distinct_fields(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    for field in schema.fields:
        distinct: Distinct | None = field.get_constraint(ConstraintKind.DISTINCT)
        if distinct is None or not distinct.value or field.kind != FieldKind.LIST:
            continue
        if field.value_kind not in (FieldKind.SCALAR, FieldKind.ENUM):
            continue

        value = get_field_value(message, field)
        if value is None:
            continue

        values = [element for _, element in iter_entries(field, value)]
        if len(values) <= 1:
            continue

        for first_index, duplicate_index in find_duplicates(values):
            violations.append(
                create_violation(
                    schema.full_name,
                    [field.name, str(duplicate_index)],
                    DEFAULT_MESSAGE,
                    {"value": values[duplicate_index], "first_index": first_index, "duplicate_index": duplicate_index},
                    field_value=values[duplicate_index],
                )
            )
