"""``range``: bracket-notation numeric intervals such as ``"[0..24)"``."""

from typing import Any

from protocheck import log
from protocheck.errors import RangeSyntaxError
from protocheck.schema.constraints import ConstraintKind, Range
from protocheck.schema.descriptors import MessageSchema
from protocheck.validation.ranges import is_number, parse_range
from protocheck.validation.rules.base import ValidationContext, iter_values
from protocheck.validation.violations import ConstraintViolation, create_violation


def validate_range_fields(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    for field in schema.fields:
        option: Range | None = field.get_constraint(ConstraintKind.RANGE)
        if option is None or not field.is_numeric or field.scalar is None:
            continue

        try:
            numeric_range = parse_range(option.value, field.scalar)
        except RangeSyntaxError as e:
            log.warning(f"Ignoring range on {schema.full_name}.{field.name}: {e}")
            continue

        for path, value in iter_values(message, field):
            if is_number(value) and not numeric_range.contains(value):
                violations.append(
                    create_violation(
                        schema.full_name,
                        path,
                        f"The number must be in range {option.value}.",
                        {"value": value, "range": option.value},
                        field_value=value,
                    )
                )
