"""``min`` and ``max``: numeric lower and upper bounds.

Bounds are inclusive unless ``exclusive`` is set and apply to each element
of a repeated numeric field.
"""

from typing import Any

from protocheck import log
from protocheck.errors import ThresholdSyntaxError
from protocheck.schema.constraints import ConstraintKind, Max, Min
from protocheck.schema.descriptors import MessageSchema
from protocheck.validation.ranges import Number, is_number, parse_threshold, satisfies_max, satisfies_min
from protocheck.validation.rules.base import ValidationContext, iter_values
from protocheck.validation.violations import ConstraintViolation, create_violation


def min_message(option: Min) -> str:
    if option.error_msg:
        return option.error_msg
    comparator = "greater than" if option.exclusive else "at least"
    return f"The number must be {comparator} {{other}}."


def max_message(option: Max) -> str:
    if option.error_msg:
        return option.error_msg
    comparator = "less than" if option.exclusive else "at most"
    return f"The number must be {comparator} {{other}}."


def validate_min_max_fields(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    for field in schema.fields:
        min_option: Min | None = field.get_constraint(ConstraintKind.MIN)
        max_option: Max | None = field.get_constraint(ConstraintKind.MAX)
        if (min_option is None and max_option is None) or not field.is_numeric or field.scalar is None:
            continue

        bounds: list[tuple[Min | Max, Number]] = []
        for option in (min_option, max_option):
            if option is None or not option.value:
                continue
            try:
                bounds.append((option, parse_threshold(option.value, field.scalar)))
            except ThresholdSyntaxError as e:
                log.warning(f"Ignoring {option.kind.value} on {schema.full_name}.{field.name}: {e}")

        for path, value in iter_values(message, field):
            if not is_number(value):
                continue
            for option, threshold in bounds:
                if isinstance(option, Min):
                    valid = satisfies_min(value, threshold, option.exclusive)
                    template = min_message(option)
                else:
                    valid = satisfies_max(value, threshold, option.exclusive)
                    template = max_message(option)

                if not valid:
                    violations.append(
                        create_violation(
                            schema.full_name,
                            path,
                            template,
                            {"value": value, "other": option.value},
                            field_value=value,
                        )
                    )
