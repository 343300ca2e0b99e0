"""``goes``: a field may only be set when another field is set too.

For ``time [(goes).with = "date"]``: ``time`` set without ``date`` is a
violation; ``time`` unset is always valid. The check is one-directional; a
mutual dependency needs the constraint on both fields.
"""

from typing import Any

from protocheck.schema.constraints import ConstraintKind, Goes
from protocheck.schema.descriptors import MessageSchema
from protocheck.validation.presence import get_field_value, is_field_set, is_set
from protocheck.validation.rules.base import ValidationContext
from protocheck.validation.violations import ConstraintViolation, create_violation


def validate_goes_fields(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    for field in schema.fields:
        goes: Goes | None = field.get_constraint(ConstraintKind.GOES)
        if goes is None or not goes.with_:
            continue

        value = get_field_value(message, field)
        if not is_set(value, field):
            continue

        target = schema.find_field(goes.with_)
        if target is None:
            template = f"Field `{field.name}` references non-existent field `{goes.with_}` in (goes).with option."
        elif is_field_set(message, target):
            continue
        else:
            template = (
                goes.error_msg
                or f"The field `{field.name}` can only be set when the field `{goes.with_}` is defined."
            )

        violations.append(
            create_violation(
                schema.full_name,
                [field.name],
                template,
                {"value": value, "field": field.name, "with": goes.with_},
                field_value=value,
            )
        )
