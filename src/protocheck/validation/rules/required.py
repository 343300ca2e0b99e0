"""``required``: the field must hold a non-default value."""

from typing import Any

from protocheck.schema.constraints import ConstraintKind, IfMissing, Required
from protocheck.schema.descriptors import FieldKind, MessageSchema
from protocheck.validation.presence import get_field_value, is_set
from protocheck.validation.rules.base import ValidationContext
from protocheck.validation.violations import ConstraintViolation, create_violation

DEFAULT_MESSAGE = "A value must be set."
DEFAULT_LIST_MESSAGE = "At least one element must be present."


def validate_required_fields(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    for field in schema.fields:
        required: Required | None = field.get_constraint(ConstraintKind.REQUIRED)
        if required is None or not required.value:
            continue

        value = get_field_value(message, field)
        if is_set(value, field):
            continue

        if_missing: IfMissing | None = field.get_constraint(ConstraintKind.IF_MISSING)
        if if_missing is not None and if_missing.error_msg:
            template = if_missing.error_msg
        elif field.kind == FieldKind.LIST:
            template = DEFAULT_LIST_MESSAGE
        else:
            template = DEFAULT_MESSAGE

        violations.append(
            create_violation(
                schema.full_name,
                [field.name],
                template,
                {"field": field.name, "value": "" if value is None else value},
            )
        )
