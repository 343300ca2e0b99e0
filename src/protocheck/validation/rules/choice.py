"""``choice``: a required oneof group must have one of its members set."""

from typing import Any

from protocheck.schema.constraints import Choice, ConstraintKind
from protocheck.schema.descriptors import MessageSchema
from protocheck.validation.presence import active_oneof_member
from protocheck.validation.rules.base import ValidationContext
from protocheck.validation.violations import ConstraintViolation, create_violation


def validate_choice_fields(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    for oneof in schema.oneofs:
        choice: Choice | None = oneof.get_constraint(ConstraintKind.CHOICE)
        if choice is None or not choice.required:
            continue

        if active_oneof_member(message, oneof) is None:
            violations.append(
                create_violation(
                    schema.full_name,
                    [oneof.name],
                    choice.error_msg or f"The oneof group '{oneof.name}' must have one of its fields set.",
                    {"group.path": oneof.name, "parent.type": schema.full_name},
                )
            )
