"""``validate``: recursive validation of nested message fields.

A failing nested message produces one violation on the parent field plus
every nested violation re-rooted under that field. List elements and map
entries insert their index or key right after the field name, so a problem
at ``name`` in the second member surfaces as ``members.1.name``.
"""

from typing import Any

from protocheck import log
from protocheck.schema.constraints import ConstraintKind, IfInvalid, Validate
from protocheck.schema.descriptors import FieldDescriptor, FieldKind, MessageSchema
from protocheck.validation.presence import get_field_value
from protocheck.validation.rules.base import ValidationContext, iter_entries
from protocheck.validation.violations import ConstraintViolation, create_violation

DEFAULT_MESSAGE = "Nested message validation failed."
MAX_DEPTH_MESSAGE = "Maximum nesting depth of {max_depth} exceeded."


def iter_nested_messages(message: Any, field: FieldDescriptor) -> list[tuple[tuple[str, ...], Any]]:
    """Collect ``(path, nested message)`` pairs for a message, list or map field, skipping unset entries."""
    value = get_field_value(message, field)
    if value is None:
        return []
    if field.kind == FieldKind.MESSAGE:
        return [((field.name,), value)]
    return [((field.name, segment), entry) for segment, entry in iter_entries(field, value) if entry is not None]


def validate_nested_message(
    schema: MessageSchema,
    field: FieldDescriptor,
    path: tuple[str, ...],
    nested_schema: MessageSchema,
    nested_message: Any,
    violations: list[ConstraintViolation],
    context: ValidationContext,
) -> None:
    if context.depth >= context.max_depth:
        violations.append(
            create_violation(
                schema.full_name, path, MAX_DEPTH_MESSAGE.format(max_depth=context.max_depth), {"field": field.name}
            )
        )
        return

    nested_violations = context.validate_nested(nested_schema, nested_message, context.depth + 1)
    if not nested_violations:
        return

    if_invalid: IfInvalid | None = field.get_constraint(ConstraintKind.IF_INVALID)
    template = if_invalid.error_msg if if_invalid is not None and if_invalid.error_msg else DEFAULT_MESSAGE
    violations.append(
        create_violation(schema.full_name, path, template, {"field": field.name, "type": nested_schema.full_name})
    )
    violations.extend(violation.with_prefix(path, schema.full_name) for violation in nested_violations)


def validate_nested_fields(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    for field in schema.fields:
        validate: Validate | None = field.get_constraint(ConstraintKind.VALIDATE)
        if validate is None or not validate.value or field.value_kind != FieldKind.MESSAGE:
            continue

        nested_schema = schema.nested_schema(field)
        if nested_schema is None:
            log.warning(f"Cannot resolve message type '{field.message_type}' of {schema.full_name}.{field.name}")
            continue

        for path, nested_message in iter_nested_messages(message, field):
            validate_nested_message(schema, field, path, nested_schema, nested_message, violations, context)
