"""``required_field``: a message-level combination of fields that must be set.

Example: ``"given_name | (honorific_prefix & family_name)"`` is satisfied by
``given_name`` alone or by both ``honorific_prefix`` and ``family_name``.
"""

from typing import Any

from protocheck import log
from protocheck.errors import ExpressionSyntaxError
from protocheck.schema.constraints import ConstraintKind, RequiredField
from protocheck.schema.descriptors import MessageSchema
from protocheck.validation.expression import evaluate, parse_expression
from protocheck.validation.presence import is_field_set
from protocheck.validation.rules.base import ValidationContext
from protocheck.validation.violations import ConstraintViolation, create_violation

MESSAGE_PREFIX = "At least one of the required field combinations must be satisfied: "


def is_expression_satisfied(schema: MessageSchema, message: Any, expression: str) -> bool:
    """Evaluate ``expression`` against the fields of ``message``.

    Unknown field names are logged and count as unset.

    Raises:
        ExpressionSyntaxError: If the expression cannot be parsed.
    """

    def is_present(name: str) -> bool:
        field = schema.find_field(name)
        if field is None:
            log.warning(f'Field "{name}" not found in schema {schema.full_name}')
            return False
        return is_field_set(message, field)

    return evaluate(parse_expression(expression), is_present)


def validate_required_field_option(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    required_field: RequiredField | None = schema.get_constraint(ConstraintKind.REQUIRED_FIELD)
    if required_field is None or not required_field.fields.strip():
        return

    expression = required_field.fields
    try:
        satisfied = is_expression_satisfied(schema, message, expression)
    except ExpressionSyntaxError as e:
        log.warning(f"Ignoring required_field on {schema.full_name}: {e}")
        return

    if not satisfied:
        violations.append(
            create_violation(schema.full_name, [], MESSAGE_PREFIX + expression, {"expression": expression})
        )
