"""Runs every constraint rule over a message and collects the violations."""

from collections.abc import Iterable, Sequence
from typing import Any

from protocheck.config import ValidationSettings
from protocheck.schema.constraints import DEFAULT_REGISTRY, ConstraintKind, ConstraintRegistry
from protocheck.schema.descriptors import MessageSchema
from protocheck.validation.rules.base import Rule, ValidationContext
from protocheck.validation.rules.choice import validate_choice_fields
from protocheck.validation.rules.distinct import validate_distinct_fields
from protocheck.validation.rules.goes import validate_goes_fields
from protocheck.validation.rules.min_max import validate_min_max_fields
from protocheck.validation.rules.nested import validate_nested_fields
from protocheck.validation.rules.pattern import validate_pattern_fields
from protocheck.validation.rules.range import validate_range_fields
from protocheck.validation.rules.required import validate_required_fields
from protocheck.validation.rules.required_field import validate_required_field_option
from protocheck.validation.violations import ConstraintViolation

# Evaluation order; it only affects the order of the returned violations.
RULES: Sequence[tuple[tuple[ConstraintKind, ...], Rule]] = (
    ((ConstraintKind.REQUIRED, ConstraintKind.IF_MISSING), validate_required_fields),
    ((ConstraintKind.PATTERN,), validate_pattern_fields),
    ((ConstraintKind.REQUIRED_FIELD,), validate_required_field_option),
    ((ConstraintKind.MIN, ConstraintKind.MAX), validate_min_max_fields),
    ((ConstraintKind.RANGE,), validate_range_fields),
    ((ConstraintKind.DISTINCT,), validate_distinct_fields),
    ((ConstraintKind.VALIDATE, ConstraintKind.IF_INVALID), validate_nested_fields),
    ((ConstraintKind.GOES,), validate_goes_fields),
    ((ConstraintKind.CHOICE,), validate_choice_fields),
)


def select_rules(kinds: Iterable[ConstraintKind]) -> tuple[Rule, ...]:
    """Return the rules evaluating any of ``kinds``, in evaluation order."""
    wanted = set(kinds)
    return tuple(rule for rule_kinds, rule in RULES if wanted.intersection(rule_kinds))


class MessageValidator:
    """Validates messages against the constraints attached to their schema.

    Only the rules for constraint kinds known to ``registry`` run. The
    validator holds no per-call state and can be shared between threads.
    """

    def __init__(
        self, settings: ValidationSettings | None = None, registry: ConstraintRegistry = DEFAULT_REGISTRY
    ) -> None:
        self.settings = settings or ValidationSettings()
        self.registry = registry
        self.rules = select_rules(registry.kinds())

    def validate(self, schema: MessageSchema, message: Any) -> list[ConstraintViolation]:
        """Validate ``message`` against ``schema``.

        Args:
            schema: Schema of the message
            message: The message instance, as a mapping or an attribute object

        Returns:
            All violations found; an empty list means the message is valid.
        """
        return self._validate(schema, message, 0)

    def _validate(self, schema: MessageSchema, message: Any, depth: int) -> list[ConstraintViolation]:
        violations: list[ConstraintViolation] = []
        context = ValidationContext(self._validate, depth, self.settings.max_depth)
        for rule in self.rules:
            rule(schema, message, violations, context)
        return violations


_DEFAULT_VALIDATOR = MessageValidator()


def validate(schema: MessageSchema, message: Any) -> list[ConstraintViolation]:
    """Validate ``message`` with the default settings."""
    return _DEFAULT_VALIDATOR.validate(schema, message)
