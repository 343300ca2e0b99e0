"""``pattern``: string values must match a regular expression."""

import re
from functools import lru_cache
from typing import Any

from protocheck import log
from protocheck.schema.constraints import ConstraintKind, Pattern, PatternModifier
from protocheck.schema.descriptors import MessageSchema
from protocheck.validation.rules.base import ValidationContext, iter_values
from protocheck.validation.violations import ConstraintViolation, create_violation


def regex_flags(modifier: PatternModifier) -> int:
    flags = 0
    if modifier.case_insensitive:
        flags |= re.IGNORECASE
    if modifier.multiline:
        flags |= re.MULTILINE
    if modifier.dot_all:
        flags |= re.DOTALL
    if modifier.unicode:
        flags |= re.UNICODE
    return flags


@lru_cache(maxsize=512)
def compile_pattern(regex: str, flags: int) -> re.Pattern[str]:
    return re.compile(regex, flags)


def matches(value: str, pattern: Pattern) -> bool:
    """Check ``value`` against ``pattern``.

    A match anywhere in the string is enough; anchor the regex with ``^`` and
    ``$`` to require a full match. ``partial_match`` is accepted but does not
    change the outcome.

    Raises:
        re.error: If the regular expression does not compile.
    """
    compiled = compile_pattern(pattern.regex, regex_flags(pattern.modifier))
    return compiled.search(value) is not None


def validate_pattern_fields(
    schema: MessageSchema, message: Any, violations: list[ConstraintViolation], context: ValidationContext
) -> None:
    for field in schema.fields:
        pattern: Pattern | None = field.get_constraint(ConstraintKind.PATTERN)
        if pattern is None or not field.is_string:
            continue

        template = pattern.error_msg or f"The string must match the regular expression `{pattern.regex}`."
        for path, value in iter_values(message, field):
            # Empty strings are left to `required`.
            if not isinstance(value, str) or value == "":
                continue
            try:
                valid = matches(value, pattern)
            except re.error as e:
                log.warning(f"Invalid regex '{pattern.regex}' on {schema.full_name}.{field.name}: {e}")
                break
            if not valid:
                violations.append(
                    create_violation(
                        schema.full_name,
                        path,
                        template,
                        {"field": field.name, "value": value, "regex": pattern.regex},
                        field_value=value,
                    )
                )
