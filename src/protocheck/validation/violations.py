"""Constraint violations and message templates."""

import re
from collections.abc import Mapping, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER_PATTERN = re.compile(r"\$?\{([^{}]+)\}")


class TemplateString(BaseModel):
    """A message with named placeholders, e.g. ``"The number must be at least {other}."``."""

    model_config = ConfigDict(frozen=True)

    with_placeholders: str
    placeholder_value: dict[str, str] = Field(default_factory=dict)

    def format(self) -> str:
        return render(self.with_placeholders, self.placeholder_value)


class ConstraintViolation(BaseModel):
    """A single failed constraint.

    Attributes:
        type_name: Full name of the message type the path starts from
        field_path: Path from that type to the offending value; list indices and
            map keys appear as strings. Empty for message-level violations.
        field_value: String form of the offending value, when there is one
        message: The templated, human-readable explanation
    """

    model_config = ConfigDict(frozen=True)

    type_name: str
    field_path: tuple[str, ...] = ()
    field_value: str | None = None
    message: TemplateString

    def format(self) -> str:
        return self.message.format()

    def with_prefix(self, prefix: Sequence[str], type_name: str) -> "ConstraintViolation":
        """Return a copy whose path is rooted ``prefix`` levels higher, in ``type_name``."""
        return self.model_copy(update={"type_name": type_name, "field_path": (*prefix, *self.field_path)})


def stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.hex()
    return str(value)


def create_violation(
    type_name: str,
    field_path: Sequence[str],
    template: str,
    placeholders: Mapping[str, Any] | None = None,
    field_value: Any = None,
) -> ConstraintViolation:
    """Build a violation; placeholder values are stringified."""
    return ConstraintViolation(
        type_name=type_name,
        field_path=tuple(field_path),
        field_value=None if field_value is None else stringify(field_value),
        message=TemplateString(
            with_placeholders=template,
            placeholder_value={key: stringify(value) for key, value in (placeholders or {}).items()},
        ),
    )


def render(template: str, placeholders: Mapping[str, str]) -> str:
    """Substitute ``{key}`` and ``${key}`` placeholders.

    Placeholders without a value are left untouched.

    Args:
        template: Template text
        placeholders: Placeholder name -> value

    Returns:
        The rendered message
    """

    def replace(match: re.Match[str]) -> str:
        key = match.group(1)
        return placeholders[key] if key in placeholders else match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, template)


def format_violations(violations: Sequence[ConstraintViolation]) -> str:
    """Number and join violations as ``<n>. <type>.<path>: <message>`` lines."""
    if not violations:
        return "No violations"

    lines = []
    for index, violation in enumerate(violations, start=1):
        path = ".".join(violation.field_path) or "unknown"
        lines.append(f"{index}. {violation.type_name}.{path}: {violation.format()}")
    return "\n".join(lines)
