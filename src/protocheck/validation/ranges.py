"""Numeric bound parsing for the ``min``, ``max`` and ``range`` constraints."""

import math
from dataclasses import dataclass

from protocheck.errors import ErrorMessages, RangeSyntaxError, ThresholdSyntaxError
from protocheck.schema.descriptors import ScalarType

RANGE_SEPARATOR = ".."
OPEN_BRACKETS = {"[": True, "(": False}
CLOSE_BRACKETS = {"]": True, ")": False}

Number = int | float


def parse_number(text: str, scalar: ScalarType) -> Number:
    """Parse ``text`` as the numeric type backing ``scalar``.

    Integer-family fields accept integer literals only; float and double
    fields accept finite float literals.

    Raises:
        ValueError: If the text is not a number of the expected family.
    """
    text = text.strip()
    if scalar.is_floating:
        number = float(text)
        if not math.isfinite(number):
            raise ValueError(f"Bound must be finite, got {text}")
        return number
    return int(text, 10)


def parse_threshold(text: str, scalar: ScalarType) -> Number:
    """Parse a ``min``/``max`` threshold for a field of type ``scalar``.

    Raises:
        ThresholdSyntaxError: If ``text`` is not a valid number for the field type.
    """
    try:
        return parse_number(text, scalar)
    except ValueError:
        raise ThresholdSyntaxError(f"Invalid threshold '{text}' for {scalar.value} field") from None


def is_number(value: object) -> bool:
    """True for int and float values; bools are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def satisfies_min(value: Number, threshold: Number, exclusive: bool = False) -> bool:
    return value > threshold if exclusive else value >= threshold


def satisfies_max(value: Number, threshold: Number, exclusive: bool = False) -> bool:
    return value < threshold if exclusive else value <= threshold


@dataclass(frozen=True)
class NumericRange:
    """A numeric interval with independently inclusive or exclusive ends."""

    minimum: Number
    maximum: Number
    min_inclusive: bool = True
    max_inclusive: bool = True

    def contains(self, value: Number) -> bool:
        return satisfies_min(value, self.minimum, not self.min_inclusive) and satisfies_max(
            value, self.maximum, not self.max_inclusive
        )

    def __str__(self) -> str:
        open_bracket = "[" if self.min_inclusive else "("
        close_bracket = "]" if self.max_inclusive else ")"
        return f"{open_bracket}{self.minimum}{RANGE_SEPARATOR}{self.maximum}{close_bracket}"


def parse_range(text: str, scalar: ScalarType) -> NumericRange:
    """Parse bracket notation such as ``"[0..100)"``.

    ``[``/``]`` mark an inclusive end, ``(``/``)`` an exclusive one; each side
    is chosen independently.

    Args:
        text: The range string
        scalar: Scalar type of the constrained field, selecting integer or float parsing

    Returns:
        The parsed range

    Raises:
        RangeSyntaxError: On missing brackets, a missing ``..`` separator,
            non-numeric bounds or ``min > max``.
    """
    trimmed = text.strip()
    if len(trimmed) < 2 or trimmed[0] not in OPEN_BRACKETS or trimmed[-1] not in CLOSE_BRACKETS:
        raise RangeSyntaxError(f"Invalid range '{text}': {ErrorMessages.MISSING_BRACKETS}")

    bounds = trimmed[1:-1].split(RANGE_SEPARATOR)
    if len(bounds) != 2:
        raise RangeSyntaxError(f"Invalid range '{text}': {ErrorMessages.MISSING_SEPARATOR}")

    try:
        minimum, maximum = (parse_number(bound, scalar) for bound in bounds)
    except ValueError:
        raise RangeSyntaxError(f"Invalid range '{text}': {ErrorMessages.NOT_A_NUMBER}") from None

    if minimum > maximum:
        raise RangeSyntaxError(f"Invalid range '{text}': {ErrorMessages.MIN_GREATER_THAN_MAX}")

    return NumericRange(minimum, maximum, OPEN_BRACKETS[trimmed[0]], CLOSE_BRACKETS[trimmed[-1]])
