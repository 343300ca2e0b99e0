"""Exceptions raised while loading schemas and parsing constraint payloads.

Data violations are never raised; they are returned as ``ConstraintViolation``
entries by the validation engine. Everything defined here signals a mistake in
the schema or its constraint configuration and is raised at load time or by
the explicit parse helpers.
"""


class ProtocheckError(Exception):
    """Base class for all protocheck errors."""


class SchemaConfigurationError(ProtocheckError, ValueError):
    """Raised when a schema carries constraints that cannot be evaluated.

    Attributes:
        errors: One message per offending constraint.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        summary = "\n".join(f"  - {error}" for error in self.errors)
        super().__init__(f"Found {len(self.errors)} constraint configuration error(s):\n{summary}")


class UnsupportedConstraintError(ProtocheckError, ValueError):
    """Raised when a schema uses a constraint kind this engine cannot evaluate.

    Stateful constraints (for example ``set_once``) need knowledge of previous
    versions of a message and are rejected up front instead of passing silently.
    """


class ExpressionSyntaxError(ProtocheckError, ValueError):
    """Raised when a required-field combination expression cannot be parsed."""


class RangeSyntaxError(ProtocheckError, ValueError):
    """Raised when a bracket-notation range string is malformed."""


class ThresholdSyntaxError(ProtocheckError, ValueError):
    """Raised when a min/max threshold cannot be parsed for the field's type."""


class ErrorMessages:
    """Standard error message fragments, shared by raisers and tests."""

    UNBALANCED_PARENTHESES = "Unbalanced parentheses"
    UNEXPECTED_TOKEN = "Unexpected token"
    EMPTY_EXPRESSION = "Expression is empty"
    MISSING_BRACKETS = "missing brackets"
    MISSING_SEPARATOR = "missing .. separator"
    NOT_A_NUMBER = "non-numeric bound"
    MIN_GREATER_THAN_MAX = "min > max"
    UNSUPPORTED_KIND = "is not supported"
