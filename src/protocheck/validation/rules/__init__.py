"""Constraint rules. Each rule appends the violations it finds to a shared list."""

from .base import Rule, ValidationContext
from .choice import validate_choice_fields
from .distinct import validate_distinct_fields
from .goes import validate_goes_fields
from .min_max import validate_min_max_fields
from .nested import validate_nested_fields
from .pattern import validate_pattern_fields
from .range import validate_range_fields
from .required import validate_required_fields
from .required_field import validate_required_field_option

__all__ = [
    "Rule",
    "ValidationContext",
    "validate_choice_fields",
    "validate_distinct_fields",
    "validate_goes_fields",
    "validate_min_max_fields",
    "validate_nested_fields",
    "validate_pattern_fields",
    "validate_range_fields",
    "validate_required_field_option",
    "validate_required_fields",
]
