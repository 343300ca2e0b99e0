import re

from protocheck.errors import ExpressionSyntaxError, RangeSyntaxError, ThresholdSyntaxError
from protocheck.schema.constraints import ConstraintKind, Goes, Max, Min, Pattern, Range, RequiredField
from protocheck.schema.descriptors import FieldKind, MessageSchema, SchemaPool
from protocheck.validation.expression import parse_expression, referenced_fields
from protocheck.validation.ranges import parse_range, parse_threshold
from protocheck.validation.rules.pattern import regex_flags


class ConstraintChecker:
    """Lint the constraint configuration of every message in a pool.

    Each finding is one line formatted ``[<kind>] <Type>.<field> <problem>``.
    """

    def __init__(self, pool: SchemaPool):
        self.pool = pool

    def check_field_kinds(self, schema: MessageSchema) -> list[str]:
        errors = []
        for field in schema.fields:
            location = f"{schema.full_name}.{field.name}"
            numeric_kinds = [
                kind.value
                for kind in (ConstraintKind.MIN, ConstraintKind.MAX, ConstraintKind.RANGE)
                if field.has_constraint(kind)
            ]
            if numeric_kinds and not field.is_numeric:
                for kind in numeric_kinds:
                    errors.append(f"[{kind}] {location} can only be applied to numeric fields")
            elif numeric_kinds and field.kind == FieldKind.MAP:
                for kind in numeric_kinds:
                    errors.append(f"[{kind}] {location} cannot be applied to map fields")
            if field.has_constraint(ConstraintKind.PATTERN) and not field.is_string:
                errors.append(f"[pattern] {location} can only be applied to string fields")
            elif field.has_constraint(ConstraintKind.PATTERN) and field.kind == FieldKind.MAP:
                errors.append(f"[pattern] {location} cannot be applied to map fields")
            if field.has_constraint(ConstraintKind.DISTINCT) and field.kind != FieldKind.LIST:
                errors.append(f"[distinct] {location} can only be applied to repeated fields")
            if field.has_constraint(ConstraintKind.VALIDATE) and field.value_kind != FieldKind.MESSAGE:
                errors.append(f"[validate] {location} can only be applied to message fields")
            if field.value_kind == FieldKind.MESSAGE and field.message_type not in self.pool:
                errors.append(f"[type] {location} references unknown message type '{field.message_type}'")
        return errors

    def check_min_leq_max(self, schema: MessageSchema) -> list[str]:
        errors = []
        for field in schema.fields:
            if not field.is_numeric or field.scalar is None:
                continue
            location = f"{schema.full_name}.{field.name}"
            bounds = {}
            for kind in (ConstraintKind.MIN, ConstraintKind.MAX):
                option: Min | Max | None = field.get_constraint(kind)
                if option is None:
                    continue
                try:
                    bounds[kind] = parse_threshold(option.value, field.scalar)
                except ThresholdSyntaxError as e:
                    errors.append(f"[{kind.value}] {location} {e}")

            if ConstraintKind.MIN in bounds and ConstraintKind.MAX in bounds:
                min_val, max_val = bounds[ConstraintKind.MIN], bounds[ConstraintKind.MAX]
                if min_val > max_val:
                    errors.append(f"[min] {location} has min > max ({min_val} > {max_val})")

            range_option: Range | None = field.get_constraint(ConstraintKind.RANGE)
            if range_option is not None:
                try:
                    parse_range(range_option.value, field.scalar)
                except RangeSyntaxError as e:
                    errors.append(f"[range] {location} {e}")
        return errors

    def check_patterns(self, schema: MessageSchema) -> list[str]:
        errors = []
        for field in schema.fields:
            pattern: Pattern | None = field.get_constraint(ConstraintKind.PATTERN)
            if pattern is None:
                continue
            try:
                re.compile(pattern.regex, regex_flags(pattern.modifier))
            except re.error as e:
                errors.append(f"[pattern] {schema.full_name}.{field.name} has invalid regex '{pattern.regex}': {e}")
        return errors

    def check_goes_targets(self, schema: MessageSchema) -> list[str]:
        errors = []
        for field in schema.fields:
            goes: Goes | None = field.get_constraint(ConstraintKind.GOES)
            if goes is None:
                continue
            location = f"{schema.full_name}.{field.name}"
            if schema.find_field(goes.with_) is None:
                errors.append(f"[goes] {location} references non-existent field '{goes.with_}'")
            elif goes.with_ == field.name:
                errors.append(f"[goes] {location} references itself")
        return errors

    def check_required_field(self, schema: MessageSchema) -> list[str]:
        required_field: RequiredField | None = schema.get_constraint(ConstraintKind.REQUIRED_FIELD)
        if required_field is None:
            return []
        location = f"{schema.full_name}.<message>"
        try:
            expression = parse_expression(required_field.fields)
        except ExpressionSyntaxError as e:
            return [f"[required_field] {location} {e}"]
        return [
            f"[required_field] {location} references non-existent field '{name}'"
            for name in referenced_fields(expression)
            if schema.find_field(name) is None
        ]

    def check_oneof_members(self, schema: MessageSchema) -> list[str]:
        errors = []
        for oneof in schema.oneofs:
            for field in oneof.fields:
                if field.is_repeated:
                    errors.append(
                        f"[choice] {schema.full_name}.{field.name} is repeated and cannot join oneof '{oneof.name}'"
                    )
        return errors

    def run(self) -> list[str]:
        errors: list[str] = []
        for schema in self.pool.values():
            errors += self.check_field_kinds(schema)
            errors += self.check_min_leq_max(schema)
            errors += self.check_patterns(schema)
            errors += self.check_goes_targets(schema)
            errors += self.check_required_field(schema)
            errors += self.check_oneof_members(schema)
        return errors
