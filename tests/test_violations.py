from protocheck.validation.violations import (
    ConstraintViolation,
    TemplateString,
    create_violation,
    format_violations,
    render,
    stringify,
)


def test_render_substitutes_both_placeholder_styles() -> None:
    assert render("{field} is ${value}", {"field": "age", "value": "3"}) == "age is 3"


def test_render_leaves_unknown_placeholders() -> None:
    assert render("{known} {unknown} ${other}", {"known": "x"}) == "x {unknown} ${other}"


def test_render_accepts_dotted_keys() -> None:
    assert render("group '{group.path}' in {parent.type}", {"group.path": "contact", "parent.type": "a.B"}) == (
        "group 'contact' in a.B"
    )


def test_stringify() -> None:
    assert stringify(True) == "true"
    assert stringify(False) == "false"
    assert stringify(b"\x01\xff") == "01ff"
    assert stringify(1.5) == "1.5"


def test_create_violation_stringifies_values() -> None:
    violation = create_violation("a.B", ["tags", "2"], "Value {value} repeats", {"value": 7}, field_value=7)
    assert violation == ConstraintViolation(
        type_name="a.B",
        field_path=("tags", "2"),
        field_value="7",
        message=TemplateString(with_placeholders="Value {value} repeats", placeholder_value={"value": "7"}),
    )
    assert violation.format() == "Value 7 repeats"


def test_with_prefix_reroots_the_path() -> None:
    nested = create_violation("a.Address", ["city"], "A value must be set.")
    rerooted = nested.with_prefix(("members", "1", "address"), "a.Team")
    assert rerooted.type_name == "a.Team"
    assert rerooted.field_path == ("members", "1", "address", "city")
    assert nested.field_path == ("city",)


def test_format_violations_empty() -> None:
    assert format_violations([]) == "No violations"


def test_format_violations_numbers_each_line() -> None:
    violations = [
        create_violation("a.B", ["age"], "The number must be in range {range}.", {"range": "[0..150]"}),
        create_violation("a.B", [], "At least one of the required field combinations must be satisfied: id"),
    ]
    assert format_violations(violations) == (
        "1. a.B.age: The number must be in range [0..150].\n"
        "2. a.B.unknown: At least one of the required field combinations must be satisfied: id"
    )
