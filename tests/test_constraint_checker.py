from protocheck.schema.constraints import (
    Distinct,
    Goes,
    Max,
    Min,
    Pattern,
    Range,
    RequiredField,
    Validate,
    constraint_map,
)
from protocheck.schema.descriptors import FieldDescriptor, FieldKind, ScalarType, SchemaPool
from protocheck.tools.constraint_checker import ConstraintChecker
from tests.conftest import list_field, make_pool, make_schema, scalar_field


def check(*fields: FieldDescriptor, constraints: tuple = ()) -> list[str]:
    schema = make_schema(fields, *constraints, name="Foo")
    assert schema.pool is not None
    return ConstraintChecker(schema.pool).run()


def test_clean_schema_has_no_findings(people_pool: SchemaPool) -> None:
    assert ConstraintChecker(people_pool).run() == []


def test_min_leq_max() -> None:
    assert check(scalar_field("bar", ScalarType.INT32, Min(value="0"), Max(value="10"))) == []
    assert check(scalar_field("bar", ScalarType.INT32, Min(value="10"), Max(value="0"))) == [
        "[min] Foo.bar has min > max (10 > 0)"
    ]


def test_invalid_threshold() -> None:
    errors = check(scalar_field("bar", ScalarType.UINT32, Min(value="0.5")))
    assert errors == ["[min] Foo.bar Invalid threshold '0.5' for uint32 field"]


def test_invalid_range() -> None:
    errors = check(scalar_field("bar", ScalarType.DOUBLE, Range(value="[1..")))
    assert errors == ["[range] Foo.bar Invalid range '[1..': missing brackets"]


def test_numeric_constraints_on_string_field() -> None:
    errors = check(scalar_field("bar", ScalarType.STRING, Min(value="1"), Range(value="[0..1]")))
    assert errors == [
        "[min] Foo.bar can only be applied to numeric fields",
        "[range] Foo.bar can only be applied to numeric fields",
    ]


def test_pattern_on_non_string_field() -> None:
    errors = check(scalar_field("bar", ScalarType.BYTES, Pattern(regex="a")))
    assert errors == ["[pattern] Foo.bar can only be applied to string fields"]


def test_pattern_on_string_list_is_allowed() -> None:
    assert check(list_field("bar", ScalarType.STRING, Pattern(regex="[a-z]+"))) == []


def test_invalid_regex() -> None:
    (error,) = check(scalar_field("bar", ScalarType.STRING, Pattern(regex="*oops")))
    assert error.startswith("[pattern] Foo.bar has invalid regex '*oops'")


def test_distinct_requires_list() -> None:
    assert check(scalar_field("bar", ScalarType.INT32, Distinct())) == [
        "[distinct] Foo.bar can only be applied to repeated fields"
    ]


def test_validate_requires_message() -> None:
    assert check(scalar_field("bar", ScalarType.INT32, Validate())) == [
        "[validate] Foo.bar can only be applied to message fields"
    ]


def test_unknown_message_type() -> None:
    nested = FieldDescriptor("bar", FieldKind.MESSAGE, message_type="Missing", constraints=constraint_map([Validate()]))
    assert check(nested) == ["[type] Foo.bar references unknown message type 'Missing'"]


def test_goes_targets() -> None:
    assert check(scalar_field("a", ScalarType.STRING, Goes(with_="b")), scalar_field("b", ScalarType.STRING)) == []
    assert check(scalar_field("a", ScalarType.STRING, Goes(with_="c"))) == [
        "[goes] Foo.a references non-existent field 'c'"
    ]
    assert check(scalar_field("a", ScalarType.STRING, Goes(with_="a"))) == ["[goes] Foo.a references itself"]


def test_required_field_expression() -> None:
    fields = (scalar_field("a", ScalarType.STRING), scalar_field("b", ScalarType.STRING))
    assert check(*fields, constraints=(RequiredField(fields="a | b"),)) == []
    assert check(*fields, constraints=(RequiredField(fields="a | (b & c) | d"),)) == [
        "[required_field] Foo.<message> references non-existent field 'c'",
        "[required_field] Foo.<message> references non-existent field 'd'",
    ]
    (error,) = check(*fields, constraints=(RequiredField(fields="a |"),))
    assert error.startswith("[required_field] Foo.<message> Unexpected token")


def test_repeated_oneof_member() -> None:
    errors = check(list_field("bar", ScalarType.STRING, oneof="choice"))
    assert errors == ["[choice] Foo.bar is repeated and cannot join oneof 'choice'"]


def test_element_constraints_on_map_field() -> None:
    scores = FieldDescriptor(
        "scores",
        FieldKind.MAP,
        scalar=ScalarType.INT32,
        element_kind=FieldKind.SCALAR,
        constraints=constraint_map([Min(value="1"), Range(value="[0..5]")]),
    )
    names = FieldDescriptor(
        "names",
        FieldKind.MAP,
        scalar=ScalarType.STRING,
        element_kind=FieldKind.SCALAR,
        constraints=constraint_map([Pattern(regex="[a-z]+")]),
    )
    assert check(scores, names) == [
        "[min] Foo.scores cannot be applied to map fields",
        "[range] Foo.scores cannot be applied to map fields",
        "[pattern] Foo.names cannot be applied to map fields",
    ]


def test_map_field_from_sdl_is_flagged() -> None:
    pool = make_pool('type Board { scores: Int @map(key: "string") @max(value: "10") }', strict=False)
    assert ConstraintChecker(pool).run() == ["[max] Board.scores cannot be applied to map fields"]


def test_non_finite_bounds() -> None:
    errors = check(scalar_field("bar", ScalarType.DOUBLE, Max(value="inf"), Range(value="[0..nan]")))
    assert errors == [
        "[max] Foo.bar Invalid threshold 'inf' for double field",
        "[range] Foo.bar Invalid range '[0..nan]': non-numeric bound",
    ]
