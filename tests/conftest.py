from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import pytest
from faker import Faker
from hypothesis import strategies as st

from protocheck.schema.constraints import Constraint, constraint_map
from protocheck.schema.descriptors import FieldDescriptor, FieldKind, MessageSchema, ScalarType, SchemaPool
from protocheck.schema.loader import build_schema_pool, load_schema
from protocheck.validation.violations import ConstraintViolation


class TestSchemaData:
    TESTS_DATA_DIR: Path = Path(__file__).parent / "data"
    PEOPLE_SCHEMA: Path = TESTS_DATA_DIR / "people.graphql"
    INVALID_CONSTRAINTS_SCHEMA: Path = TESTS_DATA_DIR / "invalid_constraints.graphql"
    STATEFUL_SCHEMA: Path = TESTS_DATA_DIR / "stateful.graphql"

    PERSON_VALID: Path = TESTS_DATA_DIR / "person_valid.yaml"
    PERSON_INVALID: Path = TESTS_DATA_DIR / "person_invalid.yaml"
    PERSON_CAMEL: Path = TESTS_DATA_DIR / "person_camel.json"
    SETTINGS: Path = TESTS_DATA_DIR / "settings.yaml"


INTEGER_SCALARS = [scalar for scalar in ScalarType if scalar.is_integer]
FLOATING_SCALARS = [ScalarType.FLOAT, ScalarType.DOUBLE]


def scalar_field(name: str, scalar: ScalarType, *constraints: Constraint, **kwargs: Any) -> FieldDescriptor:
    return FieldDescriptor(name, FieldKind.SCALAR, scalar=scalar, constraints=constraint_map(constraints), **kwargs)


def list_field(name: str, scalar: ScalarType, *constraints: Constraint, **kwargs: Any) -> FieldDescriptor:
    return FieldDescriptor(
        name,
        FieldKind.LIST,
        scalar=scalar,
        element_kind=FieldKind.SCALAR,
        constraints=constraint_map(constraints),
        **kwargs,
    )


def make_schema(
    fields: Iterable[FieldDescriptor],
    *constraints: Constraint,
    name: str = "test.Message",
    pool: SchemaPool | None = None,
) -> MessageSchema:
    """Register a single message type in a (new) pool and return it."""
    pool = pool if pool is not None else SchemaPool()
    return pool.add(name, list(fields), constraints=constraint_map(constraints))


def make_pool(sdl: str, **kwargs: Any) -> SchemaPool:
    return build_schema_pool(sdl, **kwargs)


def paths(violations: list[ConstraintViolation]) -> list[tuple[str, ...]]:
    return [violation.field_path for violation in violations]


def messages(violations: list[ConstraintViolation]) -> list[str]:
    return [violation.format() for violation in violations]


@pytest.fixture(scope="module")
def people_pool() -> SchemaPool:
    assert TestSchemaData.PEOPLE_SCHEMA.exists(), f"Missing test file: {TestSchemaData.PEOPLE_SCHEMA}"
    return load_schema(TestSchemaData.PEOPLE_SCHEMA)


@pytest.fixture
def faker() -> Faker:
    fake = Faker()
    fake.seed_instance(1234)
    return fake


class ProtoLikeMessage:
    """Attribute-style message exposing protobuf's presence API."""

    def __init__(self, oneofs: dict[str, str | None] | None = None, **values: Any) -> None:
        self._oneofs = oneofs or {}
        for key, value in values.items():
            setattr(self, key, value)

    def HasField(self, name: str) -> bool:  # noqa: N802
        return getattr(self, name, None) is not None

    def WhichOneof(self, name: str) -> str | None:  # noqa: N802
        return self._oneofs.get(name)


@pytest.fixture
def proto_message() -> Callable[..., ProtoLikeMessage]:
    return ProtoLikeMessage


# Strategies

non_zero_ints = st.integers(min_value=-(2**31), max_value=2**31 - 1).filter(lambda value: value != 0)
non_empty_text = st.text(min_size=1, max_size=20)
field_names = st.from_regex(r"[a-z][a-z0-9_]{0,10}", fullmatch=True)
