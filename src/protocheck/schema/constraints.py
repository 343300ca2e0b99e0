"""Typed constraint payloads and the registry of recognized constraint kinds."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import ClassVar

from caseconverter import snakecase
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from protocheck.errors import ErrorMessages, UnsupportedConstraintError


class ConstraintKind(str, Enum):
    REQUIRED = "required"
    IF_MISSING = "if_missing"
    PATTERN = "pattern"
    MIN = "min"
    MAX = "max"
    RANGE = "range"
    DISTINCT = "distinct"
    VALIDATE = "validate"
    IF_INVALID = "if_invalid"
    GOES = "goes"
    CHOICE = "choice"
    REQUIRED_FIELD = "required_field"


class ConstraintModel(BaseModel):
    """Base class for constraint payloads.

    Payloads are immutable once attached to a descriptor. Field names are
    accepted both in snake_case and in the camelCase used by schema directives.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True, alias_generator=to_camel)

    kind: ClassVar[ConstraintKind]


class Required(ConstraintModel):
    kind = ConstraintKind.REQUIRED

    value: bool = True


class IfMissing(ConstraintModel):
    kind = ConstraintKind.IF_MISSING

    error_msg: str = ""


class PatternModifier(ConstraintModel):
    case_insensitive: bool = False
    multiline: bool = False
    dot_all: bool = False
    unicode: bool = False
    partial_match: bool = False


class Pattern(ConstraintModel):
    kind = ConstraintKind.PATTERN

    regex: str
    modifier: PatternModifier = Field(default_factory=PatternModifier)
    error_msg: str = ""


class Min(ConstraintModel):
    kind = ConstraintKind.MIN

    value: str
    exclusive: bool = False
    error_msg: str = ""


class Max(ConstraintModel):
    kind = ConstraintKind.MAX

    value: str
    exclusive: bool = False
    error_msg: str = ""


class Range(ConstraintModel):
    kind = ConstraintKind.RANGE

    value: str


class Distinct(ConstraintModel):
    kind = ConstraintKind.DISTINCT

    value: bool = True


class Validate(ConstraintModel):
    kind = ConstraintKind.VALIDATE

    value: bool = True


class IfInvalid(ConstraintModel):
    kind = ConstraintKind.IF_INVALID

    error_msg: str = ""


class Goes(ConstraintModel):
    kind = ConstraintKind.GOES

    with_: str = Field(alias="with")
    error_msg: str = ""


class Choice(ConstraintModel):
    kind = ConstraintKind.CHOICE

    required: bool = False
    error_msg: str = ""


class RequiredField(ConstraintModel):
    kind = ConstraintKind.REQUIRED_FIELD

    fields: str


Constraint = (
    Required
    | IfMissing
    | Pattern
    | Min
    | Max
    | Range
    | Distinct
    | Validate
    | IfInvalid
    | Goes
    | Choice
    | RequiredField
)

ConstraintMap = Mapping[ConstraintKind, Constraint]

EMPTY_CONSTRAINTS: ConstraintMap = MappingProxyType({})


def constraint_map(constraints: Iterable[Constraint]) -> ConstraintMap:
    """Build a read-only kind -> payload lookup.

    Raises:
        ValueError: If the same kind is attached twice.
    """
    result: dict[ConstraintKind, Constraint] = {}
    for constraint in constraints:
        if constraint.kind in result:
            raise ValueError(f"Constraint '{constraint.kind.value}' is attached more than once")
        result[constraint.kind] = constraint
    return MappingProxyType(result)


SUPPORTED_CONSTRAINTS: tuple[type[ConstraintModel], ...] = (
    Required,
    IfMissing,
    Pattern,
    Min,
    Max,
    Range,
    Distinct,
    Validate,
    IfInvalid,
    Goes,
    Choice,
    RequiredField,
)

# Constraints that depend on earlier versions of a message.
STATEFUL_CONSTRAINTS: frozenset[str] = frozenset({"set_once", "if_set_again", "when"})


@dataclass(frozen=True)
class ConstraintRegistry:
    """Immutable lookup of the constraint kinds the engine understands.

    Built once per process and shared by every validation call. Names are
    matched after snake_case normalization, so ``requiredField`` and
    ``required_field`` resolve to the same kind.
    """

    supported: Mapping[str, type[ConstraintModel]] = field(default_factory=lambda: MappingProxyType({}))
    unsupported: frozenset[str] = frozenset()

    @classmethod
    def default(cls) -> "ConstraintRegistry":
        return cls(
            supported=MappingProxyType({model.kind.value: model for model in SUPPORTED_CONSTRAINTS}),
            unsupported=STATEFUL_CONSTRAINTS,
        )

    @staticmethod
    def normalize(name: str) -> str:
        return str(snakecase(name))

    def is_constraint(self, name: str) -> bool:
        normalized = self.normalize(name)
        return normalized in self.supported or normalized in self.unsupported

    def resolve(self, name: str) -> type[ConstraintModel] | None:
        """Return the payload model registered under ``name``.

        Args:
            name: Constraint or directive name in any case

        Returns:
            The payload model, or None if ``name`` is not a constraint at all

        Raises:
            UnsupportedConstraintError: If ``name`` is a known but unsupported constraint kind.
        """
        normalized = self.normalize(name)
        if normalized in self.unsupported:
            raise UnsupportedConstraintError(f"Constraint '{normalized}' {ErrorMessages.UNSUPPORTED_KIND}")
        return self.supported.get(normalized)

    def kinds(self) -> list[ConstraintKind]:
        return [model.kind for model in self.supported.values()]


DEFAULT_REGISTRY = ConstraintRegistry.default()
