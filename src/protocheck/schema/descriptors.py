"""In-memory message schema model.

The validation engine only reads schemas through this model: the field list,
each field's kind, nested message types and the constraints attached to
fields, oneofs and messages. Schemas are immutable once built and are shared
read-only by every validation call.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from protocheck.schema.constraints import EMPTY_CONSTRAINTS, ConstraintKind, ConstraintMap


class FieldKind(str, Enum):
    SCALAR = "scalar"
    ENUM = "enum"
    MESSAGE = "message"
    LIST = "list"
    MAP = "map"


class ScalarType(str, Enum):
    INT32 = "int32"
    INT64 = "int64"
    UINT32 = "uint32"
    UINT64 = "uint64"
    SINT32 = "sint32"
    SINT64 = "sint64"
    FIXED32 = "fixed32"
    FIXED64 = "fixed64"
    SFIXED32 = "sfixed32"
    SFIXED64 = "sfixed64"
    FLOAT = "float"
    DOUBLE = "double"
    STRING = "string"
    BYTES = "bytes"
    BOOL = "bool"

    @property
    def is_integer(self) -> bool:
        return self not in _NON_INTEGER

    @property
    def is_floating(self) -> bool:
        return self in (ScalarType.FLOAT, ScalarType.DOUBLE)

    @property
    def is_numeric(self) -> bool:
        return self.is_integer or self.is_floating


_NON_INTEGER = frozenset({ScalarType.FLOAT, ScalarType.DOUBLE, ScalarType.STRING, ScalarType.BYTES, ScalarType.BOOL})


class _Constrained:
    constraints: ConstraintMap

    def has_constraint(self, kind: ConstraintKind) -> bool:
        return kind in self.constraints

    def get_constraint(self, kind: ConstraintKind) -> Any:
        """Return the payload attached for ``kind``, or None."""
        return self.constraints.get(kind)


@dataclass(frozen=True)
class FieldDescriptor(_Constrained):
    """A single message field.

    Args:
        name: Wire name of the field, used in violation paths
        kind: Field kind tag
        scalar: Scalar type of the value (or of list elements / map values)
        element_kind: For lists and maps, the kind of each element (scalar, enum or message)
        message_type: Full name of the nested message type, when there is one
        accessor: Name used to read the value from a message instance (defaults to ``name``)
        oneof: Name of the oneof the field belongs to
        enum_values: Declared value names of an enum field, in number order
        constraints: Constraints attached to the field
    """

    name: str
    kind: FieldKind
    scalar: ScalarType | None = None
    element_kind: FieldKind | None = None
    message_type: str | None = None
    accessor: str = ""
    oneof: str | None = None
    enum_values: tuple[str, ...] = field(default=(), compare=False)
    constraints: ConstraintMap = field(default_factory=lambda: EMPTY_CONSTRAINTS, compare=False)

    def __post_init__(self) -> None:
        if not self.accessor:
            object.__setattr__(self, "accessor", self.name)

    @property
    def value_kind(self) -> FieldKind:
        """Kind of a single value: the element kind for lists and maps, the field kind otherwise."""
        if self.kind in (FieldKind.LIST, FieldKind.MAP):
            return self.element_kind or FieldKind.SCALAR
        return self.kind

    @property
    def is_repeated(self) -> bool:
        return self.kind in (FieldKind.LIST, FieldKind.MAP)

    @property
    def is_numeric(self) -> bool:
        return self.value_kind == FieldKind.SCALAR and self.scalar is not None and self.scalar.is_numeric

    @property
    def is_string(self) -> bool:
        return self.value_kind == FieldKind.SCALAR and self.scalar == ScalarType.STRING


@dataclass(frozen=True)
class OneofDescriptor(_Constrained):
    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    constraints: ConstraintMap = field(default_factory=lambda: EMPTY_CONSTRAINTS, compare=False)


@dataclass(frozen=True, eq=False)
class MessageSchema(_Constrained):
    """Static description of a message type.

    Args:
        full_name: Fully-qualified type name (e.g. ``example.User``)
        fields: Fields in declaration order
        oneofs: Oneof groups in declaration order
        constraints: Message-level constraints
        pool: Pool used to resolve nested message types by name
    """

    full_name: str
    fields: tuple[FieldDescriptor, ...] = ()
    oneofs: tuple[OneofDescriptor, ...] = ()
    constraints: ConstraintMap = field(default_factory=lambda: EMPTY_CONSTRAINTS)
    pool: "SchemaPool | None" = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.full_name.rsplit(".", 1)[-1]

    def find_field(self, name: str) -> FieldDescriptor | None:
        for message_field in self.fields:
            if message_field.name == name:
                return message_field
        return None

    def nested_schema(self, message_field: FieldDescriptor) -> "MessageSchema | None":
        """Resolve the schema of a message, list-of-message or map-of-message field."""
        if message_field.message_type is None or self.pool is None:
            return None
        return self.pool.get(message_field.message_type)


class SchemaPool(Mapping[str, MessageSchema]):
    """Registry of message schemas keyed by full name.

    Nested message fields refer to their type by name, which lets schemas
    reference each other (and themselves) without construction-order issues.
    """

    def __init__(self) -> None:
        self._schemas: dict[str, MessageSchema] = {}

    def __getitem__(self, full_name: str) -> MessageSchema:
        return self._schemas[full_name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)

    def add(
        self,
        full_name: str,
        fields: list[FieldDescriptor] | tuple[FieldDescriptor, ...] = (),
        constraints: ConstraintMap = EMPTY_CONSTRAINTS,
        oneof_constraints: Mapping[str, ConstraintMap] | None = None,
    ) -> MessageSchema:
        """Create a schema bound to this pool and register it.

        Oneof groups are derived from the ``oneof`` attribute of the fields, in
        order of first appearance.

        Args:
            full_name: Fully-qualified type name
            fields: Fields in declaration order
            constraints: Message-level constraints
            oneof_constraints: Constraints per oneof name

        Returns:
            The registered schema

        Raises:
            ValueError: If a schema with the same name is already registered.
        """
        if full_name in self._schemas:
            raise ValueError(f"Message type '{full_name}' is already registered")

        oneof_constraints = oneof_constraints or {}
        groups: dict[str, list[FieldDescriptor]] = {}
        for message_field in fields:
            if message_field.oneof:
                groups.setdefault(message_field.oneof, []).append(message_field)
        unknown = set(oneof_constraints) - set(groups)
        if unknown:
            raise ValueError(f"Message type '{full_name}' has constraints for unknown oneof(s): {sorted(unknown)}")

        oneofs = tuple(
            OneofDescriptor(name, tuple(members), oneof_constraints.get(name, EMPTY_CONSTRAINTS))
            for name, members in groups.items()
        )
        schema = MessageSchema(full_name, tuple(fields), oneofs, constraints, pool=self)
        self._schemas[full_name] = schema
        return schema
