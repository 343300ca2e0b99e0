"""Load message schemas from constraint-annotated GraphQL SDL.

Object types become messages and their fields become message fields.
Constraints are expressed as directives, e.g.::

    type User @requiredField(fields: "email | phone") {
      name: String @required @pattern(regex: "[A-Z].*")
      email: String @oneof(name: "contact")
      phone: String @oneof(name: "contact")
      age: Int @range(value: "[0..150]")
    }
"""

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ariadne import load_schema_from_path
from graphql import (
    GraphQLEnumType,
    GraphQLError,
    GraphQLField,
    GraphQLList,
    GraphQLNonNull,
    GraphQLObjectType,
    GraphQLOutputType,
    GraphQLScalarType,
    GraphQLSchema,
    build_schema,
)
from pydantic import ValidationError

from protocheck import log
from protocheck.errors import SchemaConfigurationError
from protocheck.schema.constraints import (
    DEFAULT_REGISTRY,
    Choice,
    Constraint,
    ConstraintKind,
    ConstraintMap,
    ConstraintRegistry,
    Pattern,
    PatternModifier,
    constraint_map,
)
from protocheck.schema.descriptors import FieldDescriptor, FieldKind, ScalarType, SchemaPool
from protocheck.schema.directive import (
    directive_arguments,
    get_directive_arguments,
    has_given_directive,
    iter_directives,
)
from protocheck.schema.naming import CaseFormat, convert_name
from protocheck.tools.constraint_checker import ConstraintChecker

SPEC_DIR_PATH = Path(__file__).parent.parent / "spec"
DIRECTIVES_FILE = SPEC_DIR_PATH / "constraint_directives.graphql"

SCALAR_TYPES: dict[str, ScalarType] = {
    "Int": ScalarType.INT32,
    "Float": ScalarType.DOUBLE,
    "String": ScalarType.STRING,
    "ID": ScalarType.STRING,
    "Boolean": ScalarType.BOOL,
    "Int64": ScalarType.INT64,
    "UInt32": ScalarType.UINT32,
    "UInt64": ScalarType.UINT64,
    "SInt32": ScalarType.SINT32,
    "SInt64": ScalarType.SINT64,
    "Fixed32": ScalarType.FIXED32,
    "Fixed64": ScalarType.FIXED64,
    "SFixed32": ScalarType.SFIXED32,
    "SFixed64": ScalarType.SFIXED64,
    "Float32": ScalarType.FLOAT,
    "Bytes": ScalarType.BYTES,
}

ROOT_TYPES = frozenset({"Query", "Mutation", "Subscription"})

# Directives that shape the schema rather than attach a constraint.
ONEOF_DIRECTIVE = "oneof"
CHOICE_DIRECTIVE = "choice"
MAP_DIRECTIVE = "map"
STRUCTURAL_DIRECTIVES = frozenset({ONEOF_DIRECTIVE, CHOICE_DIRECTIVE, MAP_DIRECTIVE})

# Constraints whose bound is a string even when written as a number literal.
NUMERIC_TEXT_KINDS = frozenset({ConstraintKind.MIN, ConstraintKind.MAX, ConstraintKind.RANGE})

PATTERN_MODIFIERS = tuple(PatternModifier.model_fields)


def resolve_graphql_files(paths: Iterable[Path]) -> list[Path]:
    """Resolve a list of paths (files and directories) into a flat list of unique GraphQL files.

    Args:
        paths: List of file or directory paths

    Returns:
        Flat list of unique GraphQL file paths (deduplicated and sorted)
    """
    resolved_files: set[Path] = set()

    for path in paths:
        if path.is_file():
            resolved_files.add(path)
        elif path.is_dir():
            for file in path.rglob("*.graphql"):
                resolved_files.add(file)
        else:
            raise FileNotFoundError(f"Schema path '{path}' does not exist")

    return sorted(resolved_files)


def build_schema_str(graphql_schema_paths: Iterable[Path]) -> str:
    """Concatenate the bundled directive definitions and the given GraphQL files."""
    schema_str = load_schema_from_path(DIRECTIVES_FILE) + "\n"
    for graphql_file in resolve_graphql_files(graphql_schema_paths):
        log.debug("Reading schema file %s", graphql_file)
        schema_str += load_schema_from_path(graphql_file) + "\n"
    return schema_str


def qualified_name(type_name: str, package: str | None) -> str:
    return f"{package}.{type_name}" if package else type_name


def is_message_type(named_type: Any) -> bool:
    return (
        isinstance(named_type, GraphQLObjectType)
        and not named_type.name.startswith("__")
        and named_type.name not in ROOT_TYPES
    )


class _PoolBuilder:
    """Translate a GraphQL schema into a SchemaPool, collecting configuration errors on the way."""

    def __init__(
        self,
        schema: GraphQLSchema,
        package: str | None,
        accessor_case: CaseFormat | None,
        registry: ConstraintRegistry,
    ) -> None:
        self.schema = schema
        self.package = package
        self.accessor_case = accessor_case
        self.registry = registry
        self.errors: list[str] = []

    def build(self) -> SchemaPool:
        pool = SchemaPool()
        for named_type in self.schema.type_map.values():
            if not is_message_type(named_type):
                continue
            fields = [self.build_field(named_type, name, field) for name, field in named_type.fields.items()]
            constraints, oneof_constraints = self.message_constraints(named_type, fields)
            pool.add(
                qualified_name(named_type.name, self.package),
                fields,
                constraints=constraints,
                oneof_constraints=oneof_constraints,
            )
        log.debug("Loaded %d message type(s)", len(pool))
        return pool

    def build_field(self, object_type: GraphQLObjectType, name: str, field: GraphQLField) -> FieldDescriptor:
        location = f"{object_type.name}.{name}"
        kind, element_kind, named_type = self.field_shape(location, field.type)

        if has_given_directive(field, MAP_DIRECTIVE):
            if kind == FieldKind.LIST:
                self.errors.append(f"[map] {location} cannot be both a list and a map")
            else:
                kind, element_kind = FieldKind.MAP, kind

        scalar = SCALAR_TYPES.get(named_type.name) if isinstance(named_type, GraphQLScalarType) else None
        if isinstance(named_type, GraphQLScalarType) and scalar is None:
            self.errors.append(f"[type] {location} uses unsupported scalar '{named_type.name}'")
        elif not isinstance(named_type, (GraphQLScalarType, GraphQLEnumType, GraphQLObjectType)):
            self.errors.append(f"[type] {location} uses unsupported type '{named_type.name}'")

        message_type = qualified_name(named_type.name, self.package) if is_message_type(named_type) else None
        enum_values = tuple(named_type.values) if isinstance(named_type, GraphQLEnumType) else ()
        oneof = get_directive_arguments(field, ONEOF_DIRECTIVE).get("name")

        return FieldDescriptor(
            name=name,
            kind=kind,
            scalar=scalar,
            element_kind=element_kind,
            message_type=message_type,
            accessor=convert_name(name, self.accessor_case),
            oneof=oneof,
            enum_values=enum_values,
            constraints=self.constraints_of(location, field),
        )

    def field_shape(self, location: str, output_type: GraphQLOutputType) -> tuple[FieldKind, FieldKind | None, Any]:
        """Return (kind, element kind, named type) for a field type, unwrapping non-null markers."""
        if isinstance(output_type, GraphQLNonNull):
            output_type = output_type.of_type
        if isinstance(output_type, GraphQLList):
            inner = output_type.of_type
            if isinstance(inner, GraphQLNonNull):
                inner = inner.of_type
            if isinstance(inner, GraphQLList):
                self.errors.append(f"[type] {location} nested lists are not supported")
                while isinstance(inner, (GraphQLList, GraphQLNonNull)):
                    inner = inner.of_type
            return FieldKind.LIST, _named_kind(inner), inner
        return _named_kind(output_type), None, output_type

    def constraints_of(self, location: str, element: GraphQLField | GraphQLObjectType) -> ConstraintMap:
        constraints: list[Constraint] = []
        for directive in iter_directives(element):
            name = directive.name.value
            if name in STRUCTURAL_DIRECTIVES:
                continue
            model = self.registry.resolve(name)
            if model is None:
                log.debug("Ignoring non-constraint directive @%s on %s", name, location)
                continue

            args = directive_arguments(directive)
            if model.kind in NUMERIC_TEXT_KINDS and "value" in args and not isinstance(args["value"], str):
                args["value"] = str(args["value"])
            if model is Pattern:
                modifier = {key: args.pop(key) for key in list(args) if _snake(key) in PATTERN_MODIFIERS}
                args["modifier"] = modifier

            try:
                constraints.append(model.model_validate(args))  # type: ignore[arg-type]
            except ValidationError as e:
                reasons = "; ".join(error["msg"] for error in e.errors())
                self.errors.append(f"[{model.kind.value}] {location} has invalid arguments: {reasons}")
        return constraint_map(constraints)

    def message_constraints(
        self, object_type: GraphQLObjectType, fields: list[FieldDescriptor]
    ) -> tuple[ConstraintMap, dict[str, ConstraintMap]]:
        oneof_names = {field.oneof for field in fields if field.oneof}
        oneof_constraints: dict[str, ConstraintMap] = {}

        for directive in iter_directives(object_type):
            if directive.name.value != CHOICE_DIRECTIVE:
                continue
            args = directive_arguments(directive)
            oneof = args.pop("oneof", None)
            location = f"{object_type.name}.{oneof}"
            if oneof not in oneof_names:
                self.errors.append(f"[choice] {location} does not name a oneof group of {object_type.name}")
                continue
            if oneof in oneof_constraints:
                self.errors.append(f"[choice] {location} is declared more than once")
                continue
            try:
                oneof_constraints[oneof] = constraint_map([Choice.model_validate(args)])
            except ValidationError as e:
                reasons = "; ".join(error["msg"] for error in e.errors())
                self.errors.append(f"[choice] {location} has invalid arguments: {reasons}")

        return self.constraints_of(object_type.name, object_type), oneof_constraints


def _named_kind(named_type: Any) -> FieldKind:
    if isinstance(named_type, GraphQLEnumType):
        return FieldKind.ENUM
    if isinstance(named_type, GraphQLObjectType):
        return FieldKind.MESSAGE
    return FieldKind.SCALAR


def _snake(name: str) -> str:
    return ConstraintRegistry.normalize(name)


def build_schema_pool(
    sdl: str,
    package: str | None = None,
    accessor_case: CaseFormat | None = None,
    strict: bool = True,
    registry: ConstraintRegistry = DEFAULT_REGISTRY,
    include_directives: bool = True,
) -> SchemaPool:
    """Build a schema pool from GraphQL SDL text.

    Args:
        sdl: GraphQL SDL with constraint directives
        package: Package prefix for message type names
        accessor_case: Case used to derive accessor names from field names
        strict: Raise on constraint configuration errors instead of logging them
        registry: Constraint kinds to recognize
        include_directives: Prepend the bundled directive definitions to ``sdl``

    Returns:
        The pool of loaded message schemas

    Raises:
        GraphQLError: If the SDL cannot be parsed.
        TypeError: If the SDL is not a valid GraphQL schema definition.
        UnsupportedConstraintError: If a stateful constraint directive is used.
        SchemaConfigurationError: In strict mode, if any constraint is misconfigured.
    """
    if include_directives:
        sdl = load_schema_from_path(DIRECTIVES_FILE) + "\n" + sdl

    graphql_schema = build_schema(sdl)
    builder = _PoolBuilder(graphql_schema, package, accessor_case, registry)
    pool = builder.build()

    errors = builder.errors + ConstraintChecker(pool).run()
    if errors:
        if strict:
            raise SchemaConfigurationError(errors)
        for error in errors:
            log.warning(error)
    return pool


def load_schema(
    paths: Path | Iterable[Path],
    package: str | None = None,
    accessor_case: CaseFormat | None = None,
    strict: bool = True,
    registry: ConstraintRegistry = DEFAULT_REGISTRY,
) -> SchemaPool:
    """Load message schemas from GraphQL files or directories.

    Directories are searched recursively for ``*.graphql`` files.

    Raises:
        FileNotFoundError: If a path does not exist.
        GraphQLError: If the combined SDL cannot be parsed.
        TypeError: If the combined SDL is not a valid GraphQL schema definition.
        UnsupportedConstraintError: If a stateful constraint directive is used.
        SchemaConfigurationError: In strict mode, if any constraint is misconfigured.
    """
    if isinstance(paths, Path):
        paths = [paths]
    sdl = build_schema_str(paths)
    try:
        return build_schema_pool(
            sdl,
            package=package,
            accessor_case=accessor_case,
            strict=strict,
            registry=registry,
            include_directives=False,
        )
    except (GraphQLError, TypeError) as e:
        log.error(f"Invalid GraphQL schema: {e}")
        raise
