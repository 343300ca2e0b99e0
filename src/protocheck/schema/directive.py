from collections.abc import Iterator
from typing import Any

from graphql import (
    BooleanValueNode,
    EnumValueNode,
    FloatValueNode,
    GraphQLEnumType,
    GraphQLField,
    GraphQLObjectType,
    IntValueNode,
    ListValueNode,
    NullValueNode,
    ObjectValueNode,
    ValueNode,
)
from graphql.language.ast import DirectiveNode

DirectiveTarget = GraphQLField | GraphQLObjectType | GraphQLEnumType


def value_from_node(node: ValueNode) -> Any:
    """Convert a literal argument value to the matching Python value."""
    if isinstance(node, IntValueNode):
        return int(node.value)
    if isinstance(node, FloatValueNode):
        return float(node.value)
    if isinstance(node, BooleanValueNode):
        return node.value
    if isinstance(node, NullValueNode):
        return None
    if isinstance(node, ListValueNode):
        return [value_from_node(item) for item in node.values]
    if isinstance(node, ObjectValueNode):
        return {item.name.value: value_from_node(item.value) for item in node.fields}
    if isinstance(node, EnumValueNode):
        return node.value
    return getattr(node, "value", node)


def iter_directives(element: DirectiveTarget) -> Iterator[DirectiveNode]:
    """Yield the directives applied to an element, in source order."""
    if element.ast_node and element.ast_node.directives:
        yield from element.ast_node.directives


def directive_arguments(directive: DirectiveNode) -> dict[str, Any]:
    """
    Extracts the explicitly given arguments of a directive usage.
    Args:
        directive: The directive node as found on a field or type definition.
    Returns:
        dict[str, Any]: The directive arguments with proper type conversion.
    """
    return {arg.name.value: value_from_node(arg.value) for arg in directive.arguments or ()}


def get_directive_arguments(element: DirectiveTarget, directive_name: str) -> dict[str, Any]:
    """Return the arguments of the first usage of ``directive_name`` on ``element``, or an empty dict."""
    for directive in iter_directives(element):
        if directive.name.value == directive_name:
            return directive_arguments(directive)
    return {}


def has_given_directive(element: DirectiveTarget, directive_name: str) -> bool:
    """Check whether a GraphQL element (field, object type) has a particular specified directive."""
    return any(directive.name.value == directive_name for directive in iter_directives(element))
