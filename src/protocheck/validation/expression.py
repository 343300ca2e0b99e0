"""Boolean field-combination expressions used by ``required_field``.

Grammar (``|`` binds looser than ``&``, both left-associative)::

    Or   := And ('|' And)*
    And  := Atom ('&' Atom)*
    Atom := '(' Or ')' | FieldName

The tokenizer splits on ``(``, ``)``, ``|``, ``&`` and whitespace; any other
maximal run of characters is a field name. Expressions are parsed once into
an immutable tree and evaluated against a presence predicate.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass

from protocheck.errors import ErrorMessages, ExpressionSyntaxError

OPERATORS = frozenset("()|&")


@dataclass(frozen=True)
class FieldRef:
    name: str


@dataclass(frozen=True)
class AllOf:
    operands: tuple["Expression", ...]


@dataclass(frozen=True)
class AnyOf:
    operands: tuple["Expression", ...]


Expression = FieldRef | AllOf | AnyOf


def tokenize(expression: str) -> list[str]:
    tokens: list[str] = []
    current = ""
    for char in expression:
        if char in OPERATORS or char.isspace():
            if current:
                tokens.append(current)
                current = ""
            if char in OPERATORS:
                tokens.append(char)
        else:
            current += char
    if current:
        tokens.append(current)
    return tokens


class _Parser:
    def __init__(self, expression: str) -> None:
        self.expression = expression
        self.tokens = tokenize(expression)
        self.index = 0

    def peek(self) -> str | None:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def error(self, message: str) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(f"{message} in required field expression '{self.expression}'")

    def parse(self) -> Expression:
        if not self.tokens:
            raise self.error(ErrorMessages.EMPTY_EXPRESSION)
        result = self.parse_or()
        token = self.peek()
        if token == ")":
            raise self.error(ErrorMessages.UNBALANCED_PARENTHESES)
        if token is not None:
            raise self.error(f"{ErrorMessages.UNEXPECTED_TOKEN} '{token}'")
        return result

    def parse_or(self) -> Expression:
        operands = [self.parse_and()]
        while self.peek() == "|":
            self.index += 1
            operands.append(self.parse_and())
        return operands[0] if len(operands) == 1 else AnyOf(tuple(operands))

    def parse_and(self) -> Expression:
        operands = [self.parse_atom()]
        while self.peek() == "&":
            self.index += 1
            operands.append(self.parse_atom())
        return operands[0] if len(operands) == 1 else AllOf(tuple(operands))

    def parse_atom(self) -> Expression:
        token = self.peek()
        if token is None:
            raise self.error(f"{ErrorMessages.UNEXPECTED_TOKEN} end of input")
        if token == "(":
            self.index += 1
            inner = self.parse_or()
            if self.peek() != ")":
                raise self.error(ErrorMessages.UNBALANCED_PARENTHESES)
            self.index += 1
            return inner
        if token in OPERATORS:
            raise self.error(f"{ErrorMessages.UNEXPECTED_TOKEN} '{token}'")
        self.index += 1
        return FieldRef(token)


def parse_expression(expression: str) -> Expression:
    """Parse a field-combination expression.

    Args:
        expression: Expression text, e.g. ``"given_name | (honorific_prefix & family_name)"``

    Returns:
        The parsed expression tree

    Raises:
        ExpressionSyntaxError: If the expression is empty, has unbalanced
            parentheses or a misplaced operator.
    """
    return _Parser(expression).parse()


def evaluate(expression: Expression, is_present: Callable[[str], bool]) -> bool:
    """Evaluate a parsed expression, resolving each field name with ``is_present``."""
    if isinstance(expression, FieldRef):
        return is_present(expression.name)
    if isinstance(expression, AllOf):
        return all(evaluate(operand, is_present) for operand in expression.operands)
    return any(evaluate(operand, is_present) for operand in expression.operands)


def iter_field_refs(expression: Expression) -> Iterator[str]:
    if isinstance(expression, FieldRef):
        yield expression.name
        return
    for operand in expression.operands:
        yield from iter_field_refs(operand)


def referenced_fields(expression: Expression) -> list[str]:
    """List the distinct field names an expression refers to, in order of appearance."""
    return list(dict.fromkeys(iter_field_refs(expression)))
