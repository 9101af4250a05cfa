"""
Expression System for ETS mappings

Every TestCase mapping (e.g. "TSPC_GAP_1_1 AND (TSPC_GAP_2_1 OR TSPC_GAP_3_1)")
is parsed into an Abstract Syntax Tree before it is evaluated.

Keeping the tree separate from the text means:
    - Evaluation never re-reads the string
    - Variable inventories can be computed without a resolver
    - Errors are reported against a known structure

ARCHITECTURAL RULE:
    Nodes are structure only.
    Parsing lives in mapping_parser, evaluation lives in evaluator.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Tuple, Union


class Expression(ABC):
    """
    Base class for all AST expressions.

    This is intentionally minimal.
    It exists to provide type-safety for the expression hierarchy.
    """
    pass


class BinaryOperator(Enum):
    """
    Binary operators of the normalized mapping grammar.

    The values are the native tokens the parser reads after the
    AND/OR keywords have been rewritten.
    """

    # Logical operators
    AND = "&&"
    OR = "||"

    # Comparison operators
    EQUALS = "=="
    NOT_EQUALS = "!="


@dataclass(frozen=True)
class BinaryExpression(Expression):
    """
    Represents a binary logical or comparison expression.

    Example:
        TSPC_A && (TSPC_B || TSPC_C)

    Becomes:
        BinaryExpression(
            operator=BinaryOperator.AND,
            left=VariableReference("TSPC_A"),
            right=BinaryExpression(
                operator=BinaryOperator.OR,
                left=VariableReference("TSPC_B"),
                right=VariableReference("TSPC_C"),
            ),
        )

    IMPORTANT:
        This object is immutable (frozen=True).
        It does NOT evaluate itself.
    """

    operator: BinaryOperator
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True)
class VariableReference(Expression):
    """
    References a configuration flag by name.

    Examples:
        - TSPC_GAP_1_1
        - PIXITS_L2CAP_ENHANCED

    The name is looked up through the caller's resolver at evaluation time.
    Nothing here checks that the flag exists.
    """

    name: str


@dataclass(frozen=True)
class Literal(Expression):
    """
    Represents a literal constant value.

    Examples:
        - true
        - false
        - 3
        - "text"

    Only booleans are valid as operands of the logical operators;
    other literals exist so the evaluator can report a type error
    instead of a syntax error.
    """

    value: Union[bool, int, float, str]


class UnaryOperator(Enum):
    """Unary operators."""
    NOT = "!"


@dataclass(frozen=True)
class UnaryExpression(Expression):
    """
    Represents a unary operation.

    Example:
        !(TSPC_A && TSPC_B)

    Becomes:
        UnaryExpression(
            operator=UnaryOperator.NOT,
            operand=BinaryExpression(...)
        )
    """

    operator: UnaryOperator
    operand: Expression


def _children(expr: Expression) -> Tuple[Expression, ...]:
    if isinstance(expr, BinaryExpression):
        return (expr.left, expr.right)
    if isinstance(expr, UnaryExpression):
        return (expr.operand,)
    return ()


def referenced_variables(expr: Expression) -> FrozenSet[str]:
    """Return every variable name referenced anywhere in ``expr``."""
    names = set()
    pending = [expr]
    while pending:
        node = pending.pop()
        if isinstance(node, VariableReference):
            names.add(node.name)
        pending.extend(_children(node))
    return frozenset(names)


def expression_depth(expr: Expression) -> int:
    """Nesting depth of an expression tree; leaves have depth 0."""
    deepest = 0
    pending = [(expr, 0)]
    while pending:
        node, depth = pending.pop()
        deepest = max(deepest, depth)
        pending.extend((child, depth + 1) for child in _children(node))
    return deepest
