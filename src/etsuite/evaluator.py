"""
Evaluator for mapping expressions.

Walks an Expression AST and resolves every VariableReference through a
caller-supplied resolver:

    resolver("TSPC_GAP_1_1") -> True | False | None

None means "unknown" and fails the whole evaluation with
UnresolvedVariableError. There is no silent default here; the
enablement layer decides what an error means for a test case.

Both operands of && and || are always evaluated, so every variable the
expression reaches must resolve.
"""

from typing import Callable, List, Optional, Tuple, Union

from etsuite.errors import ExpressionTypeError, UnresolvedVariableError
from etsuite.expressions import (
    BinaryExpression,
    BinaryOperator,
    Expression,
    Literal,
    UnaryExpression,
    UnaryOperator,
    VariableReference,
)
from etsuite.mapping_parser import parse_mapping

Resolver = Callable[[str], Optional[bool]]
Value = Union[bool, int, float, str]


def evaluate(expr: Expression, resolver: Resolver) -> bool:
    """
    Evaluate an expression tree to a boolean.

    Raises:
        UnresolvedVariableError: If the resolver returns None for a variable
        ExpressionTypeError: If a non-boolean value reaches a boolean context
    """
    result = _evaluate_value(expr, resolver)
    if not isinstance(result, bool):
        raise ExpressionTypeError(f"Expression evaluated to non-boolean value {result!r}")
    return result


def evaluate_mapping(text: str, resolver: Resolver, whole_words: bool = False) -> bool:
    """
    Normalize, parse and evaluate a mapping string.

    Args:
        text: Mapping as written in the ETS document
        resolver: Flag lookup, returns None for unknown flags
        whole_words: Word-boundary keyword replacement (off by default)

    Returns:
        The boolean value of the mapping

    Raises:
        EvaluationError: One of its subclasses, see etsuite.errors
    """
    return evaluate(parse_mapping(text, whole_words=whole_words), resolver)


def _evaluate_value(expr: Expression, resolver: Resolver) -> Value:
    # Post-order walk with an explicit stack; left-nested && chains from
    # long mappings are far deeper than the interpreter's recursion limit.
    pending: List[Tuple[Expression, bool]] = [(expr, False)]
    values: List[Value] = []

    while pending:
        node, operands_done = pending.pop()

        if isinstance(node, Literal):
            values.append(node.value)

        elif isinstance(node, VariableReference):
            values.append(_resolve(node.name, resolver))

        elif isinstance(node, UnaryExpression):
            if not operands_done:
                pending.append((node, True))
                pending.append((node.operand, False))
            else:
                values.append(_apply_unary(node.operator, values.pop()))

        elif isinstance(node, BinaryExpression):
            if not operands_done:
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
            else:
                right = values.pop()
                left = values.pop()
                values.append(_apply_binary(node.operator, left, right))

        else:
            raise ExpressionTypeError(f"Unsupported expression node: {type(node).__name__}")

    return values.pop()


def _resolve(name: str, resolver: Resolver) -> bool:
    value = resolver(name)
    if value is None:
        raise UnresolvedVariableError(name)
    if not isinstance(value, bool):
        raise ExpressionTypeError(
            f"Resolver returned {value!r} for '{name}', expected a boolean"
        )
    return value


def _apply_unary(op: UnaryOperator, operand: Value) -> bool:
    if op is UnaryOperator.NOT:
        return not _require_bool(operand, "!")
    raise ExpressionTypeError(f"Unknown unary operator {op!r}")


def _apply_binary(op: BinaryOperator, left: Value, right: Value) -> bool:
    if op in (BinaryOperator.AND, BinaryOperator.OR):
        lhs = _require_bool(left, op.value)
        rhs = _require_bool(right, op.value)
        return (lhs and rhs) if op is BinaryOperator.AND else (lhs or rhs)
    if op is BinaryOperator.EQUALS:
        return _values_equal(left, right)
    if op is BinaryOperator.NOT_EQUALS:
        return not _values_equal(left, right)
    raise ExpressionTypeError(f"Unknown binary operator {op!r}")


def _require_bool(value: Value, operator: str) -> bool:
    if not isinstance(value, bool):
        raise ExpressionTypeError(f"Operator '{operator}' expects booleans, got {value!r}")
    return value


def _values_equal(left: Value, right: Value) -> bool:
    # 1 == true would hold in Python; values of different types never match here
    return type(left) is type(right) and left == right
