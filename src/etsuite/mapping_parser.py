"""
Mapping Parser (raw mapping text → Expression AST).

ETS mappings are written with the keywords AND / OR:

    TSPC_GAP_1_1 AND (TSPC_GAP_2_1 OR TSPC_GAP_3_1)

Before parsing, the keywords are rewritten to the native operators
&& and || by plain substring replacement. The replacement is NOT
word-aware: a flag named BRAND becomes BR&& and the mapping then fails
to parse. This matches how ETS files have always been evaluated, so the
raw replacement stays the default. ``whole_words=True`` opts into the
word-boundary variant.

Grammar (lowest precedence first):

    or_expr     := and_expr ( '||' and_expr )*
    and_expr    := equality ( '&&' equality )*
    equality    := unary ( ( '==' | '!=' ) unary )*
    unary       := '!' unary | primary
    primary     := '(' or_expr ')' | 'true' | 'false'
                 | number | string | identifier
"""

import re
from dataclasses import dataclass
from typing import List, Tuple

from etsuite.errors import ExpressionSyntaxError, UnsupportedOperatorError
from etsuite.expressions import (
    BinaryExpression,
    BinaryOperator,
    Expression,
    Literal,
    UnaryExpression,
    UnaryOperator,
    VariableReference,
)


_WORD_CHARS = r"A-Za-z0-9_."
_AND_WORD_RE = re.compile(rf"(?<![{_WORD_CHARS}])AND(?![{_WORD_CHARS}])")
_OR_WORD_RE = re.compile(rf"(?<![{_WORD_CHARS}])OR(?![{_WORD_CHARS}])")
_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_.]*")

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
  | (?P<string>"(?:[^"\\]|\\.)*")
  | (?P<number>\d+(?:\.\d*)?|\.\d+)
  | (?P<identifier>[A-Za-z_][A-Za-z0-9_.]*)
  | (?P<operator>&&|\|\||==|!=|<=|>=|[!()<>=+\-*/%^,;&|])
    """,
    re.VERBOSE,
)

SUPPORTED_OPERATORS = frozenset({"&&", "||", "==", "!=", "!", "(", ")"})

_BINARY_OPERATORS = {
    "&&": BinaryOperator.AND,
    "||": BinaryOperator.OR,
    "==": BinaryOperator.EQUALS,
    "!=": BinaryOperator.NOT_EQUALS,
}


@dataclass(frozen=True)
class Token:
    """A lexical token; ``position`` is the offset in the normalized text."""
    kind: str
    text: str
    position: int


def normalize_mapping(text: str, whole_words: bool = False) -> str:
    """
    Rewrite the AND / OR keywords of a mapping into && / ||.

    Args:
        text: Mapping exactly as it appears in the ETS document
        whole_words: Only replace keywords standing on their own

    Returns:
        Text in the native operator syntax
    """
    if whole_words:
        text = _AND_WORD_RE.sub("&&", text)
        return _OR_WORD_RE.sub("||", text)
    return text.replace("AND", "&&").replace("OR", "||")


def corrupted_identifiers(text: str) -> List[str]:
    """
    List identifiers that the raw keyword replacement would mangle.

    An identifier is mangled when it contains AND or OR without being
    exactly that keyword, e.g. BRAND or TSPC_ORDER_1.
    """
    found = []
    for match in _IDENTIFIER_RE.finditer(text):
        ident = match.group(0)
        if ident in ("AND", "OR"):
            continue
        if ("AND" in ident or "OR" in ident) and ident not in found:
            found.append(ident)
    return found


def tokenize(text: str) -> List[Token]:
    """
    Tokenize normalized mapping text.

    Raises:
        ExpressionSyntaxError: On characters that start no token
        UnsupportedOperatorError: On operators outside the boolean grammar
    """
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ExpressionSyntaxError(
                f"Unexpected character '{text[pos]}' at position {pos} in expression '{text}'"
            )
        kind = match.lastgroup
        value = match.group(0)
        if kind == "operator" and value not in SUPPORTED_OPERATORS:
            raise UnsupportedOperatorError(value, text)
        if kind != "space":
            tokens.append(Token(kind=kind, text=value, position=pos))
        pos = match.end()
    return tokens


def parse_mapping(text: str, whole_words: bool = False) -> Expression:
    """
    Normalize and parse a mapping into an Expression AST.

    Args:
        text: Mapping as written in the ETS document
        whole_words: Passed through to normalize_mapping

    Returns:
        Expression AST

    Raises:
        ExpressionSyntaxError: If the normalized text is not a valid expression
            (an empty mapping is not)
        UnsupportedOperatorError: If it uses an operator outside the grammar
    """
    normalized = normalize_mapping(text, whole_words=whole_words)
    tokens = tokenize(normalized)
    if not tokens:
        raise ExpressionSyntaxError(f"Empty expression '{text}'")

    try:
        expr, pos = _parse_or_expression(tokens, 0, normalized)
    except RecursionError as err:
        raise ExpressionSyntaxError(
            f"Expression nested too deeply: '{_abbreviate(text)}'"
        ) from err
    if pos < len(tokens):
        leftover = " ".join(t.text for t in tokens[pos:])
        raise ExpressionSyntaxError(
            f"Unexpected tokens after expression in '{normalized}': {leftover}"
        )
    return expr


def _parse_or_expression(tokens: List[Token], pos: int, source: str) -> Tuple[Expression, int]:
    """Parse || chains (lowest precedence)."""
    left, pos = _parse_and_expression(tokens, pos, source)

    while pos < len(tokens) and tokens[pos].text == "||":
        right, pos = _parse_and_expression(tokens, pos + 1, source)
        left = BinaryExpression(BinaryOperator.OR, left, right)

    return left, pos


def _parse_and_expression(tokens: List[Token], pos: int, source: str) -> Tuple[Expression, int]:
    """Parse && chains."""
    left, pos = _parse_equality_expression(tokens, pos, source)

    while pos < len(tokens) and tokens[pos].text == "&&":
        right, pos = _parse_equality_expression(tokens, pos + 1, source)
        left = BinaryExpression(BinaryOperator.AND, left, right)

    return left, pos


def _parse_equality_expression(tokens: List[Token], pos: int, source: str) -> Tuple[Expression, int]:
    """Parse == and != comparisons."""
    left, pos = _parse_unary_expression(tokens, pos, source)

    while pos < len(tokens) and tokens[pos].text in ("==", "!="):
        op = _BINARY_OPERATORS[tokens[pos].text]
        right, pos = _parse_unary_expression(tokens, pos + 1, source)
        left = BinaryExpression(op, left, right)

    return left, pos


def _parse_unary_expression(tokens: List[Token], pos: int, source: str) -> Tuple[Expression, int]:
    """Parse prefix !."""
    negations = 0
    while pos < len(tokens) and tokens[pos].text == "!":
        negations += 1
        pos += 1

    expr, pos = _parse_primary_expression(tokens, pos, source)
    for _ in range(negations):
        expr = UnaryExpression(UnaryOperator.NOT, expr)
    return expr, pos


def _parse_primary_expression(tokens: List[Token], pos: int, source: str) -> Tuple[Expression, int]:
    """Parse a literal, variable, or parenthesized expression."""
    if pos >= len(tokens):
        raise ExpressionSyntaxError(f"Unexpected end of expression '{source}'")

    token = tokens[pos]

    if token.text == "(":
        expr, pos = _parse_or_expression(tokens, pos + 1, source)
        if pos >= len(tokens) or tokens[pos].text != ")":
            raise ExpressionSyntaxError(f"Missing closing parenthesis in '{source}'")
        return expr, pos + 1

    if token.kind == "identifier":
        if token.text == "true":
            return Literal(True), pos + 1
        if token.text == "false":
            return Literal(False), pos + 1
        return VariableReference(token.text), pos + 1

    if token.kind == "number":
        if "." in token.text:
            return Literal(float(token.text)), pos + 1
        return Literal(int(token.text)), pos + 1

    if token.kind == "string":
        return Literal(_unescape(token.text[1:-1])), pos + 1

    raise ExpressionSyntaxError(
        f"Unexpected token '{token.text}' at position {token.position} in '{source}'"
    )


def _abbreviate(text: str, limit: int = 60) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


def _unescape(body: str) -> str:
    return re.sub(r"\\(.)", r"\1", body)


__all__ = [
    "Token",
    "SUPPORTED_OPERATORS",
    "normalize_mapping",
    "corrupted_identifiers",
    "tokenize",
    "parse_mapping",
]
