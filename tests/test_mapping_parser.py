"""
Tests for the mapping parser (raw mapping text → Expression AST).

We need to:
1. Rewrite AND / OR exactly as the ETS files have always been read
2. Parse &&, ||, !, ==, != and parentheses with the usual precedence
3. Reject empty input, malformed input and unsupported operators
"""

import pytest
from etsuite.errors import ExpressionSyntaxError, UnsupportedOperatorError
from etsuite.expressions import (
    BinaryExpression,
    BinaryOperator,
    Literal,
    UnaryExpression,
    UnaryOperator,
    VariableReference,
    expression_depth,
    referenced_variables,
)
from etsuite.mapping_parser import (
    corrupted_identifiers,
    normalize_mapping,
    parse_mapping,
    tokenize,
)


class TestNormalization:
    """Test the AND / OR keyword rewrite."""

    def test_keywords_rewritten(self):
        assert normalize_mapping("A AND B OR C") == "A && B || C"

    def test_case_sensitive(self):
        """Lower-case keywords are left alone."""
        assert normalize_mapping("A and B or C") == "A and B or C"

    def test_raw_replacement_inside_identifiers(self):
        """Substrings are replaced too: BRAND becomes BR&&."""
        assert normalize_mapping("BRAND") == "BR&&"
        assert normalize_mapping("TSPC_ORDER_1") == "TSPC_||DER_1"

    def test_and_replaced_before_or(self):
        assert normalize_mapping("ORAND") == "||&&"

    def test_whole_words_option(self):
        """Opt-in word-boundary replacement keeps identifiers intact."""
        assert normalize_mapping("BRAND AND ORDER", whole_words=True) == "BRAND && ORDER"
        assert normalize_mapping("(A)AND(B)", whole_words=True) == "(A)&&(B)"

    def test_corrupted_identifiers(self):
        assert corrupted_identifiers("BRAND AND TSPC_ORDER OR X") == ["BRAND", "TSPC_ORDER"]
        assert corrupted_identifiers("A AND B OR C") == []


class TestTokenizer:
    """Test tokenization of normalized text."""

    def test_tokens(self):
        tokens = tokenize("!(A && B_1) || false")
        assert [t.text for t in tokens] == ["!", "(", "A", "&&", "B_1", ")", "||", "false"]
        assert tokens[2].kind == "identifier"
        assert tokens[2].position == 2

    def test_dotted_identifier(self):
        assert [t.text for t in tokenize("PIXIT.enabled")] == ["PIXIT.enabled"]

    def test_unknown_character(self):
        with pytest.raises(ExpressionSyntaxError):
            tokenize("A # B")

    @pytest.mark.parametrize("text", ["A + B", "A < B", "A = B", "A & B", "A | B", "A, B"])
    def test_unsupported_operator(self, text):
        with pytest.raises(UnsupportedOperatorError):
            tokenize(text)


class TestParsing:
    """Test AST construction."""

    def test_single_variable(self):
        assert parse_mapping("TSPC_GAP_1_1") == VariableReference("TSPC_GAP_1_1")

    def test_and(self):
        assert parse_mapping("A AND B") == BinaryExpression(
            BinaryOperator.AND, VariableReference("A"), VariableReference("B")
        )

    def test_and_binds_tighter_than_or(self):
        """A OR B AND C parses as A || (B && C)."""
        expr = parse_mapping("A OR B AND C")
        assert expr.operator == BinaryOperator.OR
        assert expr.left == VariableReference("A")
        assert expr.right == BinaryExpression(
            BinaryOperator.AND, VariableReference("B"), VariableReference("C")
        )

    def test_parentheses(self):
        expr = parse_mapping("(A OR B) AND C")
        assert expr.operator == BinaryOperator.AND
        assert expr.left.operator == BinaryOperator.OR

    def test_left_associative(self):
        expr = parse_mapping("A AND B AND C")
        assert expr.left == BinaryExpression(
            BinaryOperator.AND, VariableReference("A"), VariableReference("B")
        )
        assert expr.right == VariableReference("C")

    def test_not(self):
        assert parse_mapping("!A") == UnaryExpression(UnaryOperator.NOT, VariableReference("A"))
        assert parse_mapping("!!A") == UnaryExpression(
            UnaryOperator.NOT, UnaryExpression(UnaryOperator.NOT, VariableReference("A"))
        )

    def test_not_binds_tighter_than_equality(self):
        expr = parse_mapping("!A == B")
        assert expr.operator == BinaryOperator.EQUALS
        assert isinstance(expr.left, UnaryExpression)

    def test_literals(self):
        assert parse_mapping("true") == Literal(True)
        assert parse_mapping("false") == Literal(False)
        assert parse_mapping("3") == Literal(3)
        assert parse_mapping("1.5") == Literal(1.5)
        assert parse_mapping('"x\\"y"') == Literal('x"y')

    def test_not_equals(self):
        expr = parse_mapping("A != true")
        assert expr.operator == BinaryOperator.NOT_EQUALS

    def test_whitespace_is_insignificant(self):
        assert parse_mapping("  A\n AND\tB ") == parse_mapping("A AND B")


class TestParseErrors:
    """Malformed mappings raise typed errors."""

    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    def test_empty(self, text):
        """An empty mapping is a syntax error, never an implicit true."""
        with pytest.raises(ExpressionSyntaxError):
            parse_mapping(text)

    @pytest.mark.parametrize("text", ["A AND", "AND B", "(A OR B", "A OR B)", "A B", "()", "!"])
    def test_malformed(self, text):
        with pytest.raises(ExpressionSyntaxError):
            parse_mapping(text)

    def test_keyword_inside_identifier_breaks_parse(self):
        """BRAND becomes BR&& which is missing its right operand."""
        with pytest.raises(ExpressionSyntaxError):
            parse_mapping("BRAND")

    def test_keyword_inside_identifier_whole_words(self):
        assert parse_mapping("BRAND", whole_words=True) == VariableReference("BRAND")

    def test_unsupported_operator(self):
        with pytest.raises(UnsupportedOperatorError) as excinfo:
            parse_mapping("A AND B >= 2")
        assert excinfo.value.operator == ">="


class TestLargeMappings:
    """Long and deeply nested mappings."""

    def test_long_and_chain(self):
        expr = parse_mapping(" AND ".join(["A"] * 3000))
        assert referenced_variables(expr) == {"A"}
        assert expression_depth(expr) == 2999

    def test_long_not_run(self):
        expr = parse_mapping("!" * 3000 + "A")
        assert referenced_variables(expr) == {"A"}
        assert expression_depth(expr) == 3000

    def test_nesting_too_deep(self):
        with pytest.raises(ExpressionSyntaxError, match="nested too deeply"):
            parse_mapping("(" * 3000 + "A" + ")" * 3000)

    def test_moderate_nesting_parses(self):
        assert parse_mapping("(" * 50 + "A" + ")" * 50) == VariableReference("A")
