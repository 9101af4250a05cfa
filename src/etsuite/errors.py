"""Exceptions raised while parsing and evaluating ETS mapping expressions."""


class EvaluationError(Exception):
    """Base class for every failure to turn a mapping into a boolean."""
    pass


class ExpressionSyntaxError(EvaluationError):
    """Raised when a mapping does not parse after normalization."""
    pass


class UnsupportedOperatorError(EvaluationError):
    """Raised for operators the lexer knows but the boolean grammar rejects."""

    def __init__(self, operator: str, expression: str):
        super().__init__(f"Unsupported operator '{operator}' in expression '{expression}'")
        self.operator = operator
        self.expression = expression


class ExpressionTypeError(EvaluationError):
    """Raised when a non-boolean value reaches a boolean context."""
    pass


class UnresolvedVariableError(EvaluationError):
    """Raised when the resolver has no value for a referenced variable."""

    def __init__(self, name: str):
        super().__init__(f"Variable '{name}' could not be resolved")
        self.name = name
