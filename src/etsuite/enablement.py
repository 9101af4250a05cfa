"""
Enablement Filter: which test cases of a suite are enabled.

A test case is enabled only when its mapping evaluates to True.
Any EvaluationError (bad syntax, unsupported operator, type error,
unknown flag) disables that one test case and the scan continues; a
broken or unresolvable mapping must never cause a test to run.

Use decide() / decide_all() to find out why a test case was excluded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from etsuite.errors import (
    EvaluationError,
    ExpressionSyntaxError,
    ExpressionTypeError,
    UnresolvedVariableError,
    UnsupportedOperatorError,
)
from etsuite.evaluator import Resolver
from etsuite.model import Suite, TestCase

logger = logging.getLogger(__name__)


class DecisionReason(Enum):
    """Why a test case ended up enabled or disabled."""
    ENABLED = "enabled"
    FALSE = "false"
    SYNTAX_ERROR = "syntax_error"
    UNSUPPORTED_OPERATOR = "unsupported_operator"
    TYPE_ERROR = "type_error"
    UNRESOLVED_VARIABLE = "unresolved_variable"


_ERROR_REASONS = (
    (ExpressionSyntaxError, DecisionReason.SYNTAX_ERROR),
    (UnsupportedOperatorError, DecisionReason.UNSUPPORTED_OPERATOR),
    (ExpressionTypeError, DecisionReason.TYPE_ERROR),
    (UnresolvedVariableError, DecisionReason.UNRESOLVED_VARIABLE),
)


@dataclass(frozen=True)
class Decision:
    """Outcome of evaluating one test case's mapping."""
    name: str
    enabled: bool
    reason: DecisionReason
    detail: Optional[str] = None
    unresolved: Optional[str] = None


def decide(testcase: TestCase, resolver: Resolver) -> Decision:
    """Evaluate a test case and record the reason for the outcome."""
    try:
        value = testcase.is_enabled(resolver)
    except EvaluationError as err:
        reason = _reason_for(err)
        logger.debug("Disabling %s (%s): %s", testcase.name, reason.value, err)
        return Decision(
            name=testcase.name,
            enabled=False,
            reason=reason,
            detail=str(err),
            unresolved=err.name if isinstance(err, UnresolvedVariableError) else None,
        )
    if value:
        return Decision(name=testcase.name, enabled=True, reason=DecisionReason.ENABLED)
    return Decision(name=testcase.name, enabled=False, reason=DecisionReason.FALSE)


def is_enabled(testcase: TestCase, resolver: Resolver) -> bool:
    """Fail-safe variant of TestCase.is_enabled: errors count as disabled."""
    return decide(testcase, resolver).enabled


def decide_all(suite: Suite, resolver: Resolver) -> Iterator[Decision]:
    """Decisions for every test case, in traversal order."""
    for testcase in suite.iter_testcases():
        yield decide(testcase, resolver)


def enabled_testcases(suite: Suite, resolver: Resolver) -> Iterator[str]:
    """
    Yield the names of the enabled test cases of a suite.

    Args:
        suite: Decoded ETS suite
        resolver: Flag lookup; returns None for unknown flags

    Returns:
        Lazy iterator of names in traversal order. Names are not
        deduplicated.

    Every EvaluationError is absorbed as a disabled test case. The
    resolver itself must not raise: an exception from it is not an
    evaluation failure and propagates out of the iterator.
    """
    for decision in decide_all(suite, resolver):
        if decision.enabled:
            yield decision.name


def _reason_for(err: EvaluationError) -> DecisionReason:
    for error_type, reason in _ERROR_REASONS:
        if isinstance(err, error_type):
            return reason
    return DecisionReason.SYNTAX_ERROR
