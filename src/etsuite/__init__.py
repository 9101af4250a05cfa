"""
Executable Test Suite (ETS) enablement package

Decides which test cases of a hierarchical test suite are enabled
for a given set of configuration flags.

    Suite -> Profile -> Group (nested) -> TestCase(mapping)

Each TestCase mapping is a boolean expression such as
"TSPC_GAP_1_1 AND (TSPC_GAP_2_1 OR TSPC_GAP_3_1)". The caller supplies
a resolver (flag name -> True / False / None) and receives the names of
the test cases whose mapping evaluates to True.

Mappings that fail to evaluate never enable a test case.
"""

from etsuite.enablement import Decision, DecisionReason, decide, decide_all, enabled_testcases
from etsuite.errors import (
    EvaluationError,
    ExpressionSyntaxError,
    ExpressionTypeError,
    UnresolvedVariableError,
    UnsupportedOperatorError,
)
from etsuite.evaluator import Resolver, evaluate, evaluate_mapping
from etsuite.model import Group, Profile, Suite, TestCase, iter_testcases

__version__ = "0.1.0"

__all__ = [
    "Decision",
    "DecisionReason",
    "decide",
    "decide_all",
    "enabled_testcases",
    "EvaluationError",
    "ExpressionSyntaxError",
    "ExpressionTypeError",
    "UnresolvedVariableError",
    "UnsupportedOperatorError",
    "Resolver",
    "evaluate",
    "evaluate_mapping",
    "Group",
    "Profile",
    "Suite",
    "TestCase",
    "iter_testcases",
]
