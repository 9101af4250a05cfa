"""
Suite Analyzer: inventory and diagnostics for ETS suites.

This module provides lightweight analysis of Suite objects:
    - Group / test case counts and nesting depth
    - Flag usage inventory across all mappings
    - Mappings that cannot be parsed
    - Identifiers mangled by the raw AND/OR replacement
    - With a resolver: enabled/disabled counts and exclusion reasons

IMPORTANT: This module does NOT modify the suite.
It only produces read-only reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from etsuite.enablement import Decision, DecisionReason, decide_all
from etsuite.errors import EvaluationError
from etsuite.evaluator import Resolver
from etsuite.expressions import expression_depth, referenced_variables
from etsuite.mapping_parser import corrupted_identifiers, parse_mapping
from etsuite.model import Suite


@dataclass
class SuiteReport:
    """Analysis report for a suite."""

    profile_name: str
    version: Optional[str] = None
    total_groups: int = 0
    total_testcases: int = 0
    max_group_depth: int = 0

    # Test case hygiene
    duplicate_names: Set[str] = field(default_factory=set)
    empty_mappings: List[str] = field(default_factory=list)
    invalid_mappings: Dict[str, str] = field(default_factory=dict)
    mangled_identifiers: Dict[str, List[str]] = field(default_factory=dict)

    # Flag usage
    variable_usage: Dict[str, int] = field(default_factory=dict)
    max_expression_depth: int = 0

    # Filled only when a resolver is given
    decisions: List[Decision] = field(default_factory=list)
    enabled_count: int = 0
    disabled_count: int = 0
    exclusions_by_reason: Dict[DecisionReason, int] = field(default_factory=dict)
    unresolved_variables: Set[str] = field(default_factory=set)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)

    @property
    def enabled_names(self) -> List[str]:
        return [d.name for d in self.decisions if d.enabled]


def analyze_suite(suite: Suite, resolver: Optional[Resolver] = None) -> SuiteReport:
    """
    Analyze a suite, optionally against a resolver.

    Without a resolver only structural and mapping checks run.
    With one, every test case is also evaluated through the
    enablement filter and the outcome recorded per test case.
    """
    report = SuiteReport(profile_name=suite.profile.name, version=suite.version)

    report.total_groups = sum(1 for _ in suite.iter_groups())
    report.max_group_depth = max((g.depth() for g in suite.profile.groups), default=0)

    usage: Counter = Counter()
    names: Counter = Counter()

    for testcase in suite.iter_testcases():
        report.total_testcases += 1
        names[testcase.name] += 1

        if not testcase.mapping.strip():
            report.empty_mappings.append(testcase.name)
            continue

        mangled = corrupted_identifiers(testcase.mapping)
        if mangled:
            report.mangled_identifiers[testcase.name] = mangled

        try:
            expr = parse_mapping(testcase.mapping)
        except EvaluationError as err:
            report.invalid_mappings[testcase.name] = str(err)
            continue

        usage.update(referenced_variables(expr))
        report.max_expression_depth = max(report.max_expression_depth, expression_depth(expr))

    report.variable_usage = dict(usage)
    report.duplicate_names = {name for name, count in names.items() if count > 1}

    if resolver is not None:
        reasons: Counter = Counter()
        for decision in decide_all(suite, resolver):
            report.decisions.append(decision)
            if decision.enabled:
                report.enabled_count += 1
                continue
            report.disabled_count += 1
            reasons[decision.reason] += 1
            if decision.unresolved is not None:
                report.unresolved_variables.add(decision.unresolved)
        report.exclusions_by_reason = dict(reasons)

    # =========================================================================
    # WARNING FLAGS
    # =========================================================================

    if report.duplicate_names:
        report.add_warning(
            f"Duplicate test case names: {', '.join(sorted(report.duplicate_names))}"
        )

    if report.empty_mappings:
        report.add_warning(
            f"Test cases without mapping (always disabled): {len(report.empty_mappings)}"
        )

    if report.invalid_mappings:
        report.add_warning(
            f"Unparseable mappings: {', '.join(sorted(report.invalid_mappings))}"
        )

    for name, idents in sorted(report.mangled_identifiers.items()):
        report.add_warning(
            f"Mapping of {name} has identifiers broken by AND/OR replacement: {', '.join(idents)}"
        )

    if report.unresolved_variables:
        report.add_warning(
            f"Unresolved flags: {', '.join(sorted(report.unresolved_variables))}"
        )

    return report
