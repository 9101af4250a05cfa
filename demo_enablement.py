"""
Demo: Filter the example GAP suite and explain every exclusion.
"""

from etsuite.analyzer import analyze_suite
from etsuite.enablement import enabled_testcases
from etsuite.examples import build_example_suite, example_flags
from etsuite.flags import resolver_from_mapping
from etsuite.serialization import suite_to_yaml


def main():
    suite = build_example_suite()
    resolver = resolver_from_mapping(example_flags())

    print("=" * 70)
    print("EXAMPLE SUITE (decoded document)")
    print("=" * 70)
    print(suite_to_yaml(suite))

    print("=" * 70)
    print("ENABLED TEST CASES")
    print("=" * 70)
    for name in enabled_testcases(suite, resolver):
        print(f"  {name}")
    print()

    report = analyze_suite(suite, resolver)
    print("=" * 70)
    print("EXCLUSIONS")
    print("=" * 70)
    for decision in report.decisions:
        if decision.enabled:
            continue
        print(f"  {decision.name}: {decision.reason.value}")
        if decision.detail:
            print(f"    {decision.detail}")
    print()

    if report.warnings:
        print("⚠️  WARNINGS")
        for i, warning in enumerate(report.warnings, 1):
            print(f"  {i}. {warning}")
    else:
        print("✨ NO WARNINGS - every mapping parsed cleanly")


if __name__ == "__main__":
    main()
