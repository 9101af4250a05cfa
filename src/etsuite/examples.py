"""
Example suite builder.

Builds a small GAP-style suite with a nested group layout, a few typical
mappings, one test case without mapping and one whose flag name is
broken by the AND/OR replacement.
"""
from typing import Dict

from etsuite.model import Group, Profile, Suite, TestCase


def build_example_suite() -> Suite:
    broadcast = Group(
        name="BCST",
        testcases=(
            TestCase(
                name="GAP/BROB/BCST/BV-01-C",
                mapping="TSPC_GAP_1_1 AND TSPC_GAP_5_1",
                description="Broadcaster, non-connectable advertising",
            ),
            TestCase(
                name="GAP/BROB/BCST/BV-02-C",
                mapping="TSPC_GAP_1_1 AND (TSPC_GAP_5_1 OR TSPC_GAP_5_2)",
                description="Broadcaster, advertising data",
            ),
        ),
    )
    observer = Group(
        name="OBSV",
        testcases=(
            TestCase(
                name="GAP/BROB/OBSV/BV-01-C",
                mapping="TSPC_GAP_2_1 AND !TSPC_GAP_2_2",
                description="Observer, passive scanning",
            ),
        ),
    )
    broadcaster_observer = Group(
        name="BROB",
        groups=(broadcast, observer),
        testcases=(
            TestCase(name="GAP/BROB/BV-00-C", description="Placeholder without mapping"),
        ),
    )
    discovery = Group(
        name="DISC",
        testcases=(
            TestCase(
                name="GAP/DISC/NONM/BV-01-C",
                mapping="TSPC_GAP_3_1 OR TSPC_GAP_4_1",
                description="Non-discoverable mode",
            ),
            TestCase(
                name="GAP/DISC/BRAND/BV-01-C",
                mapping="TSPC_GAP_BRAND_1",
                description="Flag name containing a keyword",
            ),
        ),
    )
    return Suite(
        version="1.0",
        profile=Profile(name="GAP", groups=(broadcaster_observer, discovery)),
    )


def example_flags() -> Dict[str, bool]:
    """Flags under which the example suite enables a mix of test cases."""
    return {
        "TSPC_GAP_1_1": True,
        "TSPC_GAP_2_1": True,
        "TSPC_GAP_2_2": False,
        "TSPC_GAP_3_1": False,
        "TSPC_GAP_4_1": True,
        "TSPC_GAP_5_1": False,
        "TSPC_GAP_BRAND_1": True,
    }
