"""
Core ETS Model Objects

Defines the decoded shape of an Executable Test Suite document:
    - TestCase (leaf with an enablement mapping)
    - Group (named node of nested groups and test cases)
    - Profile (ordered top-level groups)
    - Suite (root container)

ARCHITECTURAL RULE:
    These objects:
        - Are immutable once built (frozen dataclasses, tuple children)
        - Own their children by value, with no back references
        - Know nothing about the document format they were decoded from

Traversal is depth-first and pre-order: a group yields its own test
cases first, then the test cases of each child group, in source order.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Tuple

from etsuite.evaluator import Resolver, evaluate_mapping


@dataclass(frozen=True)
class TestCase:
    """
    A single test case of the suite.

    Properties:
        name:
            Unique identifier, used as the output key
            Example: "GAP/BROB/BCST/BV-01-C"

        mapping:
            Boolean expression over configuration flags
            Example: "TSPC_GAP_1_1 AND (TSPC_GAP_2_1 OR TSPC_GAP_3_1)"
            Empty when the document has no mapping; an empty mapping
            never evaluates (syntax error), so such a test is disabled.

        description:
            Informational only
    """

    name: str
    mapping: str = ""
    description: str = ""

    def is_enabled(self, resolver: Resolver) -> bool:
        """
        Evaluate this test case's mapping.

        Unlike enablement.is_enabled this raises on failure, so callers
        can tell a false mapping from a broken one.

        Raises:
            EvaluationError: If the mapping cannot be evaluated
        """
        return evaluate_mapping(self.mapping, resolver)


@dataclass(frozen=True)
class Group:
    """
    A named node aggregating nested groups and test cases.

    Properties:
        name: Group identifier (informational)
        groups: Child groups, in source order
        testcases: Direct test cases, in source order

    INVARIANT:
        Each TestCase is owned by exactly one Group.
    """

    name: str
    groups: Tuple["Group", ...] = ()
    testcases: Tuple[TestCase, ...] = ()

    def iter_testcases(self) -> Iterator[TestCase]:
        """
        Yield every test case under this group.

        Own test cases come first, then each child group's traversal.
        The generator is lazy and can be restarted by calling again.
        """
        yield from self.testcases
        for group in self.groups:
            yield from group.iter_testcases()

    def walk(self, parents: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], TestCase]]:
        """Same order as iter_testcases, paired with the group-name path."""
        path = parents + (self.name,)
        for testcase in self.testcases:
            yield path, testcase
        for group in self.groups:
            yield from group.walk(path)

    def iter_groups(self) -> Iterator["Group"]:
        """This group and every descendant group, pre-order."""
        yield self
        for group in self.groups:
            yield from group.iter_groups()

    def depth(self) -> int:
        """Number of group levels from this group down; a leaf group has depth 1."""
        return 1 + max((group.depth() for group in self.groups), default=0)

    def get_group(self, name: str) -> Optional["Group"]:
        """
        Retrieve a direct child group by name.

        Returns:
            The first matching Group or None
        """
        for group in self.groups:
            if group.name == name:
                return group
        return None


def iter_testcases(groups: Iterable[Group]) -> Iterator[TestCase]:
    """Concatenate the traversal of each group, in order."""
    for group in groups:
        yield from group.iter_testcases()


@dataclass(frozen=True)
class Profile:
    """
    The single profile of a suite.

    Properties:
        name: Profile name (informational)
        groups: Top-level groups, in source order
    """

    name: str
    groups: Tuple[Group, ...] = ()

    def iter_testcases(self) -> Iterator[TestCase]:
        return iter_testcases(self.groups)


@dataclass(frozen=True)
class Suite:
    """
    Root container of an Executable Test Suite.

    Properties:
        profile:
            The suite's only profile

        version:
            Version tag of the source document (ETSVersion), informational
    """

    profile: Profile
    version: Optional[str] = None

    def iter_testcases(self) -> Iterator[TestCase]:
        """All test cases of the suite, depth-first, in source order."""
        return self.profile.iter_testcases()

    def walk(self) -> Iterator[Tuple[Tuple[str, ...], TestCase]]:
        for group in self.profile.groups:
            yield from group.walk()

    def iter_groups(self) -> Iterator[Group]:
        for group in self.profile.groups:
            yield from group.iter_groups()

    def get_testcase(self, name: str) -> Optional[TestCase]:
        """
        Retrieve a test case by name.

        Returns:
            The first TestCase in traversal order with that name, or None
        """
        for testcase in self.iter_testcases():
            if testcase.name == name:
                return testcase
        return None
