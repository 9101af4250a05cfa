"""
Serialization helpers for ETS model objects (Suite, Profile, Group, TestCase).

Decoded documents keep the element names of the ETS source files:

    ETSVersion: "1.0"
    Profile:
      Name: GAP
      Group:
        - Name: BROB
          TestCase:
            - Name: GAP/BROB/BCST/BV-01-C
              Mapping: TSPC_GAP_1_1 AND TSPC_GAP_5_1
              Description: ...

A repeated element with a single occurrence may arrive as a bare mapping
instead of a one-item list (this is what XML-to-dict decoders produce);
both forms are accepted.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

import yaml

from etsuite.model import Group, Profile, Suite, TestCase

logger = logging.getLogger(__name__)


class SuiteFormatError(ValueError):
    """Raised when decoded data does not have the shape of an ETS document."""
    pass


def _as_list(value: Any, where: str) -> List[Dict[str, Any]]:
    if value is None:
        return []
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        for item in value:
            if not isinstance(item, dict):
                raise SuiteFormatError(f"Expected a mapping in {where}, got {type(item).__name__}")
        return value
    raise SuiteFormatError(f"Expected a list or mapping in {where}, got {type(value).__name__}")


def _require(d: Dict[str, Any], key: str, where: str) -> Any:
    if not isinstance(d, dict):
        raise SuiteFormatError(f"Expected a mapping for {where}, got {type(d).__name__}")
    if d.get(key) is None:
        raise SuiteFormatError(f"Missing '{key}' in {where}")
    return d[key]


def _text(value: Any) -> str:
    # empty XML elements decode to None
    return "" if value is None else str(value)


def testcase_to_dict(t: TestCase) -> Dict[str, Any]:
    return {"Name": t.name, "Mapping": t.mapping, "Description": t.description}


def testcase_from_dict(d: Dict[str, Any]) -> TestCase:
    return TestCase(
        name=str(_require(d, "Name", "TestCase")),
        mapping=_text(d.get("Mapping")),
        description=_text(d.get("Description")),
    )


def group_to_dict(g: Group) -> Dict[str, Any]:
    return {
        "Name": g.name,
        "Group": [group_to_dict(child) for child in g.groups],
        "TestCase": [testcase_to_dict(t) for t in g.testcases],
    }


def group_from_dict(d: Dict[str, Any]) -> Group:
    name = str(_require(d, "Name", "Group"))
    where = f"Group '{name}'"
    return Group(
        name=name,
        groups=tuple(group_from_dict(child) for child in _as_list(d.get("Group"), where)),
        testcases=tuple(testcase_from_dict(t) for t in _as_list(d.get("TestCase"), where)),
    )


def profile_to_dict(p: Profile) -> Dict[str, Any]:
    return {"Name": p.name, "Group": [group_to_dict(g) for g in p.groups]}


def profile_from_dict(d: Dict[str, Any]) -> Profile:
    name = str(_require(d, "Name", "Profile"))
    groups: Tuple[Group, ...] = tuple(
        group_from_dict(g) for g in _as_list(d.get("Group"), f"Profile '{name}'")
    )
    return Profile(name=name, groups=groups)


def suite_to_dict(s: Suite) -> Dict[str, Any]:
    d: Dict[str, Any] = {"Profile": profile_to_dict(s.profile)}
    if s.version is not None:
        d["ETSVersion"] = s.version
    return d


def suite_from_dict(d: Dict[str, Any]) -> Suite:
    profile = profile_from_dict(_require(d, "Profile", "ETS document"))
    version = d.get("ETSVersion")
    return Suite(profile=profile, version=None if version is None else str(version))


def suite_to_json(s: Suite) -> str:
    return json.dumps(suite_to_dict(s), sort_keys=True)


def suite_from_json(s: str) -> Suite:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as err:
        raise SuiteFormatError(f"Invalid JSON: {err}") from err
    return suite_from_dict(d)


def suite_to_yaml(s: Suite) -> str:
    return yaml.safe_dump(suite_to_dict(s), sort_keys=False)


def suite_from_yaml(s: str) -> Suite:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as err:
        raise SuiteFormatError(f"Invalid YAML: {err}") from err
    return suite_from_dict(d)


def load_suite(path: Union[str, Path]) -> Suite:
    """
    Read a decoded ETS document from disk.

    Files ending in .json are read as JSON, anything else as YAML.

    Raises:
        FileNotFoundError: If the file doesn't exist
        SuiteFormatError: If the content is not an ETS document
    """
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    logger.info("Loading suite from %s", path)
    if path.suffix.lower() == ".json":
        return suite_from_json(content)
    return suite_from_yaml(content)
