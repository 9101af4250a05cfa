"""
Tests for flag sources and resolver composition.
"""

import pytest
from etsuite.flags import (
    FlagFormatError,
    chain_resolvers,
    coerce_flag,
    default_resolver,
    load_flags,
    parse_assignment,
    resolver_from_mapping,
)


class TestCoercion:
    """Flag values from configuration files."""

    @pytest.mark.parametrize("value, expected", [
        (True, True),
        (False, False),
        (1, True),
        (0, False),
        ("true", True),
        ("FALSE", False),
        ("yes", True),
        ("No", False),
        ("on", True),
        ("off", False),
        (" 1 ", True),
        ("0", False),
    ])
    def test_accepted(self, value, expected):
        assert coerce_flag("F", value) is expected

    @pytest.mark.parametrize("value", [2, -1, "maybe", "", None, 1.0, [True]])
    def test_rejected(self, value):
        with pytest.raises(FlagFormatError):
            coerce_flag("F", value)


class TestResolvers:
    """Resolver construction and composition."""

    def test_mapping_resolver(self):
        resolve = resolver_from_mapping({"A": True, "B": "no"})
        assert resolve("A") is True
        assert resolve("B") is False
        assert resolve("C") is None

    def test_mapping_resolver_validates_eagerly(self):
        with pytest.raises(FlagFormatError):
            resolver_from_mapping({"A": "perhaps"})

    def test_mapping_resolver_copies(self):
        flags = {"A": True}
        resolve = resolver_from_mapping(flags)
        flags["A"] = False
        assert resolve("A") is True

    def test_chain(self):
        resolve = chain_resolvers(
            resolver_from_mapping({"A": False}),
            resolver_from_mapping({"A": True, "B": True}),
        )
        assert resolve("A") is False
        assert resolve("B") is True
        assert resolve("C") is None

    def test_chain_empty(self):
        assert chain_resolvers()("A") is None

    def test_default(self):
        resolve = default_resolver(False, resolver_from_mapping({"A": True}))
        assert resolve("A") is True
        assert resolve("B") is False


class TestAssignments:
    """NAME=VALUE parsing."""

    def test_parse(self):
        assert parse_assignment("TSPC_GAP_1_1=true") == {"TSPC_GAP_1_1": True}
        assert parse_assignment(" X = 0") == {"X": False}

    @pytest.mark.parametrize("text", ["X", "=true", "X=maybe"])
    def test_invalid(self, text):
        with pytest.raises(FlagFormatError):
            parse_assignment(text)


class TestLoadFlags:
    """Flag files."""

    def test_top_level_mapping(self, tmp_path):
        path = tmp_path / "ics.yaml"
        path.write_text("TSPC_GAP_1_1: true\nTSPC_GAP_2_1: no\n", encoding="utf-8")
        assert load_flags(path) == {"TSPC_GAP_1_1": True, "TSPC_GAP_2_1": False}

    def test_nested_under_flags(self, tmp_path):
        path = tmp_path / "ics.yaml"
        path.write_text("flags:\n  A: 1\n  B: off\n", encoding="utf-8")
        assert load_flags(path) == {"A": True, "B": False}

    def test_json(self, tmp_path):
        path = tmp_path / "ics.json"
        path.write_text('{"A": true, "B": false}', encoding="utf-8")
        assert load_flags(str(path)) == {"A": True, "B": False}

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_flags(path) == {}

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- A\n- B\n", encoding="utf-8")
        with pytest.raises(FlagFormatError):
            load_flags(path)

    def test_bad_value(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("A: maybe\n", encoding="utf-8")
        with pytest.raises(FlagFormatError):
            load_flags(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("A: [unclosed\n", encoding="utf-8")
        with pytest.raises(FlagFormatError):
            load_flags(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_flags(tmp_path / "missing.yaml")
