"""
Flag sources: building resolvers from configuration data.

A resolver answers True / False for a flag it knows and None otherwise.
Flag files are YAML (JSON is valid YAML) and map flag names to values,
either at the top level or under a ``flags`` key:

    flags:
      TSPC_GAP_1_1: true
      TSPC_GAP_2_1: no
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from etsuite.evaluator import Resolver

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"true", "yes", "on", "1"}
_FALSE_WORDS = {"false", "no", "off", "0"}


class FlagFormatError(ValueError):
    """Raised when a flag value or flag file cannot be interpreted."""
    pass


def coerce_flag(name: str, value: Any) -> bool:
    """
    Interpret a configured flag value as a boolean.

    Accepts booleans, the integers 0 and 1, and the words
    true/false, yes/no, on/off, 1/0 (any case).
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise FlagFormatError(f"Flag '{name}' has non-boolean value {value!r}")


def resolver_from_mapping(flags: Mapping[str, Any]) -> Resolver:
    """Resolver backed by a fixed name -> value mapping; unknown names give None."""
    values = {str(name): coerce_flag(str(name), value) for name, value in flags.items()}

    def resolve(name: str) -> Optional[bool]:
        return values.get(name)

    return resolve


def chain_resolvers(*resolvers: Resolver) -> Resolver:
    """Ask each resolver in turn; the first non-None answer wins."""

    def resolve(name: str) -> Optional[bool]:
        for resolver in resolvers:
            value = resolver(name)
            if value is not None:
                return value
        return None

    return resolve


def default_resolver(default: bool, resolver: Resolver) -> Resolver:
    """Answer ``default`` wherever ``resolver`` does not know the flag."""

    def resolve(name: str) -> Optional[bool]:
        value = resolver(name)
        return default if value is None else value

    return resolve


def parse_assignment(text: str) -> Dict[str, bool]:
    """Parse a NAME=VALUE command-line assignment."""
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise FlagFormatError(f"Expected NAME=VALUE, got '{text}'")
    return {name.strip(): coerce_flag(name.strip(), value)}


def load_flags(path: Union[str, Path]) -> Dict[str, bool]:
    """
    Load a flag file.

    Returns:
        Mapping of flag name to boolean

    Raises:
        FileNotFoundError: If the file doesn't exist
        FlagFormatError: If the content is not a mapping of flags
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as err:
        raise FlagFormatError(f"Invalid flag file {path}: {err}") from err

    if data is None:
        data = {}
    if isinstance(data, dict) and set(data) == {"flags"}:
        data = data["flags"] or {}
    if not isinstance(data, dict):
        raise FlagFormatError(f"Flag file {path} must contain a mapping of flag names")

    flags = {str(name): coerce_flag(str(name), value) for name, value in data.items()}
    logger.info("Loaded %d flags from %s", len(flags), path)
    return flags
