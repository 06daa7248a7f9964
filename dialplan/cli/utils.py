"""Shared CLI helpers."""

import sys
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any

# Exit codes
EXIT_SUCCESS = 0
EXIT_NO_MATCH = 1
EXIT_PARSE_ERROR = 2
EXIT_TRANSFORM_ERROR = 3


def read_input(source: str) -> str:
    """Return ``source`` itself, or stdin when it is '-'."""
    if source == "-":
        return sys.stdin.read().strip()
    return source


def dataclass_to_dict(obj: Any) -> Any:
    """Convert a dataclass (recursively) into JSON-serializable data."""
    if is_dataclass(obj) and not isinstance(obj, type):
        data = asdict(obj)
        return {key: _plain(value) for key, value in data.items()}
    return _plain(obj)


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value
