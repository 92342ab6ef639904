"""Engine configuration loaded from a JSON file."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields, replace
from os import PathLike

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Config:
    """Tunable parameters of the storage engine."""

    memtable_max_size: int = 1000
    block_size_kb: int = 4
    cache_size: int = 128
    summary_step: int = 5
    memtable_type: str = "hashmap"


DEFAULT_CONFIG = Config()

_FIELD_TYPES = {f.name: type(getattr(DEFAULT_CONFIG, f.name)) for f in fields(Config)}


def _match_field(key: str) -> str | None:
    if key in _FIELD_TYPES:
        return key
    folded = key.casefold()
    for name in _FIELD_TYPES:
        if name.casefold() == folded:
            return name
    return None


def _value_fits(name: str, value: object) -> bool:
    expected = _FIELD_TYPES[name]
    if expected is int:
        return (
            isinstance(value, int)
            and not isinstance(value, bool)
            and _INT64_MIN <= value <= _INT64_MAX
        )
    return isinstance(value, expected)


def load_config(path: str | PathLike[str]) -> Config:
    """Load a configuration file, falling back to the defaults on any problem.

    Keys missing from the file keep their default values, unknown keys are
    ignored, and a file that cannot be read or decoded yields the defaults.
    """
    try:
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
    except (OSError, UnicodeDecodeError):
        return DEFAULT_CONFIG

    try:
        data, _ = json.JSONDecoder().raw_decode(text.lstrip())
    except json.JSONDecodeError:
        return DEFAULT_CONFIG

    if not isinstance(data, dict):
        return DEFAULT_CONFIG

    overrides: dict[str, object] = {}
    for key, value in data.items():
        name = _match_field(key)
        if name is None or value is None:
            continue
        if not _value_fits(name, value):
            return DEFAULT_CONFIG
        overrides[name] = value
    return replace(DEFAULT_CONFIG, **overrides)