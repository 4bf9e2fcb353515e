"""
Canonical byte encoding for pool snapshots.

A snapshot must encode to the same bytes in every process so that its
commitment can be compared across restarts. Only JSON-native values without
representation ambiguity are accepted: dicts with str keys, lists, str, int,
bool and None. Floats are rejected outright.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any


COMMITMENT_PREFIX = b"pairswap:"


def _check_value(value: Any, path: str) -> None:
    if value is None or isinstance(value, (bool, int)):
        return
    if isinstance(value, float):
        raise TypeError(f"{path}: floats have no canonical encoding")
    if isinstance(value, str):
        if any(0xD800 <= ord(ch) <= 0xDFFF for ch in value):
            raise TypeError(f"{path}: surrogate code points are not encodable")
        return
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"{path}: keys must be str, got {type(key).__name__}")
            _check_value(key, f"{path}.{key}")
            _check_value(item, f"{path}.{key}")
        return
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _check_value(item, f"{path}[{i}]")
        return
    raise TypeError(f"{path}: unsupported type {type(value).__name__}")


def canonical_json_bytes(value: Any) -> bytes:
    """UTF-8 JSON with sorted keys and no insignificant whitespace."""
    _check_value(value, "$")
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    ).encode("utf-8")


def domain_sep_bytes(label: str, version: int = 1) -> bytes:
    """
    Prefix that binds a commitment to what it commits to.

    Format: ``pairswap:<label>:v<version>\\x00``. The label is ASCII without NUL
    so the prefix can never be confused with the payload that follows it.
    """
    if not isinstance(label, str) or not label:
        raise TypeError("label must be a non-empty str")
    if "\x00" in label or not label.isascii():
        raise ValueError(f"label must be ASCII without NUL: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return COMMITMENT_PREFIX + label.encode("ascii") + b":v" + str(version).encode("ascii") + b"\x00"


def commitment(label: str, version: int, value: Any) -> bytes:
    """SHA-256 over the domain prefix followed by the canonical encoding of `value`."""
    return hashlib.sha256(domain_sep_bytes(label, version) + canonical_json_bytes(value)).digest()
