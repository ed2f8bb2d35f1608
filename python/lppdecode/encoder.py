"""Payload builder: the inverse of decoder.decode().

Used to produce device-style payloads for tests and replay tooling.
"""

from __future__ import annotations

from typing import Any, Iterable

from .decoder import COMPONENT_NAMES
from .registry import DEFAULT_REGISTRY, Registry, Shape


def encode_number(value: float, size: int, signed: bool, divisor: float) -> bytes:
    """Scale *value* by *divisor* and pack it as a big-endian integer."""
    raw = round(value * divisor)
    bits = 8 * size
    if signed:
        lo, hi = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        lo, hi = 0, (1 << bits) - 1
    if not lo <= raw <= hi:
        raise ValueError(
            f"{value} (raw {raw}) does not fit in {size} "
            f"{'signed' if signed else 'unsigned'} bytes")
    return raw.to_bytes(size, "big", signed=signed)


def encode_value(type_code: int, value: Any,
                 registry: Registry = DEFAULT_REGISTRY) -> bytes:
    """Encode the value part of one entry."""
    d = registry.lookup(type_code)

    if d.shape is Shape.SCALAR:
        return encode_number(value, d.size, d.signed, d.divisor)
    if d.shape is Shape.RAW:
        return bytes(value)

    names = COMPONENT_NAMES[d.shape]
    missing = [n for n in names if n not in value]
    if missing:
        raise ValueError(f"type {type_code} value lacks {', '.join(missing)}")
    return b"".join(
        encode_number(value[name], size, d.signed, div)
        for name, size, div in zip(names, d.components, d.divisors())
    )


def encode_entry(channel: int, type_code: int, value: Any,
                 registry: Registry = DEFAULT_REGISTRY) -> bytes:
    """Encode one [channel][type][value] entry."""
    if not 0 <= channel <= 0xFF:
        raise ValueError(f"channel out of range: {channel}")
    return bytes((channel, type_code)) + encode_value(type_code, value, registry)


def build_payload(entries: Iterable[tuple[int, int, Any]],
                  registry: Registry = DEFAULT_REGISTRY) -> bytes:
    """Build a payload from (channel, type, value) tuples.

    A variable-width entry swallows everything after it, so it may only
    appear last.
    """
    parts: list[bytes] = []
    entries = list(entries)
    for n, (channel, type_code, value) in enumerate(entries):
        if registry.lookup(type_code).variable and n != len(entries) - 1:
            raise ValueError(
                f"variable-width type {type_code} must be the last entry")
        parts.append(encode_entry(channel, type_code, value, registry))
    return b"".join(parts)
