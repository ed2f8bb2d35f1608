"""Cayenne LPP style TLV payload decoder.

A payload is a sequence of entries:
  [channel(1)][type(1)][value(size)] ...

The value size is implied by the type code (see registry.py).  Values are
big-endian integers scaled by a fixed-point divisor; multi-component types
(3-axis, colour, GPS) are split into consecutive sub-slices.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Sequence, Union

from .errors import ByteOverflowError, DecodeError, TruncatedBufferError
from .registry import DEFAULT_REGISTRY, FieldDescriptor, Registry, Shape

logger = logging.getLogger(__name__)

ByteSource = Union[bytes, bytearray, memoryview, Sequence[int]]

HEADER_SIZE = 2

# Sub-value names for multi-component shapes, in payload order
COMPONENT_NAMES: dict[Shape, tuple[str, ...]] = {
    Shape.VECTOR3: ("x", "y", "z"),
    Shape.COLOUR: ("r", "g", "b"),
    Shape.GPS: ("latitude", "longitude", "altitude"),
}


class GpsMode(Enum):
    """How GPS entries are expanded into records.

    STANDARD emits a single ``gps`` record.  EXPANDED first emits
    ``location`` ("(lat,lon)" string), ``latitude``, ``longitude`` and
    ``altitude`` records, as the flat-output field tester decoders do.
    """
    STANDARD = "standard"
    EXPANDED = "expanded"


@dataclass
class SensorRecord:
    channel: int
    type: int
    name: str
    value: Any

    @property
    def key(self) -> str:
        """Flat output key, ``<name>_<channel>``."""
        return f"{self.name}_{self.channel}"


def bytes_to_number(stream: Sequence[int], signed: bool, divisor: float) -> float:
    """Fold big-endian bytes into an integer and scale it by *divisor*."""
    value = 0
    for b in stream:
        if not 0 <= b <= 0xFF:
            raise ByteOverflowError(b)
        value = (value << 8) | int(b)

    if signed:
        edge = 1 << (8 * len(stream))
        if value > (edge - 1) >> 1:
            value -= edge

    return value / divisor


def _split(payload: Sequence[int], sizes: Sequence[int]) -> list[Sequence[int]]:
    parts = []
    pos = 0
    for size in sizes:
        parts.append(payload[pos:pos + size])
        pos += size
    return parts


def _as_bytes(payload: Sequence[int]) -> bytes:
    for b in payload:
        if not 0 <= b <= 0xFF:
            raise ByteOverflowError(b)
    return bytes(payload)


def _shape_scalar(d: FieldDescriptor, payload: Sequence[int]) -> float:
    return bytes_to_number(payload, d.signed, d.divisor)


def _shape_components(d: FieldDescriptor, payload: Sequence[int]) -> dict[str, float]:
    parts = _split(payload, d.components)
    return {name: bytes_to_number(part, d.signed, div)
            for name, part, div in zip(COMPONENT_NAMES[d.shape], parts,
                                       d.divisors())}


def _shape_raw(d: FieldDescriptor, payload: Sequence[int]) -> bytes:
    return _as_bytes(payload)


_SHAPERS: dict[Shape, Callable[[FieldDescriptor, Sequence[int]], Any]] = {
    Shape.SCALAR: _shape_scalar,
    Shape.VECTOR3: _shape_components,
    Shape.COLOUR: _shape_components,
    Shape.GPS: _shape_components,
    Shape.RAW: _shape_raw,
}


def _js_number(value: float) -> str:
    """Render a number the way JavaScript's String() does.

    Same shortest round-trip digits as repr(), but positional notation for
    1e-7 <= |value| < 1e21 and exponents written as ``e-8`` / ``e+21``.
    """
    if value == int(value) and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    if 1e-7 <= abs(value) < 1e21:
        return format(Decimal(text), "f")
    mantissa, exp = text.split("e")
    return f"{mantissa}e{'-' if int(exp) < 0 else '+'}{abs(int(exp))}"


def _gps_records(channel: int, type_code: int,
                 fix: dict[str, float]) -> list[SensorRecord]:
    location = f"({_js_number(fix['latitude'])},{_js_number(fix['longitude'])})"
    return [
        SensorRecord(channel, type_code, "location", location),
        SensorRecord(channel, type_code, "latitude", fix["latitude"]),
        SensorRecord(channel, type_code, "longitude", fix["longitude"]),
        SensorRecord(channel, type_code, "altitude", fix["altitude"]),
    ]


def _header_byte(value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise ByteOverflowError(value)
    return int(value)


def decode(data: ByteSource, registry: Registry = DEFAULT_REGISTRY,
           gps_mode: GpsMode = GpsMode.STANDARD) -> list[SensorRecord]:
    """Decode a whole payload into records, in encounter order.

    Any malformed entry raises a DecodeError subclass and no records are
    returned.
    """
    if isinstance(data, memoryview):
        data = data.tobytes()

    records: list[SensorRecord] = []
    end = len(data)
    i = 0

    while i < end:
        if end - i < HEADER_SIZE:
            raise TruncatedBufferError(None, HEADER_SIZE, end - i)
        channel = _header_byte(data[i])
        type_code = _header_byte(data[i + 1])
        i += HEADER_SIZE

        d = registry.lookup(type_code)
        size = end - i if d.variable else d.size
        if i + size > end:
            raise TruncatedBufferError(type_code, size, end - i)

        value = _SHAPERS[d.shape](d, data[i:i + size])
        i += size

        if d.shape is Shape.GPS and gps_mode is GpsMode.EXPANDED:
            records.extend(_gps_records(channel, type_code, value))
        records.append(SensorRecord(channel, type_code, d.name, value))
        logger.debug("channel %d type %d (%s): %r",
                     channel, type_code, d.name, value)

    return records


def flatten(records: Sequence[SensorRecord]) -> dict[str, Any]:
    """Build the ``<name>_<channel>`` keyed map; later records win."""
    result: dict[str, Any] = {}
    for r in records:
        result[r.key] = r.value
    return result


def hex_to_bytes(text: str) -> bytes:
    """Parse a hex payload string ("0367010A", "03 67 01 0a", "0x0367...")."""
    s = "".join(text.split())
    if s[:2].lower() == "0x":
        s = s[2:]
    if len(s) % 2:
        raise ValueError(f"odd-length hex payload: {text!r}")
    return bytes.fromhex(s)


@dataclass
class UplinkResult:
    data: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class PayloadDecoder:
    """Decoder configured once and reused for many uplinks.

    If *fports* is given, decode_uplink() ignores uplinks on other ports.
    The decoded/failed counters only track calls made through this object.
    """

    def __init__(self, registry: Registry = DEFAULT_REGISTRY,
                 gps_mode: GpsMode = GpsMode.STANDARD,
                 fports: set[int] | None = None):
        self.registry = registry
        self.gps_mode = gps_mode
        self.fports = fports
        self.decoded: int = 0
        self.failed: int = 0

    def decode(self, data: ByteSource) -> list[SensorRecord]:
        try:
            records = decode(data, self.registry, self.gps_mode)
        except DecodeError:
            self.failed += 1
            raise
        self.decoded += 1
        return records

    def decode_uplink(self, data: ByteSource,
                      fport: int | None = None) -> UplinkResult:
        """Decode one uplink into a flat map, reporting errors instead of raising."""
        result = UplinkResult()
        if self.fports is not None and fport not in self.fports:
            logger.warning("ignoring uplink on fport %s", fport)
            result.warnings.append(f"fport {fport} not decoded")
            return result

        if len(data) == 0:
            result.warnings.append("empty payload")

        try:
            result.data = flatten(self.decode(data))
        except DecodeError as e:
            logger.warning("failed to decode uplink on fport %s: %s", fport, e)
            result.errors.append(str(e))
        return result

    def reset(self):
        """Clear counters."""
        self.decoded = 0
        self.failed = 0
