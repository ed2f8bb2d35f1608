"""Sensor type registry: type code -> field descriptor."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, Union

from .errors import UnknownTypeError


class Shape(Enum):
    SCALAR = "scalar"
    VECTOR3 = "vector3"
    COLOUR = "colour"
    GPS = "gps"
    RAW = "raw"


_MULTI = (Shape.VECTOR3, Shape.COLOUR, Shape.GPS)

# Width marker for types whose payload runs to the end of the buffer
VARIABLE = None

Divisor = Union[int, tuple[int, ...]]


@dataclass(frozen=True)
class FieldDescriptor:
    code: int
    size: int | None
    signed: bool
    divisor: Divisor
    name: str
    shape: Shape = Shape.SCALAR
    components: tuple[int, ...] = ()

    @property
    def variable(self) -> bool:
        return self.size is VARIABLE

    def divisors(self) -> tuple[int, ...]:
        """One divisor per component, in payload order."""
        count = max(len(self.components), 1)
        if isinstance(self.divisor, tuple):
            if len(self.divisor) != count:
                raise ValueError(
                    f"type {self.code}: {len(self.divisor)} divisors "
                    f"for {count} components")
            return self.divisor
        return (self.divisor,) * count


def _scalar(code: int, size: int | None, name: str, signed: bool = False,
            divisor: int = 1) -> FieldDescriptor:
    return FieldDescriptor(code, size, signed, divisor, name)


def _shaped(code: int, name: str, shape: Shape, components: tuple[int, ...],
            signed: bool, divisor: Divisor) -> FieldDescriptor:
    return FieldDescriptor(code, sum(components), signed, divisor, name,
                           shape, components)


# (code, size, name, signed, divisor) for single-value types
_SCALAR_TYPES = [
    (0, 1, "digital_in", False, 1),
    (1, 1, "digital_out", False, 1),
    (2, 2, "analog_in", True, 100),
    (3, 2, "analog_out", True, 100),
    # soil / water quality
    (16, 2, "nitrogen", False, 1),
    (17, 2, "phosphorus", False, 1),
    (18, 2, "potassium", False, 1),
    (19, 2, "salinity", False, 1),
    (20, 2, "dissolved_oxygen", False, 100),
    (21, 2, "orp", False, 10),
    (22, 2, "cod", False, 1),
    (23, 2, "turbidity", False, 1),
    (24, 2, "no3", False, 10),
    (25, 2, "nh4+", False, 100),
    (26, 2, "bod", False, 1),
    (27, 2, "accel-x", True, 1),
    (28, 2, "accel-y", True, 1),
    (29, 2, "accel-z", True, 1),
    # extended IPSO types
    (100, 4, "generic", False, 1),
    (101, 2, "illuminance", False, 1),
    (102, 1, "presence", False, 1),
    (103, 2, "temperature", True, 10),
    (104, 1, "humidity", False, 2),
    (105, 2, "air_quality_index", False, 1),
    (112, 2, "humidity_prec", True, 10),
    (115, 2, "barometer", False, 10),
    (116, 2, "voltage", False, 100),
    (117, 2, "current", False, 1000),
    (118, 4, "frequency", False, 1),
    (119, 4, "precipitation", False, 1),
    (120, 1, "percentage", False, 1),
    (121, 2, "altitude", True, 1),
    (125, 2, "concentration", False, 1),
    (126, 3, "rak_device_serial_number", False, 1),
    (127, 4, "high_precision_ec", False, 1000),
    (128, 2, "power", False, 1),
    (130, 4, "distance", False, 1000),
    (131, 4, "energy", False, 1000),
    (132, 2, "direction", False, 1),
    (133, 4, "time", False, 1),
    (138, 2, "voc", False, 1),
    (142, 1, "switch", False, 1),
    (144, 2, "wind_speed", False, 100),
    (145, 2, "strikes", False, 1),
    (152, 1, "capacity", False, 1),
    (153, 2, "dc_current", False, 100),
    (154, 2, "dc_voltage", False, 100),
    (156, 2, "moisture", False, 10),
    (158, 2, "wind_speed", False, 100),
    (159, 2, "wind_direction", False, 1),
    (161, 2, "high_precision_ph", False, 100),
    (162, 2, "ph", False, 10),
    (163, 2, "pyranometer", False, 1),
    (184, 1, "capacity_batt", False, 1),
    (185, 2, "dc_current_batt", False, 100),
    (186, 2, "dc_voltage_batt", False, 100),
    (187, 4, "hub_voltage", False, 100),
    (188, 2, "soil_moist", False, 10),
    (190, 2, "wind_speed", False, 100),
    (191, 2, "wind_direction", False, 1),
    (192, 2, "soil_ec", False, 1000),
    (193, 2, "soil_ph_h", False, 100),
    (194, 2, "soil_ph_l", False, 10),
    (195, 2, "pyranometer", False, 1),
    (203, 1, "light", False, 1),
    (227, 2, "pm10", False, 1),
    (228, 2, "pm2_5", False, 1),
    (229, 2, "orientation", True, 10),
    (233, 2, "noise", False, 10),
    # Modbus / generic passthroughs
    (243, 2, "raw2byte", False, 1),
    (244, 4, "raw4byte", False, 1),
    (245, 4, "float", False, 1),
    (246, 4, "int32", True, 1),
    (247, 4, "uint32", False, 1),
]

_SHAPED_TYPES = [
    _shaped(113, "accelerometer", Shape.VECTOR3, (2, 2, 2), True, 1000),
    _shaped(134, "gyrometer", Shape.VECTOR3, (2, 2, 2), True, 100),
    _shaped(135, "colour", Shape.COLOUR, (1, 1, 1), False, 1),
    _shaped(136, "gps", Shape.GPS, (3, 3, 3), True, (10000, 10000, 100)),
    _shaped(137, "gps", Shape.GPS, (4, 4, 3), True, (1000000, 1000000, 100)),
    FieldDescriptor(241, VARIABLE, False, 1, "binary_raw", Shape.RAW),
    FieldDescriptor(248, VARIABLE, False, 1, "binary_tlv", Shape.RAW),
]


class Registry:
    """Read-only mapping of type code to FieldDescriptor.

    Never mutated after construction, so one instance can be shared by
    any number of concurrent decoders.  ``extend`` builds a new registry.
    """

    def __init__(self, descriptors: Iterable[FieldDescriptor]):
        table: dict[int, FieldDescriptor] = {}
        for d in descriptors:
            if not 0 <= d.code <= 0xFF:
                raise ValueError(f"type code out of range: {d.code}")
            if d.size is not VARIABLE and d.size <= 0:
                raise ValueError(f"type {d.code}: width must be positive")
            if d.shape in _MULTI and len(d.components) != 3:
                raise ValueError(f"type {d.code}: {d.shape.value} needs 3 components")
            if d.components and sum(d.components) != d.size:
                raise ValueError(
                    f"type {d.code}: components {d.components} "
                    f"do not add up to {d.size}")
            # validates the divisor list against the components
            d.divisors()
            table[d.code] = d
        self._table = dict(sorted(table.items()))

    def lookup(self, code: int) -> FieldDescriptor:
        try:
            return self._table[code]
        except KeyError:
            raise UnknownTypeError(code) from None

    def get(self, code: int) -> FieldDescriptor | None:
        return self._table.get(code)

    def extend(self, descriptors: Iterable[FieldDescriptor]) -> Registry:
        """Return a new registry with *descriptors* added or replaced."""
        return Registry([*self._table.values(), *descriptors])

    def __contains__(self, code: object) -> bool:
        return code in self._table

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._table.values())

    def __len__(self) -> int:
        return len(self._table)


DEFAULT_REGISTRY = Registry(
    [_scalar(code, size, name, signed, divisor)
     for code, size, name, signed, divisor in _SCALAR_TYPES]
    + _SHAPED_TYPES
)
