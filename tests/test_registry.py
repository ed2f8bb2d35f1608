"""Test the sensor type registry.

Run from the repo root:
    python3 tests/test_registry.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

from lppdecode.registry import (
    DEFAULT_REGISTRY, FieldDescriptor, Registry, Shape, VARIABLE,
)
from lppdecode.errors import UnknownTypeError, DecodeError


# code -> (size, signed, divisor, name)
EXPECTED_TYPES = {
    0: (1, False, 1, "digital_in"),
    1: (1, False, 1, "digital_out"),
    2: (2, True, 100, "analog_in"),
    3: (2, True, 100, "analog_out"),
    16: (2, False, 1, "nitrogen"),
    17: (2, False, 1, "phosphorus"),
    18: (2, False, 1, "potassium"),
    19: (2, False, 1, "salinity"),
    20: (2, False, 100, "dissolved_oxygen"),
    21: (2, False, 10, "orp"),
    22: (2, False, 1, "cod"),
    23: (2, False, 1, "turbidity"),
    24: (2, False, 10, "no3"),
    25: (2, False, 100, "nh4+"),
    26: (2, False, 1, "bod"),
    27: (2, True, 1, "accel-x"),
    28: (2, True, 1, "accel-y"),
    29: (2, True, 1, "accel-z"),
    100: (4, False, 1, "generic"),
    101: (2, False, 1, "illuminance"),
    102: (1, False, 1, "presence"),
    103: (2, True, 10, "temperature"),
    104: (1, False, 2, "humidity"),
    105: (2, False, 1, "air_quality_index"),
    112: (2, True, 10, "humidity_prec"),
    113: (6, True, 1000, "accelerometer"),
    115: (2, False, 10, "barometer"),
    116: (2, False, 100, "voltage"),
    117: (2, False, 1000, "current"),
    118: (4, False, 1, "frequency"),
    119: (4, False, 1, "precipitation"),
    120: (1, False, 1, "percentage"),
    121: (2, True, 1, "altitude"),
    125: (2, False, 1, "concentration"),
    126: (3, False, 1, "rak_device_serial_number"),
    127: (4, False, 1000, "high_precision_ec"),
    128: (2, False, 1, "power"),
    130: (4, False, 1000, "distance"),
    131: (4, False, 1000, "energy"),
    132: (2, False, 1, "direction"),
    133: (4, False, 1, "time"),
    134: (6, True, 100, "gyrometer"),
    135: (3, False, 1, "colour"),
    136: (9, True, (10000, 10000, 100), "gps"),
    137: (11, True, (1000000, 1000000, 100), "gps"),
    138: (2, False, 1, "voc"),
    142: (1, False, 1, "switch"),
    144: (2, False, 100, "wind_speed"),
    145: (2, False, 1, "strikes"),
    152: (1, False, 1, "capacity"),
    153: (2, False, 100, "dc_current"),
    154: (2, False, 100, "dc_voltage"),
    156: (2, False, 10, "moisture"),
    158: (2, False, 100, "wind_speed"),
    159: (2, False, 1, "wind_direction"),
    161: (2, False, 100, "high_precision_ph"),
    162: (2, False, 10, "ph"),
    163: (2, False, 1, "pyranometer"),
    184: (1, False, 1, "capacity_batt"),
    185: (2, False, 100, "dc_current_batt"),
    186: (2, False, 100, "dc_voltage_batt"),
    187: (4, False, 100, "hub_voltage"),
    188: (2, False, 10, "soil_moist"),
    190: (2, False, 100, "wind_speed"),
    191: (2, False, 1, "wind_direction"),
    192: (2, False, 1000, "soil_ec"),
    193: (2, False, 100, "soil_ph_h"),
    194: (2, False, 10, "soil_ph_l"),
    195: (2, False, 1, "pyranometer"),
    203: (1, False, 1, "light"),
    227: (2, False, 1, "pm10"),
    228: (2, False, 1, "pm2_5"),
    229: (2, True, 10, "orientation"),
    233: (2, False, 10, "noise"),
    241: (VARIABLE, False, 1, "binary_raw"),
    243: (2, False, 1, "raw2byte"),
    244: (4, False, 1, "raw4byte"),
    245: (4, False, 1, "float"),
    246: (4, True, 1, "int32"),
    247: (4, False, 1, "uint32"),
    248: (VARIABLE, False, 1, "binary_tlv"),
}


def _tuple(code):
    d = DEFAULT_REGISTRY.lookup(code)
    return (d.size, d.signed, d.divisor, d.name)


def test_known_codes():
    """The registry covers exactly the standardized type table."""
    print("test_known_codes...", end="")

    codes = {d.code for d in DEFAULT_REGISTRY}
    assert codes == set(EXPECTED_TYPES), sorted(codes ^ set(EXPECTED_TYPES))
    assert len(DEFAULT_REGISTRY) == len(EXPECTED_TYPES)

    print(" OK")


def test_descriptor_constants():
    """Every (size, signed, divisor, name) tuple matches the type table."""
    print("test_descriptor_constants...", end="")

    for code, expected in EXPECTED_TYPES.items():
        assert _tuple(code) == expected, (code, _tuple(code), expected)

    print(" OK")


def test_shared_names():
    """Several codes may map to the same field name."""
    print("test_shared_names...", end="")

    wind = [d.code for d in DEFAULT_REGISTRY if d.name == "wind_speed"]
    assert wind == [144, 158, 190]
    gps = [d.code for d in DEFAULT_REGISTRY if d.name == "gps"]
    assert gps == [136, 137]

    print(" OK")


def test_shapes():
    """Multi-component shapes carry their sub-slice widths."""
    print("test_shapes...", end="")

    assert DEFAULT_REGISTRY.lookup(103).shape is Shape.SCALAR
    assert DEFAULT_REGISTRY.lookup(113).components == (2, 2, 2)
    assert DEFAULT_REGISTRY.lookup(134).shape is Shape.VECTOR3
    assert DEFAULT_REGISTRY.lookup(135).components == (1, 1, 1)
    assert DEFAULT_REGISTRY.lookup(136).components == (3, 3, 3)
    assert DEFAULT_REGISTRY.lookup(137).components == (4, 4, 3)
    assert DEFAULT_REGISTRY.lookup(245).shape is Shape.SCALAR
    assert DEFAULT_REGISTRY.lookup(241).variable
    assert not DEFAULT_REGISTRY.lookup(244).variable

    assert DEFAULT_REGISTRY.lookup(113).divisors() == (1000, 1000, 1000)
    assert DEFAULT_REGISTRY.lookup(137).divisors() == (1000000, 1000000, 100)
    assert DEFAULT_REGISTRY.lookup(103).divisors() == (10,)

    print(" OK")


def test_unknown_code_raises():
    """Looking up an unregistered code is an error, not a default."""
    print("test_unknown_code_raises...", end="")

    for code in (4, 15, 30, 99, 255):
        assert code not in DEFAULT_REGISTRY
        try:
            DEFAULT_REGISTRY.lookup(code)
            assert False, "Should have raised UnknownTypeError"
        except UnknownTypeError as e:
            assert e.type_code == code
            assert str(code) in str(e)
            assert isinstance(e, DecodeError)

    assert DEFAULT_REGISTRY.get(255) is None

    print(" OK")


def test_extend_returns_new_registry():
    """extend() does not modify the registry it extends."""
    print("test_extend_returns_new_registry...", end="")

    custom = FieldDescriptor(250, 2, True, 10, "probe_temp")
    ext = DEFAULT_REGISTRY.extend([custom])

    assert 250 in ext
    assert 250 not in DEFAULT_REGISTRY
    assert ext.lookup(250).name == "probe_temp"
    assert len(ext) == len(DEFAULT_REGISTRY) + 1

    # replacing an existing code
    ext = DEFAULT_REGISTRY.extend([FieldDescriptor(103, 2, True, 100, "temperature")])
    assert ext.lookup(103).divisor == 100
    assert DEFAULT_REGISTRY.lookup(103).divisor == 10

    print(" OK")


def test_invalid_descriptors_rejected():
    """Inconsistent descriptors fail when the registry is built."""
    print("test_invalid_descriptors_rejected...", end="")

    bad = [
        FieldDescriptor(256, 1, False, 1, "too_big"),
        FieldDescriptor(10, 0, False, 1, "zero_width"),
        FieldDescriptor(10, 6, True, 1, "short", Shape.VECTOR3, (2, 2)),
        FieldDescriptor(10, 6, True, (1, 2), "divs", Shape.VECTOR3, (2, 2, 2)),
    ]
    for d in bad:
        try:
            Registry([d])
            assert False, f"Should have rejected {d.name}"
        except ValueError:
            pass

    print(" OK")


if __name__ == "__main__":
    print("lppdecode registry tests")
    print("========================\n")

    test_known_codes()
    test_descriptor_constants()
    test_shared_names()
    test_shapes()
    test_unknown_code_raises()
    test_extend_returns_new_registry()
    test_invalid_descriptors_rejected()

    print("\nAll tests passed.")
