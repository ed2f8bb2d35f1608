"""lppdecode - Cayenne LPP sensor payload decoder and tooling."""

from .errors import DecodeError, UnknownTypeError, ByteOverflowError, TruncatedBufferError
from .registry import Registry, FieldDescriptor, Shape, VARIABLE, DEFAULT_REGISTRY
from .decoder import (
    SensorRecord, GpsMode, UplinkResult, PayloadDecoder,
    bytes_to_number, decode, flatten, hex_to_bytes,
)
from .encoder import encode_number, encode_value, encode_entry, build_payload
from .storage import Uplink, UplinkLogWriter, UplinkLogReader
from .capture import LiveCapture

__all__ = [
    "DecodeError", "UnknownTypeError", "ByteOverflowError", "TruncatedBufferError",
    "Registry", "FieldDescriptor", "Shape", "VARIABLE", "DEFAULT_REGISTRY",
    "SensorRecord", "GpsMode", "UplinkResult", "PayloadDecoder",
    "bytes_to_number", "decode", "flatten", "hex_to_bytes",
    "encode_number", "encode_value", "encode_entry", "build_payload",
    "Uplink", "UplinkLogWriter", "UplinkLogReader",
    "LiveCapture",
]
