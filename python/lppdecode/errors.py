"""Decode errors.  Every one of them aborts the whole decode call."""

from __future__ import annotations


class DecodeError(ValueError):
    """Base class for malformed payloads."""


class UnknownTypeError(DecodeError):

    def __init__(self, type_code: int):
        super().__init__(f"unknown sensor type: {type_code}")
        self.type_code = type_code


class ByteOverflowError(DecodeError):

    def __init__(self, value: object):
        super().__init__(f"byte value out of range 0..255: {value!r}")
        self.value = value


class TruncatedBufferError(DecodeError):

    def __init__(self, type_code: int | None, needed: int, available: int):
        what = "entry header" if type_code is None else f"sensor type {type_code}"
        super().__init__(
            f"{what} needs {needed} bytes, only {available} left")
        self.type_code = type_code
        self.needed = needed
        self.available = available
