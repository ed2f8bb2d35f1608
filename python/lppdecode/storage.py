"""Uplink log files.

File format (UTF-8 text, one uplink per line):
  <timestamp_ns> <fport> <payload hex>

Blank lines and lines starting with '#' are ignored.  Payloads are kept
raw; decoding happens when the log is read back, so a log can be
re-decoded with a different registry or GPS mode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, TextIO

from .decoder import hex_to_bytes

logger = logging.getLogger(__name__)


@dataclass
class Uplink:
    timestamp: int
    fport: int
    payload: bytes


def parse_line(line: str, lineno: int = 0) -> Uplink | None:
    """Parse one log line; returns None for blank and comment lines."""
    text = line.strip()
    if not text or text.startswith("#"):
        return None
    parts = text.split(None, 2)
    if len(parts) != 3:
        raise ValueError(f"line {lineno}: expected '<timestamp> <fport> <hex>'")
    try:
        return Uplink(int(parts[0]), int(parts[1]), hex_to_bytes(parts[2]))
    except ValueError as e:
        raise ValueError(f"line {lineno}: {e}") from e


def format_line(uplink: Uplink) -> str:
    return f"{uplink.timestamp} {uplink.fport} {uplink.payload.hex().upper()}\n"


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

class UplinkLogWriter:
    """Appends uplinks to a log file."""

    def __init__(self, path: str | Path, append: bool = False):
        self._f: TextIO = open(path, "a" if append else "w", encoding="utf-8")
        self.count: int = 0

    def write(self, timestamp: int, fport: int, payload: bytes) -> None:
        self._f.write(format_line(Uplink(timestamp, fport, bytes(payload))))
        self.count += 1

    def flush(self) -> None:
        self._f.flush()

    def close(self) -> None:
        self._f.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


# ---------------------------------------------------------------------------
# Reader
# ---------------------------------------------------------------------------

class UplinkLogReader:
    """Iterates the uplinks of a log file, optionally filtered by time and port."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._f: TextIO | None = None

    def open(self) -> None:
        self._f = open(self._path, "r", encoding="utf-8")

    def uplinks(self, ts_min: int | None = None, ts_max: int | None = None,
                fports: set[int] | None = None) -> Iterator[Uplink]:
        if self._f is None:
            self.open()
        assert self._f is not None

        self._f.seek(0)
        for lineno, line in enumerate(self._f, 1):
            uplink = parse_line(line, lineno)
            if uplink is None:
                continue
            if ts_min is not None and uplink.timestamp < ts_min:
                continue
            if ts_max is not None and uplink.timestamp > ts_max:
                continue
            if fports is not None and uplink.fport not in fports:
                logger.debug("line %d: skipping fport %d", lineno, uplink.fport)
                continue
            yield uplink

    def close(self) -> None:
        if self._f:
            self._f.close()
            self._f = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *exc):
        self.close()
