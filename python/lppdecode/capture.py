"""Numpy time series extraction from decoded uplinks.

LiveCapture: transport-agnostic accumulator, caller feeds raw uplink
payloads with their timestamps and pulls per-key arrays back out.  Keys
are the flat ``<name>_<channel>`` keys produced by decoder.flatten().
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

import numpy as np

from .decoder import PayloadDecoder, SensorRecord, flatten
from .storage import Uplink

logger = logging.getLogger(__name__)


class LiveCapture:

    def __init__(self, decoder: PayloadDecoder | None = None):
        self.decoder = decoder if decoder is not None else PayloadDecoder()
        self._rows: dict[str, list[tuple[int, Any]]] = {}
        self._components: dict[str, tuple[str, ...]] = {}

    def add_uplink(self, timestamp: int, payload: bytes) -> list[SensorRecord]:
        """Decode one payload and append its numeric values.

        Decode errors propagate and leave the capture untouched.
        """
        records = self.decoder.decode(payload)
        for key, value in flatten(records).items():
            if isinstance(value, (str, bytes)):
                continue
            if key not in self._rows:
                self._rows[key] = []
                self._components[key] = tuple(value) if isinstance(value, dict) else ()
            self._rows[key].append((timestamp, value))
        return records

    def extend(self, uplinks: Iterable[Uplink]) -> int:
        """Feed uplinks read from a log.  Returns how many were added."""
        count = 0
        for up in uplinks:
            self.add_uplink(up.timestamp, up.payload)
            count += 1
        return count

    def keys(self) -> list[str]:
        return sorted(self._rows)

    def components(self, key: str) -> tuple[str, ...]:
        """Component names of a multi-value key, () for scalars."""
        self._get(key)
        return self._components[key]

    def series(self, key: str, component: str | None = None,
               t0: int | None = None,
               t1: int | None = None) -> tuple[np.ndarray, np.ndarray]:
        """Return (timestamps, values) sorted by time, within [t0, t1]."""
        rows = self._get(key)
        comps = self.components(key)
        if comps and component is None:
            raise KeyError(f"{key} has components {', '.join(comps)}")
        if component is not None and component not in comps:
            raise KeyError(f"{key} has no component {component!r}")

        ts = np.fromiter((t for t, _ in rows), dtype=np.int64, count=len(rows))
        if component is None:
            vals = np.fromiter((v for _, v in rows), dtype=np.float64,
                               count=len(rows))
        else:
            vals = np.fromiter((v[component] for _, v in rows),
                               dtype=np.float64, count=len(rows))

        order = np.argsort(ts, kind="stable")
        ts, vals = ts[order], vals[order]

        mask = np.ones(len(ts), dtype=bool)
        if t0 is not None:
            mask &= ts >= t0
        if t1 is not None:
            mask &= ts <= t1
        return ts[mask], vals[mask]

    def table(self, key: str, t0: int | None = None,
              t1: int | None = None) -> dict[str, np.ndarray]:
        """All components of *key* as columns, plus a ``timestamp`` column."""
        comps = self.components(key)
        if not comps:
            ts, vals = self.series(key, t0=t0, t1=t1)
            return {"timestamp": ts, "value": vals}

        out: dict[str, np.ndarray] = {}
        for c in comps:
            ts, vals = self.series(key, c, t0, t1)
            out["timestamp"] = ts
            out[c] = vals
        return out

    def clear(self) -> None:
        """Drop all samples.  Known keys stay and return empty arrays."""
        for rows in self._rows.values():
            rows.clear()

    def _get(self, key: str) -> list[tuple[int, Any]]:
        try:
            return self._rows[key]
        except KeyError:
            raise KeyError(f"no samples captured for {key!r}") from None
