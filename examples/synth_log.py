#!/usr/bin/env python3
"""Generate a synthetic weather-station uplink log.

Writes one uplink every 10 minutes of simulated time to
/tmp/weather_uplinks.log, then inspect it with:
    lppdecode info /tmp/weather_uplinks.log
    lppdecode --gps expanded dump /tmp/weather_uplinks.log
"""

import math
import random
import time

from lppdecode.encoder import build_payload
from lppdecode.storage import UplinkLogWriter

LOG_PATH = "/tmp/weather_uplinks.log"
FPORT = 2
PERIOD_S = 600


def make_entries(t: float) -> list[tuple[int, int, object]]:
    """One uplink worth of (channel, type, value) entries at time t (seconds)."""
    day = 2 * math.pi * t / 86400.0

    temp = 18.0 + 6.0 * math.sin(day) + random.gauss(0, 0.3)
    hum = 60.0 - 15.0 * math.sin(day) + random.gauss(0, 1.0)
    pres = 1013.0 + 4.0 * math.sin(day / 3.0) + random.gauss(0, 0.2)
    wind = max(0.0, 3.0 + 2.0 * math.sin(day * 4.0) + random.gauss(0, 0.5))
    wind_dir = int(180 + 90 * math.sin(day * 2.0)) % 360
    batt = 4.1 - 0.3 * (t / 86400.0) % 0.6

    return [
        (1, 103, temp),
        (2, 104, round(hum * 2) / 2),
        (3, 115, pres),
        (4, 190, wind),
        (4, 191, wind_dir),
        (5, 116, batt),
        (6, 136, {"latitude": 14.4212, "longitude": 121.0014, "altitude": 45.5}),
    ]


def main(hours: float = 24.0):
    start_ns = int(time.time() * 1e9)
    count = int(hours * 3600 / PERIOD_S)
    with UplinkLogWriter(LOG_PATH) as w:
        for n in range(count):
            t = n * PERIOD_S
            w.write(start_ns + t * 1_000_000_000, FPORT, build_payload(make_entries(t)))
    print(f"Wrote {count} uplinks to {LOG_PATH}")


if __name__ == "__main__":
    main()
