#!/usr/bin/env python3
"""Read an uplink log and print the temperature readings.

Generate a log first:
    python examples/synth_log.py

Then:
    python examples/decode_log.py
"""

from lppdecode.decoder import PayloadDecoder
from lppdecode.storage import UplinkLogReader

decoder = PayloadDecoder(fports={2})

with UplinkLogReader("/tmp/weather_uplinks.log") as reader:
    for up in reader.uplinks():
        result = decoder.decode_uplink(up.payload, up.fport)
        if result.errors:
            print(f"{up.timestamp}: {'; '.join(result.errors)}")
            continue
        temp = result.data.get("temperature_1")
        if temp is not None:
            print(f"temperature={temp:.1f}")
