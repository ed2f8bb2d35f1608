"""lppdecode command-line tool."""

from __future__ import annotations

import argparse
import logging
import os
import sys

from .capture import LiveCapture
from .decoder import GpsMode, PayloadDecoder, SensorRecord, flatten, hex_to_bytes
from .errors import DecodeError
from .registry import DEFAULT_REGISTRY
from .storage import UplinkLogReader

logger = logging.getLogger(__name__)


def _format_value(value) -> str:
    if isinstance(value, dict):
        return "{" + ", ".join(f"{k}={v}" for k, v in value.items()) + "}"
    if isinstance(value, bytes):
        return value.hex().upper()
    return str(value)


def _format_record(r: SensorRecord) -> str:
    return f"  ch={r.channel:3d} type={r.type:3d} {r.name:<24s} {_format_value(r.value)}"


def _make_decoder(args: argparse.Namespace) -> PayloadDecoder:
    return PayloadDecoder(gps_mode=GpsMode(args.gps))


def cmd_decode(args: argparse.Namespace) -> None:
    """Decode a single hex payload."""
    decoder = _make_decoder(args)
    try:
        records = decoder.decode(hex_to_bytes(args.payload))
    except (DecodeError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.records:
        for r in records:
            print(_format_record(r))
    else:
        for key, value in flatten(records).items():
            print(f"{key}: {_format_value(value)}")


def cmd_types(args: argparse.Namespace) -> None:
    """Print the sensor type registry."""
    print(f"  {'Code':>4s}  {'Hex':>3s}  {'Name':<26s}  {'Size':>4s}  "
          f"{'Signed':<6s}  {'Shape':<8s}  Divisor")
    for d in DEFAULT_REGISTRY:
        size = "var" if d.variable else str(d.size)
        divisor = "/".join(str(x) for x in d.divisors())
        print(f"  {d.code:4d}  {d.code:3X}  {d.name:<26s}  {size:>4s}  "
              f"{'yes' if d.signed else 'no':<6s}  {d.shape.value:<8s}  {divisor}")


def cmd_dump(args: argparse.Namespace) -> None:
    """Decode every uplink in a log file."""
    decoder = _make_decoder(args)
    with UplinkLogReader(args.file) as reader:
        for up in reader.uplinks():
            ts_s = up.timestamp / 1_000_000_000
            print(f"[{ts_s:12.6f}] fport={up.fport} {up.payload.hex().upper()}")
            try:
                records = decoder.decode(up.payload)
            except DecodeError as e:
                print(f"  error: {e}")
                continue
            for r in records:
                print(_format_record(r))
    logger.info("decoded %d uplinks, %d failed", decoder.decoded, decoder.failed)


def cmd_info(args: argparse.Namespace) -> None:
    """Print per-key summary statistics for a log file."""
    file_size = os.path.getsize(args.file)
    capture = LiveCapture(_make_decoder(args))
    total = 0

    with UplinkLogReader(args.file) as reader:
        for up in reader.uplinks():
            total += 1
            try:
                capture.add_uplink(up.timestamp, up.payload)
            except DecodeError as e:
                logger.warning("skipping uplink at %d: %s", up.timestamp, e)

    print(f"File:       {args.file}")
    print(f"Size:       {file_size:,} bytes")
    print(f"Uplinks:    {total:,}")
    print(f"Decoded:    {capture.decoder.decoded:,}")
    print(f"Failed:     {capture.decoder.failed:,}")

    keys = capture.keys()
    print(f"\nKeys ({len(keys)}):")
    print(f"  {'Key':<28s}  {'Samples':>8s}  {'Min':>12s}  {'Max':>12s}  {'Mean':>12s}")
    for key in keys:
        comps = capture.components(key) or (None,)
        for c in comps:
            _, vals = capture.series(key, c)
            label = key if c is None else f"{key}.{c}"
            if len(vals) == 0:
                print(f"  {label:<28s}  {0:8d}")
                continue
            print(f"  {label:<28s}  {len(vals):8,}  {vals.min():12.4f}  "
                  f"{vals.max():12.4f}  {vals.mean():12.4f}")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="lppdecode",
                                     description="Cayenne LPP payload decoder")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Enable debug logging")
    parser.add_argument("--gps", choices=[m.value for m in GpsMode],
                        default=GpsMode.STANDARD.value,
                        help="GPS record expansion (default: standard)")
    sub = parser.add_subparsers(dest="command")

    # decode
    p_decode = sub.add_parser("decode", help="Decode a hex payload")
    p_decode.add_argument("payload", help="Payload as hex, e.g. 0367010A")
    p_decode.add_argument("--records", action="store_true",
                          help="Print records instead of the flat key map")

    # types
    sub.add_parser("types", help="List known sensor types")

    # dump
    p_dump = sub.add_parser("dump", help="Decode an uplink log file")
    p_dump.add_argument("file", help="Path to uplink log")

    # info
    p_info = sub.add_parser("info", help="Show summary info about an uplink log")
    p_info.add_argument("file", help="Path to uplink log")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "decode":
        cmd_decode(args)
    elif args.command == "types":
        cmd_types(args)
    elif args.command == "dump":
        cmd_dump(args)
    elif args.command == "info":
        cmd_info(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
