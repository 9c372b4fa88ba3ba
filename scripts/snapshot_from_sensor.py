#!/usr/bin/env python3
"""Convert test_sensor table output into the JSON snapshot served by the snapshot source.

Usage:
    test_sensor 1000 | python scripts/snapshot_from_sensor.py pin_readings/snapshot.json
    python scripts/snapshot_from_sensor.py pin_readings/snapshot.json --input sensor.txt
"""

import argparse
import logging
import os
import sys

_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)

logging.basicConfig(
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    level=logging.INFO,
)

logger = logging.getLogger("snapshot_from_sensor")


def main() -> int:
    from kiosk.readings.sensor_table import build_snapshot, parse_sensor_table, write_snapshot

    parser = argparse.ArgumentParser(description="Write a pin snapshot JSON from test_sensor output")
    parser.add_argument("output", help="Snapshot JSON path to write (replaced atomically)")
    parser.add_argument("--input", "-i", default=None, help="Read sensor output from file instead of stdin")
    parser.add_argument("--timestamp-ms", type=int, default=None, help="Snapshot time in ms (default: now)")
    args = parser.parse_args()

    if args.input:
        try:
            with open(args.input, encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            print(f"Cannot read {args.input}: {e}", file=sys.stderr)
            return 1
    else:
        text = sys.stdin.read()

    entries = parse_sensor_table(text)
    if not entries:
        logger.warning("no pin rows found in sensor output; snapshot not written")
        return 1
    path = write_snapshot(args.output, build_snapshot(entries, args.timestamp_ms))
    logger.info("wrote %d pins to %s", len(entries), path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
