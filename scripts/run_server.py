#!/usr/bin/env python3
"""Standalone kiosk server. Reads config (default config/config.yaml, else the example) and serves
GET /api/pins, GET /health, POST /webhook/update and the kiosk page on 0.0.0.0:<port>.

Usage: python scripts/run_server.py [config.yaml]     (PORT env overrides the configured port)"""

import logging
import os
import sys

# Project root: one level above scripts/
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _PROJECT_ROOT)
os.chdir(_PROJECT_ROOT)

logging.basicConfig(
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    level=logging.INFO,
)

logger = logging.getLogger("run_server")


def main() -> int:
    from kiosk.config.settings import read_config
    from kiosk.status_server.app import run_server

    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    config_path = args[0] if args else None
    if config_path and not os.path.isabs(config_path):
        config_path = os.path.join(_PROJECT_ROOT, config_path)
    if config_path and not os.path.isfile(config_path):
        print(f"Config not found: {config_path}", file=sys.stderr)
        return 1
    try:
        config, resolved = read_config(config_path)
        logger.info("Config: %s", resolved)
        run_server(config)
    except ValueError as e:
        print(f"Invalid config: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
