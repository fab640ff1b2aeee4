#!/usr/bin/env python3
"""
Reset the object cache and compiled-code cache.

Meant to be called from inside the process that owns the caches, e.g.

    from fpmprobe.cache_reset import default_reset
    default_reset([app_root]).reset()

Run as a script it only resets its own process: it drops the import system's
finder caches and deletes __pycache__ directories under the given roots.
Produces no output and always exits 0.

Usage:
    python3 bin/reset_caches.py [ROOT ...]
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fpmprobe.cache_reset import default_reset
from fpmprobe.storage import LOG_PATH, STATE_DIR

STATE_DIR.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    filename=str(LOG_PATH),
    level=logging.INFO,
    format="%(asctime)s [reset_caches] %(levelname)s %(message)s",
)
log = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Best-effort cache reset.")
    parser.add_argument("roots", nargs="*", help="directories to purge __pycache__ from")
    args = parser.parse_args(argv)

    log.info("reset_caches: roots=%s", args.roots)
    default_reset(args.roots).reset()
    sys.exit(0)


if __name__ == "__main__":
    main()
