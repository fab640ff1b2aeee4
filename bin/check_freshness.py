#!/usr/bin/env python3
"""
Check that a probe is served fresh.

Runs the probe command N times (or reads the recorded toggle history) and
verifies the emitted values alternate. A repeated value means a stale cached
copy of the backing file was served.

Usage:
    python3 bin/check_freshness.py --count 6 -- curl -s http://localhost/probe.php
    python3 bin/check_freshness.py --from-history /srv/www/probe.php

Exit codes:
    0  fresh
    1  probe command failed
    2  stale
"""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fpmprobe.errors import ProbeError
from fpmprobe.freshness import check_alternation, observe
from fpmprobe.history import ProbeHistory
from fpmprobe.storage import LOG_PATH, STATE_DIR

STATE_DIR.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    filename=str(LOG_PATH),
    level=logging.INFO,
    format="%(asctime)s [check_freshness] %(levelname)s %(message)s",
)
log = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Verify that probe output alternates.")
    parser.add_argument("--count", type=int, default=4, help="number of probe invocations")
    parser.add_argument("--timeout", type=float, default=10.0, help="per-invocation timeout (seconds)")
    parser.add_argument("--from-history", metavar="PATH", help="check recorded toggles of PATH instead")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="probe command, after --")
    args = parser.parse_args(argv)

    command = args.command[1:] if args.command[:1] == ["--"] else args.command

    if args.from_history:
        report = check_alternation(ProbeHistory().values(args.from_history, limit=args.count))
    elif command:
        try:
            report = observe(command, count=args.count, timeout=args.timeout)
        except ProbeError as e:
            log.error("Probe command failed: %s", e)
            print(e)
            sys.exit(1)
    else:
        parser.error("either a probe command or --from-history is required")

    print(report.summary())
    sys.exit(0 if report.is_fresh else 2)


if __name__ == "__main__":
    main()
