#!/usr/bin/env python3
"""
Toggle the opcode-cache freshness probe.

Flips the marker line in the backing file between its two values, rewrites
the file with mode 0600 and prints the new value. Only the file's owner may
run it.

Usage:
    python3 bin/toggle_probe.py                  # $FPMPROBE_STATE_DIR/probe.php
    python3 bin/toggle_probe.py /srv/www/probe.php --lock
    python3 bin/toggle_probe.py /srv/www/probe.php --init

Exit codes:
    0  toggled, new value on stdout
    1  not the owner, marker missing/malformed, file missing or unwritable
"""

import argparse
import logging
import sys
from pathlib import Path

# Allow running from the repo root without installing
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from fpmprobe.errors import ProbeError
from fpmprobe.history import ProbeHistory
from fpmprobe.storage import DEFAULT_PROBE_PATH, LOG_PATH, STATE_DIR
from fpmprobe.toggle import ToggleProbe, create_backing_file

STATE_DIR.mkdir(parents=True, exist_ok=True)
logging.basicConfig(
    filename=str(LOG_PATH),
    level=logging.INFO,
    format="%(asctime)s [toggle_probe] %(levelname)s %(message)s",
)
log = logging.getLogger(__name__)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Flip the probe marker and print its new value.")
    parser.add_argument("path", nargs="?", default=str(DEFAULT_PROBE_PATH))
    parser.add_argument("--lock", action="store_true", help="serialise concurrent toggles with flock")
    parser.add_argument("--no-history", action="store_true", help="do not record the toggle")
    parser.add_argument("--init", action="store_true", help="create the backing file if it is missing")
    args = parser.parse_args(argv)

    path = Path(args.path)
    history = None if args.no_history else ProbeHistory()
    probe = ToggleProbe(path, history=history, lock=args.lock)
    try:
        if args.init and not path.exists():
            create_backing_file(path)
        result = probe.toggle()
    except ProbeError as e:
        log.error("Toggle failed: %s", e)
        print(e)
        sys.exit(1)
    except FileNotFoundError as e:
        log.error("Backing file missing: %s", e)
        print(f"No such probe file: '{path}'")
        sys.exit(1)
    except OSError as e:
        log.error("Cannot use probe file %s: %s", path, e)
        print(f"Cannot use probe file '{path}': {e.strerror or e}")
        sys.exit(1)

    sys.stdout.write(result.new_value + "\n")
    sys.exit(0)


if __name__ == "__main__":
    main()
