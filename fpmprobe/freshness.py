"""
Freshness check: drive a probe several times and look for repeats.

A fresh server emits strictly alternating values. Any value equal to the one
before it means the toggle was not observed, i.e. a stale cached copy of the
backing file was served.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass, field
from typing import List, Sequence

from .errors import ProbeCommandError

log = logging.getLogger(__name__)


@dataclass
class FreshnessReport:
    values: List[str] = field(default_factory=list)
    repeat_indices: List[int] = field(default_factory=list)   # index of each repeated value

    @property
    def repeats(self) -> int:
        return len(self.repeat_indices)

    @property
    def is_fresh(self) -> bool:
        return not self.repeat_indices

    def summary(self) -> str:
        state = "FRESH" if self.is_fresh else "STALE"
        return (
            f"{state}: {len(self.values)} observations, {self.repeats} repeat(s) | "
            f"{' '.join(self.values)}"
        )


def check_alternation(values: Sequence[str]) -> FreshnessReport:
    values = list(values)
    repeat_indices = [i for i in range(1, len(values)) if values[i] == values[i - 1]]
    return FreshnessReport(values=values, repeat_indices=repeat_indices)


def run_probe(command: Sequence[str], timeout: float = 10.0) -> str:
    """Run the probe command once and return its stripped stdout."""
    try:
        proc = subprocess.run(
            list(command),
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        raise ProbeCommandError(list(command), -1, f"timed out after {timeout}s")
    except OSError as e:
        raise ProbeCommandError(list(command), -1, str(e)) from e
    if proc.returncode != 0:
        raise ProbeCommandError(list(command), proc.returncode, proc.stderr)
    return proc.stdout.strip()


def observe(command: Sequence[str], count: int = 4, timeout: float = 10.0) -> FreshnessReport:
    if count < 1:
        raise ValueError("count must be at least 1")
    values = [run_probe(command, timeout=timeout) for _ in range(count)]
    report = check_alternation(values)
    log.info("Freshness of %s: %s", " ".join(command), report.summary())
    return report
