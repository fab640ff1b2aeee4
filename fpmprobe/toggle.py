"""
The self-toggling probe.

Each call checks that the caller owns the backing file, tightens its mode to
0600, flips the marker line and writes the whole file back. A caching runtime
that serves the file will print alternating values while it is fresh and the
same value over and over once it is serving a stale copy.

The read-modify-write is not transactional. Two concurrent toggles can read
the same value and both write its opposite, losing one flip. Pass lock=True to
serialise toggles with an exclusive flock on the backing file.
"""

from __future__ import annotations

import fcntl
import logging
import os
import stat
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import OwnershipError, ProbeWriteError
from .history import ProbeHistory
from .marker_file import DEFAULT_SPEC, MarkerSpec, find_marker, read_lines, render_backing_file, rewrite

log = logging.getLogger(__name__)

PROBE_MODE = stat.S_IRUSR | stat.S_IWUSR  # 0600


@dataclass
class ToggleResult:
    path: Path
    previous_value: str
    new_value: str


class ToggleProbe:
    def __init__(
        self,
        path,
        spec: MarkerSpec = DEFAULT_SPEC,
        history: Optional[ProbeHistory] = None,
        lock: bool = False,
    ):
        self.path = Path(path)
        self._spec = spec
        self._history = history
        self._lock = lock

    def check_owner(self) -> None:
        euid = os.geteuid()
        owner_uid = os.stat(self.path).st_uid
        if euid != owner_uid:
            log.warning(
                "Refusing to toggle %s: euid=%d owner=%d", self.path, euid, owner_uid
            )
            raise OwnershipError(self.path, euid, owner_uid)

    def toggle(self) -> ToggleResult:
        """Flip the marker, persist it and return the new value."""
        self.check_owner()
        if self.path.is_dir():
            raise IsADirectoryError(f"Probe path is a directory: '{self.path}'")
        # Before locking: the lock handle needs read permission.
        os.chmod(self.path, PROBE_MODE)
        with self._locked():
            lines = read_lines(self.path)
            previous = find_marker(lines, self._spec, path=self.path)
            new_value = self._spec.flip(previous)
            content = rewrite(lines, self._spec, new_value)
            try:
                self.path.write_bytes(content)
            except OSError as e:
                log.error("Could not rewrite %s: %s", self.path, e)
                raise ProbeWriteError(self.path) from e

        result = ToggleResult(path=self.path, previous_value=previous, new_value=new_value)
        log.info("Toggled %s: %s -> %s", self.path, previous, new_value)

        if self._history is not None:
            try:
                self._history.record(result)
            except Exception as e:
                log.exception("Failed to record toggle history: %s", e)
        return result

    @contextmanager
    def _locked(self):
        if not self._lock:
            yield
            return
        # Opened read-only so the lock never needs write permission.
        with open(self.path, "rb") as fh:
            fcntl.flock(fh, fcntl.LOCK_EX)
            try:
                yield
            finally:
                fcntl.flock(fh, fcntl.LOCK_UN)


def create_backing_file(
    path,
    value: Optional[str] = None,
    spec: MarkerSpec = DEFAULT_SPEC,
    overwrite: bool = False,
) -> Path:
    """Write a fresh backing file declaring value (default: the second state)."""
    path = Path(path)
    value = value if value is not None else spec.values[1]
    spec.flip(value)  # rejects unknown values
    if path.exists() and not overwrite:
        raise FileExistsError(f"Backing file already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(render_backing_file(value, spec))
    os.chmod(path, PROBE_MODE)
    log.info("Created backing file %s with %s", path, value)
    return path
