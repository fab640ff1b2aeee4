"""fpm-probe: opcode-cache freshness probe and cache reset utilities."""

from .errors import (
    ProbeError,
    OwnershipError,
    ProbeWriteError,
    MarkerError,
    MarkerNotFoundError,
    MalformedMarkerError,
    ProbeCommandError,
)
from .marker_file import DEFAULT_SPEC, MarkerSpec
from .toggle import ToggleProbe, ToggleResult, create_backing_file
from .history import HistoryEntry, ProbeHistory
from .cache_reset import CacheReset, ObjectCacheRegistry, OBJECT_CACHES, default_reset
from .freshness import FreshnessReport, check_alternation, observe

__all__ = [
    "ProbeError",
    "OwnershipError",
    "ProbeWriteError",
    "MarkerError",
    "MarkerNotFoundError",
    "MalformedMarkerError",
    "ProbeCommandError",
    "DEFAULT_SPEC",
    "MarkerSpec",
    "ToggleProbe",
    "ToggleResult",
    "create_backing_file",
    "HistoryEntry",
    "ProbeHistory",
    "CacheReset",
    "ObjectCacheRegistry",
    "OBJECT_CACHES",
    "default_reset",
    "FreshnessReport",
    "check_alternation",
    "observe",
]
