"""
Best-effort reset of the host process's object cache and compiled-code cache.

Meant to be called from inside the process that owns the caches; run as a
separate process it can only clear that process's own (empty) caches. Both
clears are fire-and-forget: results are ignored and failures are logged,
never raised.
"""

from __future__ import annotations

import importlib
import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterable, List, Union

log = logging.getLogger(__name__)


class CacheReset:
    def __init__(
        self,
        clear_object_cache: Callable[[], object],
        invalidate_compiled_cache: Callable[[], object],
    ):
        self._clear_object_cache = clear_object_cache
        self._invalidate_compiled_cache = invalidate_compiled_cache

    def reset(self) -> None:
        for name, capability in (
            ("object cache", self._clear_object_cache),
            ("compiled-code cache", self._invalidate_compiled_cache),
        ):
            try:
                capability()
            except Exception as e:
                log.warning("Clearing %s failed: %s", name, e)
            else:
                log.info("Cleared %s", name)


class ObjectCacheRegistry:
    """
    In-process object caches that a reset should empty.
    Accepts anything with clear() (dicts, custom caches) or cache_clear()
    (functools.lru_cache / functools.cache wrappers).
    """

    def __init__(self):
        self._caches: List[object] = []

    def register(self, cache):
        if not (hasattr(cache, "cache_clear") or hasattr(cache, "clear")):
            raise TypeError(f"{cache!r} has neither clear() nor cache_clear()")
        if not any(c is cache for c in self._caches):
            self._caches.append(cache)
        return cache

    def unregister(self, cache) -> None:
        self._caches = [c for c in self._caches if c is not cache]

    def __len__(self) -> int:
        return len(self._caches)

    def clear_all(self) -> int:
        """Clear every registered cache; returns how many failed."""
        failed = 0
        for cache in list(self._caches):
            try:
                if hasattr(cache, "cache_clear"):
                    cache.cache_clear()
                else:
                    cache.clear()
            except Exception as e:
                failed += 1
                log.warning("Clearing object cache %r failed: %s", cache, e)
        log.debug("Cleared %d of %d object cache(s)", len(self._caches) - failed, len(self._caches))
        return failed


OBJECT_CACHES = ObjectCacheRegistry()


def _as_roots(roots) -> List[Path]:
    # A single str/Path is one root, not an iterable of characters.
    if isinstance(roots, (str, os.PathLike)):
        roots = [roots]
    return [Path(r) for r in roots]


def invalidate_compiled_cache(roots: Union[str, os.PathLike, Iterable] = ()) -> int:
    """
    Drop the import system's finder caches and remove __pycache__ directories
    under roots, so the next import recompiles from source.
    Returns the number of __pycache__ directories removed.
    """
    importlib.invalidate_caches()
    removed = 0
    for root in _as_roots(roots):
        if not root.is_dir():
            continue
        for d in list(root.rglob("__pycache__")):
            if d.is_dir():
                shutil.rmtree(d, ignore_errors=True)
                removed += 1
    return removed


def default_reset(roots: Union[str, os.PathLike, Iterable] = ()) -> CacheReset:
    roots = _as_roots(roots)
    return CacheReset(
        clear_object_cache=OBJECT_CACHES.clear_all,
        invalidate_compiled_cache=lambda: invalidate_compiled_cache(roots),
    )
