# seo_auditor/cache.py
"""
On-disk memory of robots.txt / sitemap.xml probe outcomes, keyed by URL.

Only definitive answers are kept: a probe that ended in a network error or
timeout has no status and is never stored, so the next audit asks again.
Audit results themselves are never cached.
"""
from __future__ import annotations

import dataclasses
import logging
import os
from typing import Any, Optional

import diskcache
from platformdirs import user_cache_dir as _user_cache_dir

log = logging.getLogger(__name__)

OS_DEFAULT = "os-default"


@dataclasses.dataclass
class CacheConfig:
    enabled: bool = True
    # A directory path, or OS_DEFAULT for the per-user platform cache dir.
    directory: str = ".seo_auditor_cache"
    expire_seconds: int = 6 * 3600


class ProbeCache:
    """Values are {"exists": bool, "status": int}."""

    def __init__(self, cfg: CacheConfig, app_name: str = "seo_auditor"):
        self.cfg = cfg
        self.app_name = app_name
        self._cache: diskcache.Cache | None = None
        if cfg.enabled:
            self.create_cache_object()
        else:
            log.info("Probe cache not enabled")

    def create_cache_object(self) -> None:
        if self._cache is not None:
            return
        directory = self.cfg.directory
        if directory == OS_DEFAULT:
            directory = _user_cache_dir(self.app_name, appauthor=False)
        log.debug("Probe cache at %s", directory)
        self._cache = diskcache.Cache(directory)

    def close(self) -> None:
        if self._cache is not None:
            self._cache.close()

    @property
    def directory(self) -> Optional[str]:
        return None if self._cache is None else str(self._cache.directory)

    def stats(self) -> dict[str, int | str]:
        """Stored probe count, bytes on disk (per diskcache) and the directory."""
        if self._cache is None:
            return {"items": 0, "bytes": 0, "directory": ""}
        return {
            "items": len(self._cache),
            "bytes": int(self._cache.volume()),
            "directory": os.path.abspath(self._cache.directory),
        }

    def clear_all(self) -> None:
        if self._cache is None:
            log.warning("Cache disabled")
            return
        self._cache.clear()

    def get(self, url: str) -> Optional[dict[str, Any]]:
        if self._cache is None:
            return None
        return self._cache.get(url)

    def set_probe(self, url: str, *, exists: bool, status: int | None) -> None:
        """Remember a probe outcome. Failed probes (no status) are not stored."""
        if self._cache is None:
            return
        if status is None:
            log.debug("Not caching failed probe of %s", url)
            return
        self._cache.set(
            url, {"exists": exists, "status": status}, expire=self.cfg.expire_seconds
        )
