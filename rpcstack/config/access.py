"""Cached settings access facade."""

from __future__ import annotations

import threading
from pathlib import Path

from rpcstack.config.loader import get_settings_path, load_settings
from rpcstack.config.schema import EngineSettings

_lock = threading.RLock()
_cache: dict[str, EngineSettings] = {}

_ENV_ONLY_KEY = "<env>"


def _cache_key(settings_path: Path | None = None) -> str:
    path = settings_path or get_settings_path()
    if path is None:
        return _ENV_ONLY_KEY
    return str(Path(path).expanduser().resolve())


def get_settings(*, settings_path: Path | None = None, force_reload: bool = False) -> EngineSettings:
    """Get settings with process-local cache and optional refresh."""
    key = _cache_key(settings_path)
    with _lock:
        if force_reload or key not in _cache:
            _cache[key] = load_settings(None if key == _ENV_ONLY_KEY else Path(key))
        return _cache[key]


def clear_settings_cache(*, settings_path: Path | None = None) -> None:
    """Clear cached settings entry (or all cache entries)."""
    with _lock:
        if settings_path is None:
            _cache.clear()
            return
        _cache.pop(_cache_key(settings_path), None)
