from __future__ import annotations

from .runtime import BookmarksConfig, RuntimeConfig
from .scan import RendererConfig, ScanConfig
from .search import SearchConfig
from .settings import AppConfig, Settings, load_config

__all__ = [
    "AppConfig",
    "BookmarksConfig",
    "RendererConfig",
    "RuntimeConfig",
    "ScanConfig",
    "SearchConfig",
    "Settings",
    "load_config",
]
