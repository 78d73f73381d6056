"""Persistence of best scores and settings."""

from .store import BestScoreStore, JsonStore, Settings, SettingsStore, default_store_path

__all__ = [
    "BestScoreStore",
    "JsonStore",
    "Settings",
    "SettingsStore",
    "default_store_path",
]
