from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from blockfall.game.modes import GameMode

logger = logging.getLogger(__name__)

BEST_PREFIX = "best_"
SETTINGS_KEY = "settings"


def default_store_path() -> Path:
    return Path.home() / ".blockfall" / "store.json"


class JsonStore:
    """Tiny key/value store backed by one JSON file.

    Every failure to read or write is logged and otherwise ignored, so a
    missing or read-only home directory never stops a game.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_store_path()

    def _read(self) -> Dict[str, Any]:
        try:
            if not self.path.is_file():
                return {}
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("could not read %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("ignoring %s: expected a JSON object, got %s", self.path, type(data).__name__)
            return {}
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> bool:
        data = self._read()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
        except OSError as e:
            logger.warning("could not write %s: %s", self.path, e)
            return False
        return True


class BestScoreStore:
    def __init__(self, store: JsonStore) -> None:
        self.store = store

    def load(self, key: str) -> int:
        raw = self.store.get(BEST_PREFIX + key, 0)
        try:
            return max(0, int(raw))
        except (TypeError, ValueError):
            return 0

    def save_if_better(self, key: str, score: int) -> bool:
        if score <= self.load(key):
            return False
        return self.store.set(BEST_PREFIX + key, int(score))


@dataclass
class Settings:
    mode: GameMode = GameMode.MARATHON
    volume: float = 0.15
    muted: bool = False

    def __post_init__(self) -> None:
        self.volume = min(1.0, max(0.0, float(self.volume)))


class SettingsStore:
    def __init__(self, store: JsonStore) -> None:
        self.store = store

    def load(self) -> Settings:
        raw = self.store.get(SETTINGS_KEY)
        settings = Settings()
        if not isinstance(raw, dict):
            return settings
        mode = raw.get("mode")
        if isinstance(mode, str):
            try:
                settings.mode = GameMode(mode)
            except ValueError:
                logger.warning("ignoring unknown saved mode %r", mode)
        volume = raw.get("volume")
        if isinstance(volume, (int, float)) and not isinstance(volume, bool):
            settings.volume = min(1.0, max(0.0, float(volume)))
        muted = raw.get("muted")
        if isinstance(muted, bool):
            settings.muted = muted
        return settings

    def save(self, settings: Settings) -> bool:
        data = asdict(settings)
        data["mode"] = settings.mode.value
        return self.store.set(SETTINGS_KEY, data)
