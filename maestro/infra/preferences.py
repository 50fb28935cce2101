"""Small key/value settings persisted outside the entity store.

Presentation code uses this for flags such as whether onboarding has been
completed. Values live in a JSON object on disk; a missing or unreadable
file behaves as an empty one.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ONBOARDING_KEY = "hasCompletedOnboarding"


class Preferences:
    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError):
            logger.exception("Could not read preferences from %s", self._path)
            return {}
        return data if isinstance(data, dict) else {}

    def save(self, data: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def get(self, key: str, default: Any = None) -> Any:
        return self.load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self.load()
        data[key] = value
        self.save(data)

    @property
    def has_completed_onboarding(self) -> bool:
        return bool(self.get(ONBOARDING_KEY, False))

    def complete_onboarding(self) -> None:
        self.set(ONBOARDING_KEY, True)

    def reset(self) -> None:
        if self._path.exists():
            self._path.unlink()
