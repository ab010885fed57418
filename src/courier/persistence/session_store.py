"""Key/value stores that keep per-session state across reloads."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from ..config import settings

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class InMemorySessionStore:
    """Process-local store, mostly useful in tests."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class FileSessionStore:
    """Stores all keys of one session in a single JSON document."""

    def __init__(self, session_id: str = "default", root: Path | None = None) -> None:
        self.root = (root or settings.data_root).resolve() / "session"
        self.path = self.root / f"{session_id}.json"

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning(f"Ignoring unreadable session file {self.path}: {exc}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(key): str(value) for key, value in data.items()}

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.root.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=2)
