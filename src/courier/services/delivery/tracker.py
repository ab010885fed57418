"""Delivered/pending state for the stops of the current route."""

from __future__ import annotations

import json
import logging

from ...config import settings
from ...persistence.session_store import SessionStore

logger = logging.getLogger(__name__)


class DeliveryTracker:
    """Set of route positions marked as delivered.

    State is keyed by position in the current route, so it must be reset
    whenever the route is recomputed. Every change is written through to the
    session store; the stored value is read once, at construction.
    """

    def __init__(self, store: SessionStore, key: str | None = None) -> None:
        self.store = store
        self.key = key or settings.delivered_state_key
        self._delivered: set[int] = self._load()

    def _load(self) -> set[int]:
        saved = self.store.get(self.key)
        if not saved:
            return set()
        try:
            values = json.loads(saved)
            if not isinstance(values, list):
                raise TypeError(f"expected a list, got {type(values).__name__}")
            for value in values:
                if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                    raise ValueError(f"invalid position {value!r}")
            return set(values)
        except (TypeError, ValueError) as exc:
            logger.warning(f"Discarding corrupt delivery state under '{self.key}': {exc}")
            return set()

    def _save(self) -> None:
        self.store.set(self.key, json.dumps(sorted(self._delivered)))

    @property
    def delivered(self) -> frozenset[int]:
        return frozenset(self._delivered)

    def is_delivered(self, position: int) -> bool:
        return position in self._delivered

    def toggle(self, position: int) -> bool:
        """Flip a position between pending and delivered and return the new state."""
        if position < 0:
            raise ValueError(f"Position must be non-negative, got {position}.")
        if position in self._delivered:
            self._delivered.remove(position)
        else:
            self._delivered.add(position)
        self._save()
        return position in self._delivered

    def next_pending(self, total: int) -> int | None:
        """Lowest position in ``range(total)`` that is still pending."""
        for position in range(total):
            if position not in self._delivered:
                return position
        return None

    def reset(self) -> None:
        self._delivered.clear()
        self._save()
