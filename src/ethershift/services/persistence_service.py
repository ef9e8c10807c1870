"""Persistence gateway between live sessions and the save store."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from ethershift.data.errors import DataLoadError
from ethershift.data.save_store import SaveStore
from ethershift.domain.state import GameSession, append_log
from ethershift.services.errors import SaveLoadError
from ethershift.services.events import ActionRejectedEvent, GameEvent
from ethershift.services.save_service import SaveService

logger = logging.getLogger(__name__)

DEFAULT_SAVE_KEY = "ethershift_save"
SAVED_MESSAGE = "Session archived to the memory core."


@dataclass(slots=True)
class GameSavedEvent(GameEvent):
    key: str


@dataclass(slots=True)
class GameLoadedEvent(GameEvent):
    key: str
    zone_id: str


@dataclass(slots=True)
class LoadFailedEvent(GameEvent):
    """The stored record could not be restored; the live session is untouched."""

    message: str


class PersistenceService:
    """Saves, loads and clears the single session record."""

    def __init__(self, save_service: SaveService, store: SaveStore, key: str = DEFAULT_SAVE_KEY) -> None:
        self._save_service = save_service
        self._store = store
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def has_save(self) -> bool:
        return self._store.exists(self._key)

    def save(self, session: GameSession, timestamp: str) -> List[GameEvent]:
        """Snapshot an idle session. The confirmation line is logged before the snapshot is taken."""
        state = session.state
        if not state.is_idle:
            return [ActionRejectedEvent(reason="busy", message="Cannot save while the session is busy.")]
        append_log(state, SAVED_MESSAGE, "SYSTEM", timestamp)
        payload = self._save_service.serialize(session)
        self._store.write(self._key, payload)
        logger.info("Saved session to '%s'", self._key)
        return [GameSavedEvent(key=self._key)]

    def load(self) -> Tuple[GameSession | None, List[GameEvent]]:
        """Return a freshly built session, or None plus the reason it could not be restored."""
        try:
            payload = self._store.read(self._key)
        except DataLoadError as exc:
            logger.warning("Save record '%s' is unreadable: %s", self._key, exc)
            return None, [LoadFailedEvent(message="Save data is corrupted and could not be restored.")]
        if payload is None:
            return None, [ActionRejectedEvent(reason="no_save", message="No save data found.")]
        try:
            session = self._save_service.deserialize(payload)
        except SaveLoadError as exc:
            logger.warning("Save record '%s' rejected: %s", self._key, exc)
            return None, [LoadFailedEvent(message=f"Save data could not be restored: {exc}")]
        logger.info("Loaded session from '%s'", self._key)
        return session, [GameLoadedEvent(key=self._key, zone_id=session.state.zone_id)]

    def clear(self) -> None:
        self._store.delete(self._key)
        logger.info("Cleared save record '%s'", self._key)
