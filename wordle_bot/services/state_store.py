"""
Game State Store

Per-group persistence of the running game and of the group's word-bank
selection. Every save is mirrored into process memory first, so a missing
or failing durable backend only costs state across restarts.
"""

import datetime
import json
import threading
import time
from typing import Callable, Dict, Optional, Protocol, Set, Tuple

from pymongo import MongoClient
from pymongo.errors import PyMongoError
from pymongo.server_api import ServerApi

from ..config.game_settings import (
    BANK_IDS, BANK_MAIN, GAME_KEY_PREFIX, GAME_TTL_SECONDS, WORDBANK_KEY_PREFIX
)
from ..models.game import Game
from ..utils.game_logger import game_logger


class KeyValueBackend(Protocol):
    """Durable string store with optional per-key expiry."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class MongoKeyValueBackend:
    """
    Key-value backend on a MongoDB collection.

    Documents look like ``{_id: key, value: str, expires_at: datetime|None}``.
    A TTL index on ``expires_at`` lets MongoDB reap expired keys; reads also
    ignore documents whose expiry has passed because the TTL monitor only
    runs about once a minute.
    """

    def __init__(self, collection, clock: Callable[[], datetime.datetime] = None):
        self.collection = collection
        self.clock = clock or (lambda: datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None))
        self.collection.create_index("expires_at", expireAfterSeconds=0)

    @classmethod
    def from_uri(cls, mongo_uri: str, db_name: str, collection_name: str) -> 'MongoKeyValueBackend':
        client = MongoClient(mongo_uri, server_api=ServerApi('1'))
        client.admin.command('ping')
        return cls(client[db_name][collection_name])

    def get(self, key: str) -> Optional[str]:
        doc = self.collection.find_one({"_id": key})
        if not doc:
            return None
        expires_at = doc.get("expires_at")
        if expires_at is not None and expires_at <= self.clock():
            return None
        return doc.get("value")

    def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        expires_at = None
        if ttl_seconds:
            expires_at = self.clock() + datetime.timedelta(seconds=ttl_seconds)
        self.collection.replace_one(
            {"_id": key},
            {"_id": key, "value": value, "expires_at": expires_at},
            upsert=True
        )

    def delete(self, key: str) -> None:
        self.collection.delete_one({"_id": key})


class GameStateStore:
    """
    Stores one Game per group key plus the group's bank selection.

    Backend errors are caught and logged here and never reach the engine.
    """

    def __init__(self,
                 backend: Optional[KeyValueBackend] = None,
                 game_ttl: int = GAME_TTL_SECONDS,
                 clock: Callable[[], float] = time.time):
        self.backend = backend
        self.game_ttl = game_ttl
        self.clock = clock
        self._memory: Dict[str, Tuple[Game, float]] = {}
        # Groups whose last durable write failed; memory holds the newer copy
        self._unsynced: Set[str] = set()
        self._lock = threading.Lock()
        if backend is None:
            game_logger.logger.warning("No durable store configured, game data will only be kept in memory")

    @staticmethod
    def game_key(group_id: str) -> str:
        return f"{GAME_KEY_PREFIX}{group_id}"

    @staticmethod
    def bank_key(group_id: str) -> str:
        return f"{WORDBANK_KEY_PREFIX}{group_id}"

    def _memory_get(self, group_id: str) -> Optional[Game]:
        with self._lock:
            entry = self._memory.get(group_id)
            if entry is None:
                return None
            game, expires_at = entry
            if expires_at <= self.clock():
                del self._memory[group_id]
                return None
            return game.copy()

    def get(self, group_id: str) -> Optional[Game]:
        """Return the stored game for a group, or None."""
        if self.backend is None:
            return self._memory_get(group_id)

        with self._lock:
            unsynced = group_id in self._unsynced
        if unsynced:
            return self._memory_get(group_id)

        try:
            raw = self.backend.get(self.game_key(group_id))
        except Exception as e:
            game_logger.logger.error(f"Failed to read game data for group {group_id}: {e}")
            return self._memory_get(group_id)

        if not raw:
            return None
        try:
            return Game.from_record(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            game_logger.logger.error(f"Discarding corrupt game record for group {group_id}: {e}")
            return None

    def save(self, group_id: str, game: Game) -> bool:
        """
        Mirror the game into memory, then write it durably with a 24h expiry.

        Returns:
            True if the durable write succeeded
        """
        with self._lock:
            self._memory[group_id] = (game.copy(), self.clock() + self.game_ttl)

        if self.backend is None:
            return False

        try:
            self.backend.set(self.game_key(group_id), json.dumps(game.to_record()), self.game_ttl)
        except Exception as e:
            game_logger.logger.error(f"Failed to save game data for group {group_id}: {e}")
            with self._lock:
                self._unsynced.add(group_id)
            return False

        with self._lock:
            self._unsynced.discard(group_id)
        return True

    def delete(self, group_id: str) -> bool:
        with self._lock:
            self._memory.pop(group_id, None)
            self._unsynced.discard(group_id)

        if self.backend is None:
            return True

        try:
            self.backend.delete(self.game_key(group_id))
            return True
        except Exception as e:
            game_logger.logger.error(f"Failed to delete game data for group {group_id}: {e}")
            with self._lock:
                self._unsynced.add(group_id)
            return False

    def get_bank_selection(self, group_id: str) -> str:
        if self.backend is None:
            return BANK_MAIN
        try:
            value = self.backend.get(self.bank_key(group_id))
        except Exception as e:
            game_logger.logger.error(f"Failed to read word bank selection for group {group_id}: {e}")
            return BANK_MAIN
        return value if value in BANK_IDS else BANK_MAIN

    def set_bank_selection(self, group_id: str, bank: str) -> bool:
        if bank not in BANK_IDS:
            raise ValueError(f"Unknown word bank: {bank}")
        if self.backend is None:
            game_logger.logger.warning("No durable store configured, word bank selection will not persist")
            return False
        try:
            self.backend.set(self.bank_key(group_id), bank)
            return True
        except Exception as e:
            game_logger.logger.error(f"Failed to save word bank selection for group {group_id}: {e}")
            return False

    def purge_expired(self) -> int:
        """Drop expired memory entries. Returns how many were removed."""
        now = self.clock()
        with self._lock:
            expired = [group_id for group_id, (_, expires_at) in self._memory.items() if expires_at <= now]
            for group_id in expired:
                del self._memory[group_id]
                self._unsynced.discard(group_id)
        return len(expired)

    def active_game_count(self) -> int:
        now = self.clock()
        with self._lock:
            return sum(
                1 for game, expires_at in self._memory.values()
                if expires_at > now and not game.finished
            )


def create_state_store(config) -> GameStateStore:
    """Build the store from app config, degrading to memory-only on failure."""
    backend = None
    if config.MONGO_URI:
        try:
            backend = MongoKeyValueBackend.from_uri(
                config.MONGO_URI, config.MONGO_DB, config.MONGO_COLLECTION)
            game_logger.logger.info("Connected to MongoDB game state store")
        except PyMongoError as e:
            game_logger.logger.warning(f"MongoDB unavailable, falling back to memory-only store: {e}")
            backend = None
    return GameStateStore(backend)
