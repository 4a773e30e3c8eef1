"""
Common plumbing for client stores: snapshot, subscribe/notify, persistence.
"""

import asyncio
import json
from collections.abc import Callable
from typing import Any, Generic, TypeVar

import aiosqlite

from whispernotes.database.db import LocalStorage
from whispernotes.logging import get_logger
from whispernotes.models import Snapshot

logger = get_logger('stores')

SnapshotT = TypeVar("SnapshotT", bound=Snapshot)
Listener = Callable[[Any], None]


class Store(Generic[SnapshotT]):
    """
    Owns one entity kind's canonical in-memory state and its storage key.

    Subclasses build their snapshot in ``_build_snapshot`` and end every
    mutating operation with ``_commit``, which persists and then notifies.
    Take a ``_checkpoint`` before changing anything: if the write fails,
    ``_commit`` rolls the in-memory state back to it and re-raises.
    Read-modify-write sections run under ``self._lock`` so two operations on
    the same store never interleave their writes to the persisted blob.
    """

    def __init__(self, storage: LocalStorage, storage_key: str):
        self.storage = storage
        self.storage_key = storage_key
        self._listeners: list[Listener] = []
        self._lock = asyncio.Lock()
        self._loading = 0
        self._snapshot: SnapshotT | None = None

    # ── Read contract ──

    @property
    def snapshot(self) -> SnapshotT:
        if self._snapshot is None:
            self._snapshot = self._build_snapshot()
        return self._snapshot

    @property
    def is_loading(self) -> bool:
        return self._loading > 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener called with the new snapshot after every change.

        :return: A callable that removes the listener; calling it twice is harmless
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        self._snapshot = self._build_snapshot()
        for listener in list(self._listeners):
            listener(self._snapshot)

    def _build_snapshot(self) -> SnapshotT:
        raise NotImplementedError

    # ── Loading flag ──

    def _begin_loading(self) -> None:
        self._loading += 1
        self._notify()

    def _end_loading(self) -> None:
        self._loading = max(self._loading - 1, 0)
        self._notify()

    # ── Persistence ──

    def _serialize(self) -> Any | None:
        """Return the JSON-ready value to persist, or None to remove the key."""
        raise NotImplementedError

    async def _persist(self) -> None:
        value = self._serialize()
        if value is None:
            await self.storage.remove_item(self.storage_key)
        else:
            await self.storage.set_item(self.storage_key, json.dumps(value))

    def _checkpoint(self) -> Any:
        """Capture the in-memory state a failed write rolls back to."""
        raise NotImplementedError

    def _rollback(self, checkpoint: Any) -> None:
        raise NotImplementedError

    async def _commit(self, checkpoint: Any) -> None:
        try:
            await self._persist()
        except (aiosqlite.Error, OSError) as e:
            logger.warning(f"Write to '{self.storage_key}' failed, rolling back: {e}")
            self._rollback(checkpoint)
            raise
        self._notify()

    async def _read_stored(self) -> Any | None:
        """
        Read and decode this store's blob at startup.

        Unreadable storage or undecodable JSON is logged and reported as None
        so the caller starts from its default state.
        """
        try:
            raw = await self.storage.get_item(self.storage_key)
        except (aiosqlite.Error, OSError) as e:
            logger.warning(f"Storage unavailable for '{self.storage_key}', using defaults: {e}")
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            logger.warning(f"Discarding corrupt '{self.storage_key}' entry: {e}")
            return None

    # ── Startup ──

    async def load(self) -> None:
        """Restore state from durable storage; isLoading is true for the duration."""
        self._begin_loading()
        try:
            self._restore(await self._read_stored())
        finally:
            self._end_loading()

    def _restore(self, stored: Any | None) -> None:
        raise NotImplementedError
