"""
Conversation Synchronizer - in-memory snapshot of the conversation store.

The store has no push/subscribe primitive, so the synchronizer polls it on a
fixed interval and replaces its whole snapshot with each fetch
(last-fetch-wins). Messages from the other party become visible within one
poll interval.

States:
    STALE  → nothing fetched yet
    SYNCED → last successful fetch held in memory

Poll vs. write ordering:
    Polls and writes share one asyncio.Lock. A write holds it for the whole
    apply → upsert → confirm cycle, so a poll can never land between an
    optimistic local update and its store write and "un-send" a message.

Optimistic updates:
    update() puts the new record into the snapshot before awaiting the
    upsert. If the upsert fails the previous record is restored and the
    error propagates to the caller.

Listeners:
    subscribe(callback) registers a callback (sync or async) that receives
    the full snapshot after every refresh and every confirmed write.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.exceptions import (
    ConversationStoreError,
    EntityNotFoundError,
)
from kvision_messaging.domain.ports.repositories import ConversationStore
from kvision_messaging.domain.value_objects.conversation_id import ConversationId

logger = logging.getLogger(__name__)

T = TypeVar("T")

SnapshotListener = Callable[[list[Conversation]], Union[None, Awaitable[None]]]


class SyncState(str, Enum):
    STALE = "stale"
    SYNCED = "synced"


class ConversationSynchronizer:
    def __init__(
        self,
        store: ConversationStore,
        poll_interval: Optional[float] = None,
    ):
        self._store = store
        if poll_interval is None:
            poll_interval = Config.MESSAGE_POLL_INTERVAL_SECONDS
        self._poll_interval = max(0.1, float(poll_interval))
        self._snapshot: dict[str, Conversation] = {}
        self._state = SyncState.STALE
        self._lock = asyncio.Lock()
        self._listeners: list[SnapshotListener] = []
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()
        self.last_synced_at: Optional[datetime] = None

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    # ==================== SNAPSHOT ====================

    def conversations(self) -> list[Conversation]:
        """Current snapshot. Callers must not mutate the returned records."""
        return list(self._snapshot.values())

    def get(self, conversation_id: ConversationId) -> Optional[Conversation]:
        return self._snapshot.get(conversation_id.value)

    async def refresh(self) -> list[Conversation]:
        """Fetch the full store and replace the snapshot (STALE/SYNCED → SYNCED)."""
        async with self._lock:
            conversations = await self._store.fetch_all()
            self._snapshot = {c.id.value: c for c in conversations}
            self._state = SyncState.SYNCED
            self.last_synced_at = datetime.now(timezone.utc)
            snapshot = self.conversations()

        logger.debug("Synchronized %d conversations", len(snapshot))
        await self._notify(snapshot)
        return snapshot

    async def ensure_synced(self) -> None:
        if self._state is SyncState.STALE:
            await self.refresh()

    # ==================== WRITES ====================

    async def update(
        self,
        conversation_id: ConversationId,
        change: Callable[[Conversation], T],
        create: Optional[Callable[[], Conversation]] = None,
    ) -> T:
        """
        Apply change to a copy of a conversation and write it back.

        Args:
            conversation_id: record to change
            change: mutates the draft in place; its return value is passed through
            create: builds a new empty record when none exists yet

        Returns:
            Whatever change returned

        Raises:
            EntityNotFoundError: no record and no create factory
            ConversationStoreError: the upsert failed (snapshot rolled back)

        An existing record whose messages come out unchanged is not written.
        """
        # Never build a write on top of an empty, never-fetched snapshot
        await self.ensure_synced()

        async with self._lock:
            key = conversation_id.value
            previous = self._snapshot.get(key)
            if previous is None:
                if create is None:
                    raise EntityNotFoundError(f"Conversation {key} not found")
                draft = create()
            else:
                draft = previous.copy()

            result = change(draft)
            if previous is not None and draft.messages == previous.messages:
                return result

            self._snapshot[key] = draft
            confirmed = False
            try:
                await self._store.upsert(draft)
                confirmed = True
            finally:
                if not confirmed:
                    if previous is None:
                        self._snapshot.pop(key, None)
                    else:
                        self._snapshot[key] = previous
                    logger.warning("Write of conversation %s failed, rolled back", key)
            snapshot = self.conversations()

        await self._notify(snapshot)
        return result

    # ==================== LISTENERS ====================

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a snapshot listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def _notify(self, snapshot: list[Conversation]) -> None:
        for listener in list(self._listeners):
            try:
                result: Any = listener(snapshot)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Conversation listener %r failed", listener)

    # ==================== POLLING ====================

    async def start(self) -> None:
        """Start the background poll loop."""
        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())
            logger.info(
                "Conversation polling started (every %.1fs)", self._poll_interval
            )

    async def stop(self) -> None:
        """Stop the background poll loop."""
        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None
        logger.info("Conversation polling stopped")

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                await self.refresh()
            except ConversationStoreError as e:
                # keep the last-known-good snapshot and try again next tick
                logger.warning("Conversation poll failed: %s", e)
            except (ValueError, TypeError, KeyError, AttributeError) as e:
                logger.error(
                    "Conversation poll hit a data processing error: %s", e, exc_info=True
                )

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._poll_interval)
            except asyncio.TimeoutError:
                pass
