import asyncio
from unittest.mock import AsyncMock

import pytest

from kvision_messaging.application.services import ConversationSynchronizer, SyncState
from kvision_messaging.domain.entities import Conversation
from kvision_messaging.domain.exceptions import (
    ConversationStoreError,
    EntityNotFoundError,
)
from kvision_messaging.domain.ports.repositories import ConversationStore
from kvision_messaging.infrastructure.persistence import InMemoryConversationStore


def _append(message):
    def change(draft):
        draft.append(message)
        return message

    return change


class GatedStore(InMemoryConversationStore):
    """Holds every upsert until the gate is opened."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()
        self.upsert_started = asyncio.Event()

    async def upsert(self, conversation):
        self.upsert_started.set()
        await self.gate.wait()
        await super().upsert(conversation)


async def test_refresh_replaces_snapshot(store, synchronizer, make_message):
    assert synchronizer.state is SyncState.STALE

    conversation = Conversation.start("tea-1", "stu-1")
    conversation.append(make_message("tea-1", "stu-1"))
    await store.upsert(conversation)

    snapshot = await synchronizer.refresh()

    assert synchronizer.state is SyncState.SYNCED
    assert [c.id.value for c in snapshot] == ["stu-1--tea-1"]
    assert synchronizer.last_synced_at is not None

    store.records.clear()
    assert await synchronizer.refresh() == []


async def test_update_creates_missing_record_and_writes_it(store, synchronizer, make_message):
    message = make_message("tea-1", "stu-1")
    conversation = Conversation.start("tea-1", "stu-1")

    result = await synchronizer.update(
        conversation.id, _append(message), create=lambda: Conversation.start("tea-1", "stu-1")
    )

    assert result is message
    assert synchronizer.get(conversation.id).messages == [message]
    assert store.records["stu-1--tea-1"]["messages"][0]["id"] == message.id.value


async def test_update_without_create_raises_for_missing_record(synchronizer):
    conversation = Conversation.start("tea-1", "stu-1")
    with pytest.raises(EntityNotFoundError):
        await synchronizer.update(conversation.id, lambda draft: None)


async def test_unchanged_record_is_not_written(store, synchronizer, make_message):
    conversation = Conversation.start("tea-1", "stu-1")
    conversation.append(make_message("tea-1", "stu-1"))
    await store.upsert(conversation)
    writes_before = store.upsert_count

    await synchronizer.update(conversation.id, lambda draft: draft.mark_read_for("tea-1"))

    assert store.upsert_count == writes_before


async def test_failed_write_rolls_back_optimistic_update(make_message):
    existing = Conversation.start("tea-1", "stu-1")
    existing.append(make_message("tea-1", "stu-1", minutes=1))
    store = AsyncMock(spec=ConversationStore)
    store.fetch_all.return_value = [existing]
    store.upsert.side_effect = ConversationStoreError("connection reset")
    synchronizer = ConversationSynchronizer(store, poll_interval=1)

    with pytest.raises(ConversationStoreError):
        await synchronizer.update(
            existing.id, _append(make_message("stu-1", "tea-1", minutes=2))
        )

    assert synchronizer.get(existing.id) is existing
    assert len(synchronizer.get(existing.id).messages) == 1


async def test_failed_first_write_leaves_no_record(make_message):
    store = AsyncMock(spec=ConversationStore)
    store.fetch_all.return_value = []
    store.upsert.side_effect = ConversationStoreError("timeout")
    synchronizer = ConversationSynchronizer(store, poll_interval=1)
    conversation = Conversation.start("tea-1", "stu-1")

    with pytest.raises(ConversationStoreError):
        await synchronizer.update(
            conversation.id,
            _append(make_message("tea-1", "stu-1")),
            create=lambda: Conversation.start("tea-1", "stu-1"),
        )

    assert synchronizer.get(conversation.id) is None


async def test_poll_waits_for_pending_write(make_message):
    store = GatedStore()
    synchronizer = ConversationSynchronizer(store, poll_interval=60)
    await synchronizer.refresh()
    message = make_message("tea-1", "stu-1")
    conversation = Conversation.start("tea-1", "stu-1")

    write = asyncio.create_task(
        synchronizer.update(
            conversation.id,
            _append(message),
            create=lambda: Conversation.start("tea-1", "stu-1"),
        )
    )
    await store.upsert_started.wait()
    poll = asyncio.create_task(synchronizer.refresh())
    for _ in range(5):
        await asyncio.sleep(0)

    assert not poll.done()
    assert synchronizer.get(conversation.id).messages == [message]

    store.gate.set()
    await write
    snapshot = await poll

    assert [m.id for m in snapshot[0].messages] == [message.id]


async def test_listeners_receive_snapshots_until_unsubscribed(synchronizer, make_message):
    received = []

    async def on_snapshot(snapshot):
        received.append(len(snapshot))

    unsubscribe = synchronizer.subscribe(on_snapshot)
    await synchronizer.refresh()
    await synchronizer.update(
        Conversation.start("tea-1", "stu-1").id,
        _append(make_message("tea-1", "stu-1")),
        create=lambda: Conversation.start("tea-1", "stu-1"),
    )
    unsubscribe()
    await synchronizer.refresh()

    assert received == [0, 1]


async def test_failing_listener_does_not_break_refresh(synchronizer):
    def broken(snapshot):
        raise RuntimeError("boom")

    calls = []
    synchronizer.subscribe(broken)
    synchronizer.subscribe(calls.append)

    await synchronizer.refresh()

    assert calls == [[]]
    assert synchronizer.state is SyncState.SYNCED


async def test_poll_loop_survives_store_failures(make_message):
    conversation = Conversation.start("tea-1", "stu-1")
    conversation.append(make_message("tea-1", "stu-1"))
    store = AsyncMock(spec=ConversationStore)
    store.fetch_all.side_effect = [
        [conversation],
        ConversationStoreError("unreachable"),
        [conversation],
    ] + [[conversation]] * 100
    synchronizer = ConversationSynchronizer(store, poll_interval=0.1)

    await synchronizer.start()
    assert synchronizer.is_running
    await asyncio.sleep(0.35)
    await synchronizer.stop()

    assert not synchronizer.is_running
    assert store.fetch_all.await_count >= 3
    assert synchronizer.get(conversation.id) is not None
    assert synchronizer.state is SyncState.SYNCED


async def test_refresh_skips_record_with_numeric_timestamp():
    store = InMemoryConversationStore(
        [
            {
                "id": "stu-1--tea-1",
                "participants": ["stu-1", "tea-1"],
                "messages": [
                    {
                        "id": "msg-1",
                        "senderId": "stu-1",
                        "receiverId": "tea-1",
                        "timestamp": 1735725600000,
                        "status": "sent",
                        "content": {"type": "text", "value": "hi"},
                    }
                ],
            }
        ]
    )
    synchronizer = ConversationSynchronizer(store, poll_interval=0.1)

    await synchronizer.refresh()

    assert synchronizer.conversations() == []
    assert synchronizer.state is SyncState.SYNCED


async def test_poll_loop_keeps_running_after_null_content_lands(store, make_message):
    conversation = Conversation.start("tea-1", "stu-1")
    conversation.append(make_message("tea-1", "stu-1"))
    await store.upsert(conversation)
    synchronizer = ConversationSynchronizer(store, poll_interval=0.05)

    await synchronizer.start()
    await asyncio.sleep(0.1)
    store.records["stu-1--tea-1"]["messages"][0]["content"] = None
    await asyncio.sleep(0.15)

    assert synchronizer.is_running
    assert synchronizer.conversations() == []

    healthy = Conversation.start("tea-1", "stu-2")
    healthy.append(make_message("tea-1", "stu-2"))
    await store.upsert(healthy)
    await asyncio.sleep(0.15)
    await synchronizer.stop()

    assert [c.id.value for c in synchronizer.conversations()] == ["stu-2--tea-1"]


async def test_poll_loop_survives_unexpected_data_errors():
    store = AsyncMock(spec=ConversationStore)
    store.fetch_all.side_effect = [AttributeError("boom")] + [[]] * 100
    synchronizer = ConversationSynchronizer(store, poll_interval=0.05)

    await synchronizer.start()
    await asyncio.sleep(0.2)

    assert synchronizer.is_running
    await synchronizer.stop()
    assert store.fetch_all.await_count >= 2
