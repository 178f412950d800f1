import json
from unittest.mock import AsyncMock

import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from kvision_messaging.domain.entities import Conversation
from kvision_messaging.domain.exceptions import ConversationStoreError
from kvision_messaging.domain.services import ADMIN_VIRTUAL_USER_ID
from kvision_messaging.infrastructure.directory import JsonUserDirectory
from kvision_messaging.infrastructure.persistence import (
    InMemoryConversationStore,
    RedisConversationStore,
    SupabaseConversationStore,
)
from kvision_messaging.infrastructure.persistence.record_codec import (
    conversation_to_record,
)


@pytest.fixture()
def conversation(make_message):
    conversation = Conversation.start("tea-1", "stu-1")
    conversation.append(make_message("tea-1", "stu-1", "Hi"))
    return conversation


# ==================== REDIS ====================


async def test_redis_store_upserts_into_hash(conversation):
    redis = AsyncMock()
    store = RedisConversationStore(redis, key="test:conversations")

    await store.upsert(conversation)

    redis.hset.assert_awaited_once()
    key, field, payload = redis.hset.await_args.args
    assert (key, field) == ("test:conversations", "stu-1--tea-1")
    assert json.loads(payload) == conversation_to_record(conversation)


async def test_redis_store_fetches_all_records(conversation):
    redis = AsyncMock()
    redis.hvals.return_value = [
        json.dumps(conversation_to_record(conversation)),
        "{not json",
    ]
    store = RedisConversationStore(redis, key="test:conversations")

    conversations = await store.fetch_all()

    redis.hvals.assert_awaited_once_with("test:conversations")
    assert [c.id.value for c in conversations] == ["stu-1--tea-1"]
    assert conversations[0].messages == conversation.messages


async def test_redis_errors_become_store_errors(conversation):
    redis = AsyncMock()
    redis.hvals.side_effect = RedisConnectionError("refused")
    redis.hset.side_effect = RedisConnectionError("refused")
    store = RedisConversationStore(redis)

    with pytest.raises(ConversationStoreError) as exc_info:
        await store.fetch_all()
    assert isinstance(exc_info.value.__cause__, RedisConnectionError)

    with pytest.raises(ConversationStoreError):
        await store.upsert(conversation)


# ==================== SUPABASE ====================


def _supabase_client(handler):
    return httpx.AsyncClient(
        base_url="https://project.supabase.co",
        transport=httpx.MockTransport(handler),
    )


async def test_supabase_store_reads_table(conversation):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/conversations"
        assert request.url.params["select"] == "*"
        return httpx.Response(200, json=[conversation_to_record(conversation)])

    async with _supabase_client(handler) as client:
        conversations = await SupabaseConversationStore(client, "conversations").fetch_all()

    assert [c.id.value for c in conversations] == ["stu-1--tea-1"]


async def test_supabase_store_upserts_with_merge_duplicates(conversation):
    requests = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(201)

    async with _supabase_client(handler) as client:
        await SupabaseConversationStore(client, "conversations").upsert(conversation)

    [request] = requests
    assert request.method == "POST"
    assert request.url.params["on_conflict"] == "id"
    assert "resolution=merge-duplicates" in request.headers["Prefer"]
    assert json.loads(request.content) == conversation_to_record(conversation)


async def test_supabase_http_errors_become_store_errors(conversation):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, json={"message": "unavailable"})

    async with _supabase_client(handler) as client:
        store = SupabaseConversationStore(client, "conversations")
        with pytest.raises(ConversationStoreError):
            await store.fetch_all()
        with pytest.raises(ConversationStoreError):
            await store.upsert(conversation)


# ==================== IN-MEMORY ====================


async def test_memory_store_does_not_share_state(conversation, make_message):
    store = InMemoryConversationStore()
    await store.upsert(conversation)

    conversation.append(make_message("stu-1", "tea-1", "not stored", minutes=1))
    [fetched] = await store.fetch_all()
    fetched.messages.clear()

    [again] = await store.fetch_all()
    assert len(again.messages) == 1


# ==================== USER DIRECTORY ====================


def test_json_directory_loads_valid_users(tmp_path):
    path = tmp_path / "users.json"
    path.write_text(
        json.dumps(
            {
                "users": [
                    {"id": "tea-1", "name": "Alan Turing", "role": "teacher"},
                    {"id": "stu-1", "name": "Ada Lovelace", "role": "student"},
                    {"id": "x-1", "name": "Nobody", "role": "janitor"},
                    {"name": "No id", "role": "student"},
                    {"id": ADMIN_VIRTUAL_USER_ID, "name": "Fake", "role": "admin"},
                ]
            }
        ),
        encoding="utf-8",
    )

    directory = JsonUserDirectory(str(path))

    assert [u.id for u in directory.list_users()] == ["tea-1", "stu-1"]
    assert directory.get("stu-1").name == "Ada Lovelace"
    assert directory.get("missing") is None


def test_json_directory_missing_file_is_empty(tmp_path):
    directory = JsonUserDirectory(str(tmp_path / "absent.json"))

    assert directory.list_users() == []


def test_json_directory_rejects_invalid_json(tmp_path):
    path = tmp_path / "users.json"
    path.write_text("{oops", encoding="utf-8")

    with pytest.raises(ValueError, match="Invalid JSON"):
        JsonUserDirectory(str(path))
