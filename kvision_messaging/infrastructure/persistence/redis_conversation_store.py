"""
Redis Conversation Store - one hash holds every conversation record.

Redis Data Structure (HASH):
- Key: Config.REDIS_CONVERSATIONS_KEY (default "kvision:conversations")
- Field: conversation id ("a--b")
- Value: JSON string of the full record (record_codec)

Redis Commands Used:
- HVALS: full snapshot for the poll loop
- HSET: create-or-replace one record (upsert)
"""

import json
import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.exceptions import ConversationStoreError
from kvision_messaging.domain.ports.repositories import ConversationStore
from kvision_messaging.infrastructure.persistence.record_codec import (
    conversation_to_record,
    decode_records,
)

logger = logging.getLogger(__name__)


class RedisConversationStore(ConversationStore):
    def __init__(self, redis: Redis, key: Optional[str] = None):
        self._redis = redis
        self._key = key or Config.REDIS_CONVERSATIONS_KEY

    async def fetch_all(self) -> list[Conversation]:
        try:
            raw_records = await self._redis.hvals(self._key)
        except RedisError as e:
            raise ConversationStoreError(f"Redis read failed: {e}") from e

        records = []
        for raw in raw_records:
            try:
                records.append(json.loads(raw))
            except json.JSONDecodeError as e:
                logger.warning("Skipping undecodable record in %s: %s", self._key, e)
        return decode_records(records)

    async def upsert(self, conversation: Conversation) -> None:
        payload = json.dumps(conversation_to_record(conversation))
        try:
            await self._redis.hset(self._key, conversation.id.value, payload)
        except RedisError as e:
            raise ConversationStoreError(
                f"Redis write of {conversation.id.value} failed: {e}"
            ) from e
        logger.debug("Stored conversation %s (%d bytes)", conversation.id, len(payload))
