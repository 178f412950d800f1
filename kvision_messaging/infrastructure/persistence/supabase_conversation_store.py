"""
Supabase Conversation Store - the `conversations` table over PostgREST.

- fetch_all: GET  /rest/v1/conversations?select=*
- upsert:    POST /rest/v1/conversations?on_conflict=id
             Prefer: resolution=merge-duplicates  (insert or replace by id)

Table columns: id (text, primary key), participants (jsonb), messages (jsonb).
"""

import logging

import httpx

from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.conversation import Conversation
from kvision_messaging.domain.exceptions import ConversationStoreError
from kvision_messaging.domain.ports.repositories import ConversationStore
from kvision_messaging.infrastructure.persistence.record_codec import (
    conversation_to_record,
    decode_records,
)

logger = logging.getLogger(__name__)


def create_supabase_client() -> httpx.AsyncClient:
    """Create an async PostgREST client authenticated with the service key."""
    if not Config.SUPABASE_URL or not Config.SUPABASE_KEY:
        raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set for STORE_BACKEND=supabase")
    return httpx.AsyncClient(
        base_url=Config.SUPABASE_URL.rstrip("/"),
        headers={
            "apikey": Config.SUPABASE_KEY,
            "Authorization": f"Bearer {Config.SUPABASE_KEY}",
        },
        timeout=httpx.Timeout(Config.SUPABASE_TIMEOUT_SECONDS),
    )


class SupabaseConversationStore(ConversationStore):
    def __init__(self, client: httpx.AsyncClient, table: str | None = None):
        self._client = client
        self._path = f"/rest/v1/{table or Config.SUPABASE_CONVERSATIONS_TABLE}"

    async def fetch_all(self) -> list[Conversation]:
        try:
            response = await self._client.get(self._path, params={"select": "*"})
            response.raise_for_status()
            records = response.json()
        except httpx.HTTPError as e:
            raise ConversationStoreError(f"Supabase read failed: {e}") from e
        except ValueError as e:
            raise ConversationStoreError(f"Supabase returned invalid JSON: {e}") from e

        if not isinstance(records, list):
            raise ConversationStoreError("Supabase returned an unexpected payload")
        return decode_records(records)

    async def upsert(self, conversation: Conversation) -> None:
        try:
            response = await self._client.post(
                self._path,
                params={"on_conflict": "id"},
                json=conversation_to_record(conversation),
                headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ConversationStoreError(
                f"Supabase write of {conversation.id.value} failed: {e}"
            ) from e
        logger.debug("Stored conversation %s", conversation.id)
