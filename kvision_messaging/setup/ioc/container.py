"""
Dishka DI Container Setup.

- AppProvider: synchronizer, attachment policy, user directory (APP scope)
  and every command/query handler (REQUEST scope)
- one store provider per STORE_BACKEND, each registering ConversationStore
  and owning its client's lifecycle (created on first use, closed with the
  container)

Dishka concepts:
- Provider: Class that defines how to create dependencies
- @provide: Decorator to mark factory methods
- Scope: Lifecycle of dependency (APP = singleton, REQUEST = per-request)
- Later providers override earlier ones for the same type (used by tests)

Flow:
  Container → ConversationStore → ConversationSynchronizer → SendMessageHandler
                                                           → queries, ...
"""

from typing import AsyncIterator

import httpx
from dishka import AsyncContainer, Provider, Scope, make_async_container, provide
from redis.asyncio import Redis

from kvision_messaging.application.commands.conversations import (
    MarkConversationReadHandler,
)
from kvision_messaging.application.commands.messages import (
    BroadcastMessageHandler,
    DeleteMessageHandler,
    SendMessageHandler,
)
from kvision_messaging.application.queries.conversations import (
    GetConversationHandler,
    ListContactsHandler,
    ListConversationsHandler,
)
from kvision_messaging.application.services import (
    AttachmentPolicy,
    ConversationSynchronizer,
)
from kvision_messaging.config.settings import Config, get_config
from kvision_messaging.domain.ports.repositories import (
    ConversationStore,
    UserDirectory,
)
from kvision_messaging.infrastructure.directory import JsonUserDirectory
from kvision_messaging.infrastructure.persistence import (
    InMemoryConversationStore,
    RedisConversationStore,
    SupabaseConversationStore,
)
from kvision_messaging.infrastructure.persistence.redis_client import (
    close_redis_client,
    create_redis_client,
)
from kvision_messaging.infrastructure.persistence.supabase_conversation_store import (
    create_supabase_client,
)


class AppProvider(Provider):
    """
    Application dependency provider.

    Registers everything except the ConversationStore implementation.
    """

    # ==================== SERVICES ====================

    @provide(scope=Scope.APP)
    def get_user_directory(self) -> UserDirectory:
        return JsonUserDirectory(Config.USER_DIRECTORY_FILE)

    @provide(scope=Scope.APP)
    def get_attachment_policy(self) -> AttachmentPolicy:
        return AttachmentPolicy.from_config()

    @provide(scope=Scope.APP)
    def get_synchronizer(self, store: ConversationStore) -> ConversationSynchronizer:
        """
        One synchronizer (and so one snapshot and one lock) per process.

        The poll loop itself is started by the app lifespan.
        """
        return ConversationSynchronizer(
            store, poll_interval=Config.MESSAGE_POLL_INTERVAL_SECONDS
        )

    # ==================== COMMAND HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_send_message_handler(
        self,
        synchronizer: ConversationSynchronizer,
        attachment_policy: AttachmentPolicy,
    ) -> SendMessageHandler:
        return SendMessageHandler(synchronizer, attachment_policy)

    @provide(scope=Scope.REQUEST)
    def get_delete_message_handler(
        self, synchronizer: ConversationSynchronizer
    ) -> DeleteMessageHandler:
        return DeleteMessageHandler(synchronizer)

    @provide(scope=Scope.REQUEST)
    def get_mark_read_handler(
        self, synchronizer: ConversationSynchronizer
    ) -> MarkConversationReadHandler:
        return MarkConversationReadHandler(synchronizer)

    @provide(scope=Scope.REQUEST)
    def get_broadcast_handler(
        self,
        user_directory: UserDirectory,
        send_message_handler: SendMessageHandler,
    ) -> BroadcastMessageHandler:
        return BroadcastMessageHandler(user_directory, send_message_handler)

    # ==================== QUERY HANDLERS ====================

    @provide(scope=Scope.REQUEST)
    def get_list_conversations_handler(
        self,
        synchronizer: ConversationSynchronizer,
        user_directory: UserDirectory,
    ) -> ListConversationsHandler:
        return ListConversationsHandler(synchronizer, user_directory)

    @provide(scope=Scope.REQUEST)
    def get_get_conversation_handler(
        self,
        synchronizer: ConversationSynchronizer,
        user_directory: UserDirectory,
    ) -> GetConversationHandler:
        return GetConversationHandler(synchronizer, user_directory)

    @provide(scope=Scope.REQUEST)
    def get_list_contacts_handler(
        self,
        synchronizer: ConversationSynchronizer,
        user_directory: UserDirectory,
    ) -> ListContactsHandler:
        return ListContactsHandler(synchronizer, user_directory)


# ==================== STORE BACKENDS ====================


class RedisStoreProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_redis(self) -> AsyncIterator[Redis]:
        """
        Provide Redis client (singleton, app-scoped).

        - connected (ping) on first use
        - closed when the container closes
        """
        client = await create_redis_client()
        yield client
        await close_redis_client(client)

    @provide(scope=Scope.APP)
    def get_conversation_store(self, redis: Redis) -> ConversationStore:
        return RedisConversationStore(redis, Config.REDIS_CONVERSATIONS_KEY)


class SupabaseStoreProvider(Provider):
    @provide(scope=Scope.APP)
    async def get_http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        client = create_supabase_client()
        yield client
        await client.aclose()

    @provide(scope=Scope.APP)
    def get_conversation_store(self, client: httpx.AsyncClient) -> ConversationStore:
        return SupabaseConversationStore(client, Config.SUPABASE_CONVERSATIONS_TABLE)


class MemoryStoreProvider(Provider):
    @provide(scope=Scope.APP)
    def get_conversation_store(self) -> ConversationStore:
        return InMemoryConversationStore()


_STORE_PROVIDERS = {
    "redis": RedisStoreProvider,
    "supabase": SupabaseStoreProvider,
    "memory": MemoryStoreProvider,
}


def store_provider_for(backend: str) -> Provider:
    try:
        return _STORE_PROVIDERS[backend]()
    except KeyError:
        raise ValueError(
            f"Unknown STORE_BACKEND {backend!r}. Must be one of {sorted(_STORE_PROVIDERS)}."
        ) from None


def create_container(*overrides: Provider) -> AsyncContainer:
    """
    Create and configure the DI container.

    - Call this ONCE at app startup
    - the store backend follows APP_ENV (testing always uses memory)
    - overrides are registered last and replace earlier registrations
    """
    backend = get_config().STORE_BACKEND
    return make_async_container(AppProvider(), store_provider_for(backend), *overrides)
