import time
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from dishka import Provider, Scope, provide
from fastapi.testclient import TestClient

from kvision_messaging.application.commands.conversations import (
    MarkConversationReadHandler,
)
from kvision_messaging.application.commands.messages import (
    BroadcastMessageHandler,
    DeleteMessageHandler,
    SendMessageHandler,
)
from kvision_messaging.application.services import (
    AttachmentPolicy,
    ConversationSynchronizer,
)
from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities import Message, User, UserRole
from kvision_messaging.domain.ports.repositories import (
    ConversationStore,
    UserDirectory,
)
from kvision_messaging.domain.value_objects import (
    FileContent,
    MessageId,
    MessageStatus,
    TextContent,
    UploadedFile,
)
from kvision_messaging.fastapi_app import create_fastapi_app
from kvision_messaging.infrastructure.directory import InMemoryUserDirectory
from kvision_messaging.infrastructure.persistence import InMemoryConversationStore
from kvision_messaging.presentation.api.rate_limit import limiter
from kvision_messaging.setup.ioc import create_container

SERVICE_AUTH_SECRET = "test-secret"
BASE_TIME = datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)

ADMIN = User(id="adm-1", name="Grace Hopper", role=UserRole.ADMIN)
SECOND_ADMIN = User(id="adm-2", name="Margaret Hamilton", role=UserRole.ADMIN)
TEACHER = User(id="tea-1", name="Alan Turing", role=UserRole.TEACHER)
SECOND_TEACHER = User(id="tea-2", name="Barbara Liskov", role=UserRole.TEACHER)
STUDENT = User(id="stu-1", name="Ada Lovelace", role=UserRole.STUDENT)
SECOND_STUDENT = User(id="stu-2", name="Edsger Dijkstra", role=UserRole.STUDENT)
THIRD_STUDENT = User(id="stu-3", name="Katherine Johnson", role=UserRole.STUDENT)

USERS = [
    ADMIN,
    SECOND_ADMIN,
    TEACHER,
    SECOND_TEACHER,
    STUDENT,
    SECOND_STUDENT,
    THIRD_STUDENT,
]


# ==================== DOMAIN HELPERS ====================


@pytest.fixture()
def make_message():
    """Build a Message with a fixed id and a timestamp offset from BASE_TIME."""

    def _make(
        sender_id,
        receiver_id,
        text="hello",
        minutes=0,
        status=MessageStatus.SENT,
        message_id=None,
    ):
        return Message(
            id=MessageId(message_id or f"msg-{sender_id}-{receiver_id}-{minutes}"),
            sender_id=sender_id,
            receiver_id=receiver_id,
            timestamp=BASE_TIME + timedelta(minutes=minutes),
            content=TextContent(text),
            status=status,
        )

    return _make


@pytest.fixture()
def pdf_content():
    return FileContent(
        UploadedFile(
            name="timetable.pdf",
            type="application/pdf",
            size=5,
            data_url="data:application/pdf;base64,aGVsbG8=",
        )
    )


# ==================== APPLICATION FIXTURES ====================


@pytest.fixture()
def users():
    return list(USERS)


@pytest.fixture()
def user_directory(users):
    return InMemoryUserDirectory(users)


@pytest.fixture()
def store():
    return InMemoryConversationStore()


@pytest.fixture()
def synchronizer(store):
    return ConversationSynchronizer(store, poll_interval=0.1)


@pytest.fixture()
def attachment_policy():
    return AttachmentPolicy(
        max_bytes=5 * 1024 * 1024,
        allowed_types=["image/*", "application/pdf", "text/plain"],
    )


@pytest.fixture()
def send_handler(synchronizer, attachment_policy):
    return SendMessageHandler(synchronizer, attachment_policy)


@pytest.fixture()
def delete_handler(synchronizer):
    return DeleteMessageHandler(synchronizer)


@pytest.fixture()
def mark_read_handler(synchronizer):
    return MarkConversationReadHandler(synchronizer)


@pytest.fixture()
def broadcast_handler(user_directory, send_handler):
    return BroadcastMessageHandler(user_directory, send_handler)


# ==================== API FIXTURES ====================


class InMemoryTestProvider(Provider):
    """Replaces the configured store and directory with in-memory ones."""

    def __init__(self, store: ConversationStore, user_directory: UserDirectory):
        super().__init__()
        self._store = store
        self._user_directory = user_directory

    @provide(scope=Scope.APP)
    def get_conversation_store(self) -> ConversationStore:
        return self._store

    @provide(scope=Scope.APP)
    def get_user_directory(self) -> UserDirectory:
        return self._user_directory


def _service_token(user, secret=SERVICE_AUTH_SECRET, expires_in=300):
    now = int(time.time())
    return jwt.encode(
        {
            "sub": user.id,
            "name": user.name,
            "role": user.role.value,
            "iat": now,
            "exp": now + expires_in,
            "iss": Config.SERVICE_AUTH_ISSUER,
            "aud": Config.SERVICE_AUTH_AUDIENCE,
        },
        secret,
        algorithm="HS256",
    )


@pytest.fixture()
def app(store, user_directory, monkeypatch):
    """Create and configure a new FastAPI app instance for each test."""
    monkeypatch.setattr(Config, "SERVICE_AUTH_SECRET", SERVICE_AUTH_SECRET)
    limiter.reset()
    container = create_container(InMemoryTestProvider(store, user_directory))
    return create_fastapi_app(container)


@pytest.fixture()
def client(app):
    """A test client for the FastAPI app (runs startup/shutdown)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def auth_headers():
    """Authentication headers with a valid service token for the given user."""

    def _headers(user, **token_options):
        return {"Authorization": f"Bearer {_service_token(user, **token_options)}"}

    return _headers
