from unittest.mock import AsyncMock

import pytest

from kvision_messaging.application.commands.messages import (
    SendMessageCommand,
    SendMessageHandler,
)
from kvision_messaging.application.services import ConversationSynchronizer
from kvision_messaging.domain.exceptions import (
    AttachmentRejectedError,
    ConversationStoreError,
    DomainValidationError,
)
from kvision_messaging.domain.ports.repositories import ConversationStore
from kvision_messaging.domain.services import ADMIN_VIRTUAL_USER_ID
from kvision_messaging.domain.value_objects import (
    FileContent,
    MessageStatus,
    TextContent,
    UploadedFile,
    conversation_id_for,
)


async def test_first_message_creates_conversation(send_handler, synchronizer, store):
    message = await send_handler.execute(
        SendMessageCommand(sender_id="tea-1", receiver_id="stu-1", content=TextContent("Hi"))
    )

    conversation = synchronizer.get(conversation_id_for("tea-1", "stu-1"))
    assert conversation.participants == ("tea-1", "stu-1")
    assert conversation.messages == [message]
    assert message.status is MessageStatus.SENT
    assert store.records["stu-1--tea-1"]["participants"] == ["tea-1", "stu-1"]


async def test_reply_appends_to_the_same_conversation(send_handler, synchronizer, store):
    await send_handler.execute(
        SendMessageCommand(sender_id="tea-1", receiver_id="stu-1", content=TextContent("Hi"))
    )
    reply = await send_handler.execute(
        SendMessageCommand(sender_id="stu-1", receiver_id="tea-1", content=TextContent("Hello"))
    )

    conversation = synchronizer.get(conversation_id_for("stu-1", "tea-1"))
    assert len(synchronizer.conversations()) == 1
    assert conversation.participants == ("tea-1", "stu-1")
    assert [m.content.value for m in conversation.messages] == ["Hi", "Hello"]
    assert conversation.last_message is reply
    assert len(store.records) == 1


async def test_admin_inbox_conversation_id(send_handler, synchronizer):
    await send_handler.execute(
        SendMessageCommand(
            sender_id="stu-1",
            receiver_id=ADMIN_VIRTUAL_USER_ID,
            content=TextContent("Help with my login"),
        )
    )

    conversation = synchronizer.conversations()[0]
    assert conversation.id.value == "kvision_admin_inbox--stu-1"
    assert conversation.unread_count_for(ADMIN_VIRTUAL_USER_ID) == 1


async def test_send_file_message(send_handler, synchronizer, pdf_content):
    message = await send_handler.execute(
        SendMessageCommand(sender_id="tea-1", receiver_id="stu-1", content=pdf_content)
    )

    assert message.content.type == "file"
    assert message.content.preview == "File attachment"
    assert synchronizer.conversations()[0].messages[0].content.value.name == "timetable.pdf"


@pytest.mark.parametrize(
    "sender_id, receiver_id",
    [("stu-1", "stu-1"), ("", "stu-1"), ("tea-1", "  ")],
)
async def test_invalid_participants_write_nothing(send_handler, store, sender_id, receiver_id):
    with pytest.raises(DomainValidationError):
        await send_handler.execute(
            SendMessageCommand(
                sender_id=sender_id, receiver_id=receiver_id, content=TextContent("Hi")
            )
        )

    assert store.upsert_count == 0


async def test_rejected_attachment_writes_nothing(send_handler, store):
    too_big = FileContent(
        UploadedFile(
            name="video.png",
            type="image/png",
            size=6 * 1024 * 1024,
            data_url="https://files.example.com/video.png",
        )
    )

    with pytest.raises(AttachmentRejectedError):
        await send_handler.execute(
            SendMessageCommand(sender_id="tea-1", receiver_id="stu-1", content=too_big)
        )

    assert store.upsert_count == 0
    assert store.records == {}


async def test_store_failure_propagates_and_rolls_back(attachment_policy):
    store = AsyncMock(spec=ConversationStore)
    store.fetch_all.return_value = []
    store.upsert.side_effect = ConversationStoreError("503 from store")
    synchronizer = ConversationSynchronizer(store, poll_interval=1)
    handler = SendMessageHandler(synchronizer, attachment_policy)

    with pytest.raises(ConversationStoreError):
        await handler.execute(
            SendMessageCommand(sender_id="tea-1", receiver_id="stu-1", content=TextContent("Hi"))
        )

    assert synchronizer.conversations() == []


async def test_record_ceiling_rejects_send(synchronizer, attachment_policy, store):
    handler = SendMessageHandler(synchronizer, attachment_policy, max_record_bytes=10)
    await handler.execute(
        SendMessageCommand(sender_id="tea-1", receiver_id="stu-1", content=TextContent("short"))
    )

    with pytest.raises(DomainValidationError, match="Conversation is full"):
        await handler.execute(
            SendMessageCommand(
                sender_id="tea-1", receiver_id="stu-1", content=TextContent("too long now")
            )
        )

    assert len(synchronizer.conversations()[0].messages) == 1
    assert store.upsert_count == 1
