"""FastAPI routers."""

from kvision_messaging.presentation.api.conversations import (
    router as conversations_router,
)
from kvision_messaging.presentation.api.contacts import router as contacts_router
from kvision_messaging.presentation.api.messages import router as messages_router

__all__ = ["conversations_router", "contacts_router", "messages_router"]
