"""
JSON User Directory - users exported from the profile system to a static file.

File format (Config.USER_DIRECTORY_FILE):

    {"users": [{"id": "stu-1", "name": "Ada Lovelace", "role": "student"}, ...]}

A bare top-level list is accepted as well. Loaded once; call reload() after
the export changes. Invalid entries (and any entry claiming the virtual admin
id) are skipped with a warning.
"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

from kvision_messaging.config.settings import Config
from kvision_messaging.domain.entities.user import User
from kvision_messaging.domain.exceptions import DomainValidationError
from kvision_messaging.domain.ports.repositories import UserDirectory
from kvision_messaging.domain.services.messaging_identity import ADMIN_VIRTUAL_USER_ID

logger = logging.getLogger(__name__)


class JsonUserDirectory(UserDirectory):
    def __init__(self, path: Optional[str] = None):
        self._path = Path(path or Config.USER_DIRECTORY_FILE)
        self._users: list[User] = []
        self.reload()

    def reload(self) -> None:
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning("User directory file %s not found, directory is empty", self._path)
            self._users = []
            return
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in user directory {self._path}: {e}") from e

        entries: Any = data.get("users", []) if isinstance(data, dict) else data
        users = []
        for entry in entries or []:
            try:
                user = User(id=entry["id"], name=entry["name"], role=entry["role"])
            except (KeyError, TypeError, DomainValidationError) as e:
                logger.warning("Skipping invalid user directory entry %r: %s", entry, e)
                continue
            if user.id == ADMIN_VIRTUAL_USER_ID:
                logger.warning("Ignoring directory entry for reserved id %s", user.id)
                continue
            users.append(user)

        self._users = users
        logger.info("Loaded %d users from %s", len(users), self._path)

    def list_users(self) -> list[User]:
        return list(self._users)
