"""
Business logic for users.

Users are not exposed over HTTP; the service exists so that the
``users`` collection in the data file stays readable and writable (the
admin CLI uses it).  Passwords are stored exactly as supplied.
"""

import logging
import uuid
from typing import Any, Dict, Optional

from ..core.db import JSONStorage
from ..schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)


class UserService:
    """Persist and look up user records."""

    def __init__(self, storage: JSONStorage) -> None:
        self._storage = storage

    async def create_user(self, data: UserCreate) -> UserRead:
        """Create a new user.

        Raises ``ValueError`` if the username is already taken.
        """
        with self._storage.transaction() as document:
            users = document["users"]
            if any(user.get("username") == data.username for user in users):
                raise ValueError(f"Username '{data.username}' is already taken")
            record: Dict[str, Any] = {"id": str(uuid.uuid4()), **data.model_dump()}
            users.append(record)
            self._storage.write(document)
        logger.info("Created user %s", data.username)
        return UserRead(**record)

    async def get_user(self, user_id: str) -> Optional[UserRead]:
        for user in self._storage.read()["users"]:
            if user.get("id") == user_id:
                return UserRead(**user)
        return None

    async def get_user_by_username(self, username: str) -> Optional[UserRead]:
        for user in self._storage.read()["users"]:
            if user.get("username") == username:
                return UserRead(**user)
        return None
