import asyncio
import uuid
from abc import ABC, abstractmethod
from typing import Dict, Optional

from medpal.core.exceptions import DuplicateUserError
from medpal.schemas.user import UserInDBCreate, UserRecord


class UserStore(ABC):
    """Persistence boundary for user records.

    Implementations raise ``StoreError`` for backend failures (connection
    loss, timeouts); the services let it propagate unchanged.
    """

    @abstractmethod
    async def find_user_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def create_user(self, obj_in: UserInDBCreate) -> UserRecord:
        ...


class InMemoryUserStore(UserStore):
    """Process-local store for development and tests."""

    def __init__(self) -> None:
        self._users: Dict[str, UserRecord] = {}
        self._lock = asyncio.Lock()

    @staticmethod
    def _key(email: str) -> str:
        return email.strip().lower()

    async def find_user_by_email(self, email: str) -> Optional[UserRecord]:
        return self._users.get(self._key(email))

    async def create_user(self, obj_in: UserInDBCreate) -> UserRecord:
        async with self._lock:
            key = self._key(obj_in.email)
            if key in self._users:
                raise DuplicateUserError()
            db_obj = UserRecord(id=str(uuid.uuid4()), **obj_in.model_dump())
            self._users[key] = db_obj
            return db_obj

    def __len__(self) -> int:
        return len(self._users)
