from datetime import datetime, timezone
from typing import Callable, Optional

from account_service.core.exceptions import NotFoundError, PhoneAlreadyExists
from account_service.repositories.storage import UserStorage
from account_service.schemas.user_schema import FindAllUsersParams, User


class MemoryUserRepository(UserStorage):
    """In-process ``UserStorage`` for tests and local runs.

    Records are copied on the way in and out so callers never share state
    with the store.
    """

    def __init__(self):
        self._users: dict[int, User] = {}
        self._deleted: dict[int, datetime] = {}
        self._next_id = 1

    def _active(self) -> list[User]:
        return [u for uid, u in sorted(self._users.items()) if uid not in self._deleted]

    @staticmethod
    def _matches(user: User, params: FindAllUsersParams) -> bool:
        if params.id and user.id != params.id:
            return False
        if params.phone and user.phone != params.phone:
            return False
        if params.name and params.name.lower() not in user.name.lower():
            return False
        if params.token and user.token != params.token:
            return False
        return True

    def _find_one(self, predicate: Callable[[User], bool], op: str) -> User:
        for user in self._active():
            if predicate(user):
                return user.model_copy(deep=True)
        raise NotFoundError(path=f".MemoryUserRepository->{op}()")

    def _check_phone(self, user: User, op: str) -> None:
        for other in self._active():
            if other.phone == user.phone and other.id != user.id:
                raise PhoneAlreadyExists(path=f".MemoryUserRepository->{op}()")

    async def find_all(self, params: FindAllUsersParams) -> list[User]:
        users = [u for u in self._active() if self._matches(u, params)]
        if params.limit > 0:
            users = users[params.offset:params.offset + params.limit]
        return [u.model_copy(deep=True) for u in users]

    async def count(self, params: FindAllUsersParams) -> int:
        return sum(1 for u in self._active() if self._matches(u, params))

    async def find_by_id(self, user_id: int) -> User:
        return self._find_one(lambda u: u.id == user_id, "FindByID")

    async def find_by_phone(self, phone: str) -> User:
        return self._find_one(lambda u: u.phone == phone, "FindByPhone")

    async def find_by_token(self, token: str) -> User:
        return self._find_one(lambda u: u.token is not None and u.token == token, "FindByToken")

    async def insert(self, user: User) -> User:
        self._check_phone(user, "Insert")
        stored = user.model_copy(update={"id": self._next_id}, deep=True)
        self._users[stored.id] = stored
        self._next_id += 1
        return stored.model_copy(deep=True)

    async def update(self, user: User) -> User:
        if user.id not in self._users or user.id in self._deleted:
            raise NotFoundError(path=".MemoryUserRepository->Update()")
        self._check_phone(user, "Update")
        self._users[user.id] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    async def delete(self, user_id: int, deleted_at: Optional[datetime] = None) -> None:
        if user_id not in self._users or user_id in self._deleted:
            raise NotFoundError(path=".MemoryUserRepository->Delete()")
        self._deleted[user_id] = deleted_at or datetime.now(timezone.utc)
