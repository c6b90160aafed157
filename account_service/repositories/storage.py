from abc import ABC, abstractmethod

from account_service.schemas.user_schema import FindAllUsersParams, User


class UserStorage(ABC):
    """Persistence contract for user records.

    Lookups raise ``NotFoundError`` when nothing matches and ``StorageError``
    on any other failure. Soft-deleted users are invisible to every method.
    """

    @abstractmethod
    async def find_all(self, params: FindAllUsersParams) -> list[User]: ...

    @abstractmethod
    async def count(self, params: FindAllUsersParams) -> int: ...

    @abstractmethod
    async def find_by_id(self, user_id: int) -> User: ...

    @abstractmethod
    async def find_by_phone(self, phone: str) -> User: ...

    @abstractmethod
    async def find_by_token(self, token: str) -> User: ...

    @abstractmethod
    async def insert(self, user: User) -> User: ...

    @abstractmethod
    async def update(self, user: User) -> User: ...

    @abstractmethod
    async def delete(self, user_id: int) -> None: ...
