import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from account_service.core.exceptions import AccountServiceError, PhoneAlreadyExists, WrongPassword, WrongPhone
from account_service.core.security import PasswordHasher, TokenManager
from account_service.repositories.storage import UserStorage
from account_service.schemas.auth_schema import LoginResponse
from account_service.schemas.user_schema import FindAllUsersParams, User, UserCreate

logger = logging.getLogger(__name__)


class AccountServiceInterface(ABC):

    @abstractmethod
    async def list_users(self, params: FindAllUsersParams) -> tuple[list[User], int]: ...

    @abstractmethod
    async def get_user(self, user_id: int) -> User: ...

    @abstractmethod
    async def create_user(self, params: UserCreate) -> User: ...

    @abstractmethod
    async def login(self, phone: str, password: str) -> LoginResponse: ...

    @abstractmethod
    async def get_by_token(self, token: str) -> User: ...

    @abstractmethod
    async def verify_token_jwt(self, token_string: str) -> dict: ...


class AccountService(AccountServiceInterface):
    """Registration, login and session-token checks over a ``UserStorage``.

    Every storage or crypto error is re-raised with this layer's frame
    prepended to its ``path``.
    """

    def __init__(self, user_repo: UserStorage, hasher: PasswordHasher, tokens: TokenManager):
        self.user_repo = user_repo
        self.hasher = hasher
        self.tokens = tokens

    async def list_users(self, params: FindAllUsersParams) -> tuple[list[User], int]:
        try:
            users = await self.user_repo.find_all(params)
            total = await self.user_repo.count(params)
        except AccountServiceError as err:
            err.prepend_path(".AccountService->ListUsers()")
            raise
        return users, total

    async def get_user(self, user_id: int) -> User:
        try:
            return await self.user_repo.find_by_id(user_id)
        except AccountServiceError as err:
            err.prepend_path(".AccountService->GetUser()")
            raise

    async def create_user(self, params: UserCreate) -> User:
        frame = ".AccountService->CreateUser()"
        try:
            existing, _ = await self.list_users(FindAllUsersParams(phone=params.phone))
            if existing:
                raise PhoneAlreadyExists()

            hashed_password = await self.hasher.hash(params.password)
            now = datetime.now(timezone.utc)
            user = User(
                role_id=params.role_id,
                name=params.name,
                phone=params.phone,
                password=hashed_password,
                token=None,
                token_expired_at=None,
                created_at=now,
                updated_at=now,
            )
            user = await self.user_repo.insert(user)
        except AccountServiceError as err:
            err.prepend_path(frame)
            raise

        logger.info("Registered user id=%s phone=%s", user.id, user.phone)
        # The caller gets back the password it submitted, not the stored hash.
        return user.model_copy(update={"password": params.password})

    async def login(self, phone: str, password: str) -> LoginResponse:
        frame = ".AccountService->Login()"
        try:
            if not phone:
                raise WrongPhone()

            users = await self.user_repo.find_all(FindAllUsersParams(phone=phone))
            if not users:
                logger.warning("Login failed: unknown phone %s", phone)
                raise WrongPhone()

            user = users[0]
            if not await self.hasher.verify(password, user.password):
                logger.warning("Login failed: wrong password for user id=%s", user.id)
                raise WrongPassword()

            now = datetime.now(timezone.utc)
            token_expired_at = now + self.tokens.ttl
            claims = self.tokens.with_expiry(
                {
                    "name": user.name,
                    "phone": user.phone,
                    "roleId": user.role_id,
                    "timestamp": token_expired_at.isoformat(),
                },
                issued_at=now,
            )
            token = self.tokens.sign(claims)

            user.token = token
            user.token_expired_at = token_expired_at
            user.updated_at = now
            await self.user_repo.update(user)
        except AccountServiceError as err:
            err.prepend_path(frame)
            raise

        logger.info("Successful login: user_id=%s", user.id)
        return LoginResponse(session_id=token, claims=claims)

    async def get_by_token(self, token: str) -> User:
        try:
            return await self.user_repo.find_by_token(token)
        except AccountServiceError as err:
            err.prepend_path(".AccountService->GetByToken()")
            raise

    async def verify_token_jwt(self, token_string: str) -> dict:
        """Claims of ``token_string`` if it is a user's current session and its signature holds."""
        frame = ".AccountService->VerifyTokenJWT()"
        try:
            user = await self.get_by_token(token_string)
            claims = self.tokens.verify(token_string)
        except AccountServiceError as err:
            err.prepend_path(frame)
            raise

        logger.debug("Verified session token for user id=%s", user.id)
        return claims

    async def logout(self, token: str) -> User:
        try:
            user = await self.get_by_token(token)
            user.token = None
            user.token_expired_at = None
            user.updated_at = datetime.now(timezone.utc)
            user = await self.user_repo.update(user)
        except AccountServiceError as err:
            err.prepend_path(".AccountService->Logout()")
            raise

        logger.info("Logged out user id=%s", user.id)
        return user

    async def delete_user(self, user_id: int) -> None:
        try:
            await self.user_repo.delete(user_id)
        except AccountServiceError as err:
            err.prepend_path(".AccountService->DeleteUser()")
            raise

        logger.info("Deleted user id=%s", user_id)
