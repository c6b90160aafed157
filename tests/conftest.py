from datetime import timedelta

import pytest

from account_service.core.config import Settings, TokenConfig
from account_service.core.security import PasswordHasher, TokenManager
from account_service.repositories.memory_repo import MemoryUserRepository
from account_service.schemas.user_schema import UserCreate
from account_service.services.account_service import AccountService

TEST_SECRET = b"test-signing-secret"


@pytest.fixture()
def settings() -> Settings:
    return Settings(SECRET_KEY=TEST_SECRET.decode(), BCRYPT_ROUNDS=4, _env_file=None)


@pytest.fixture()
def hasher():
    # lowest bcrypt cost keeps the suite fast
    h = PasswordHasher(rounds=4, max_workers=1)
    yield h
    h.close()


@pytest.fixture()
def tokens() -> TokenManager:
    return TokenManager(TokenConfig(secret=TEST_SECRET, ttl=timedelta(hours=24)))


@pytest.fixture()
def repo() -> MemoryUserRepository:
    return MemoryUserRepository()


@pytest.fixture()
def service(repo, hasher, tokens) -> AccountService:
    return AccountService(repo, hasher, tokens)


@pytest.fixture()
def user_in() -> UserCreate:
    return UserCreate(role_id=2, name="Budi Santoso", phone="081234567890", password="rahasia123")


@pytest.fixture()
async def registered_user(service, user_in):
    return await service.create_user(user_in)
