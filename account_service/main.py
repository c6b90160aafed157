import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from account_service.core.config import Settings, get_settings
from account_service.core.security import PasswordHasher, TokenManager
from account_service.db.session import close_db_pool, create_db_pool
from account_service.repositories.storage import UserStorage
from account_service.repositories.user_repo import UserRepository
from account_service.services.account_service import AccountService


def configure_logging(settings: Optional[Settings] = None) -> None:
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_account_service(storage: UserStorage, settings: Optional[Settings] = None) -> AccountService:
    settings = settings or get_settings()
    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS, max_workers=settings.HASH_WORKERS)
    tokens = TokenManager(settings.token_config())
    return AccountService(storage, hasher, tokens)


@asynccontextmanager
async def account_service_lifespan(settings: Optional[Settings] = None) -> AsyncIterator[AccountService]:
    """Open the PostgreSQL pool and yield a service backed by it."""
    settings = settings or get_settings()
    pool = await create_db_pool(settings)
    service = create_account_service(UserRepository(pool), settings)
    try:
        yield service
    finally:
        service.hasher.close()
        await close_db_pool(pool)
