import asyncio
import hashlib
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

from jose import jwt
from jose.exceptions import ExpiredSignatureError, JOSEError
from passlib.context import CryptContext

from account_service.core.config import SIGNING_ALGORITHM, TokenConfig
from account_service.core.exceptions import HashingError, InvalidToken, TokenSigningError

DEFAULT_BCRYPT_ROUNDS = 10


class PasswordHasher:
    """bcrypt hashing on a private thread pool.

    The cost factor is stored inside every hash, so ``verify`` works for
    hashes produced with any number of rounds.
    """

    def __init__(self, rounds: int = DEFAULT_BCRYPT_ROUNDS, max_workers: int = 2):
        self.pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="bcrypt")

    @staticmethod
    def _digest(password: str) -> str:
        # bcrypt only reads the first 72 bytes
        return hashlib.sha256(password.encode("utf-8")).hexdigest()

    def hash_sync(self, password: str) -> str:
        try:
            return self.pwd_context.hash(self._digest(password))
        except (ValueError, TypeError, RuntimeError) as exc:
            raise HashingError(str(exc), cause=exc) from exc

    def verify_sync(self, plain_password: str, hashed_password: str) -> bool:
        try:
            return self.pwd_context.verify(self._digest(plain_password), hashed_password)
        except (ValueError, TypeError, RuntimeError) as exc:
            raise HashingError(str(exc), cause=exc) from exc

    async def hash(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.hash_sync, password)

    async def verify(self, plain_password: str, hashed_password: str) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.verify_sync, plain_password, hashed_password)

    def close(self) -> None:
        self._executor.shutdown(wait=False)


class TokenManager:
    """Issues and verifies HS256-signed claim tokens."""

    def __init__(self, config: TokenConfig):
        if config.algorithm != SIGNING_ALGORITHM:
            raise ValueError(f"Unsupported signing algorithm: {config.algorithm}")
        if not config.secret:
            raise ValueError("Signing secret must not be empty")
        self.config = config

    @property
    def ttl(self) -> timedelta:
        return self.config.ttl

    def with_expiry(self, claims: Mapping[str, Any], ttl: Optional[timedelta] = None,
                    issued_at: Optional[datetime] = None) -> dict:
        """Copy of ``claims`` with ``iat``/``exp`` set in unix seconds."""
        now = issued_at or datetime.now(timezone.utc)
        expire = now + (ttl if ttl is not None else self.config.ttl)
        to_encode = dict(claims)
        to_encode.update({"iat": int(now.timestamp()), "exp": int(expire.timestamp())})
        return to_encode

    def sign(self, claims: Mapping[str, Any]) -> str:
        try:
            return jwt.encode(dict(claims), self.config.secret, algorithm=SIGNING_ALGORITHM)
        except (JOSEError, TypeError, ValueError) as exc:
            raise TokenSigningError(str(exc), cause=exc) from exc

    def issue(self, claims: Mapping[str, Any], ttl: Optional[timedelta] = None,
              issued_at: Optional[datetime] = None) -> str:
        return self.sign(self.with_expiry(claims, ttl=ttl, issued_at=issued_at))

    def verify(self, token: str) -> dict:
        try:
            return jwt.decode(token, self.config.secret, algorithms=[SIGNING_ALGORITHM])
        except ExpiredSignatureError as exc:
            raise InvalidToken("Token has expired.", cause=exc) from exc
        except (JOSEError, AttributeError, TypeError, ValueError) as exc:
            raise InvalidToken(cause=exc) from exc
