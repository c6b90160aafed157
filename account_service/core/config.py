# account_service/core/config.py

from datetime import timedelta
from functools import lru_cache
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict

SIGNING_ALGORITHM = "HS256"


class TokenConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    secret: bytes
    ttl: timedelta
    algorithm: str = SIGNING_ALGORITHM


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
        extra="ignore",
    )

    # --- JWT Config ---
    SECRET_KEY: str
    ALGORITHM: str = SIGNING_ALGORITHM
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # --- Password Hashing ---
    BCRYPT_ROUNDS: int = 10
    HASH_WORKERS: int = 2

    LOG_LEVEL: str = "INFO"

    # --- Database Config ---
    DB_HOST: Optional[str] = None
    DB_PORT: int = 5432
    DB_NAME: Optional[str] = None
    DB_USER: Optional[str] = None
    DB_PASS: Optional[str] = None

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://"
            f"{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def asyncpg_url(self) -> str:
        return (
            f"postgresql://"
            f"{self.DB_USER}:{self.DB_PASS}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def token_ttl(self) -> timedelta:
        return timedelta(minutes=self.ACCESS_TOKEN_EXPIRE_MINUTES)

    def token_config(self) -> TokenConfig:
        return TokenConfig(
            secret=self.SECRET_KEY.encode("utf-8"),
            ttl=self.token_ttl,
            algorithm=self.ALGORITHM,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
