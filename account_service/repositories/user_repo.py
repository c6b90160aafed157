from datetime import datetime, timezone
from typing import Any, Optional

from asyncpg import Connection, PostgresError, UniqueViolationError
from asyncpg.exceptions import InterfaceError

from account_service.core.exceptions import NotFoundError, PhoneAlreadyExists, StorageError
from account_service.repositories.storage import UserStorage
from account_service.schemas.user_schema import FindAllUsersParams, User

USER_COLUMNS = "id, role_id, name, phone, password, token, token_expired_at, created_at, updated_at"

DB_ERRORS = (PostgresError, InterfaceError, OSError)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class UserRepository(UserStorage):
    """asyncpg implementation of ``UserStorage``.

    ``conn`` may be a ``Connection`` or a ``Pool``; both expose fetch/fetchrow/fetchval.
    """

    def __init__(self, conn: Connection):
        self.conn = conn

    # ------------------ Query Building ------------------ #

    @staticmethod
    def _where(params: FindAllUsersParams) -> tuple[str, list[Any]]:
        clauses = ["deleted_at IS NULL"]
        args: list[Any] = []

        if params.id:
            args.append(params.id)
            clauses.append(f"id = ${len(args)}")
        if params.phone:
            args.append(params.phone)
            clauses.append(f"phone = ${len(args)}")
        if params.name:
            args.append(f"%{_escape_like(params.name)}%")
            clauses.append(f"name ILIKE ${len(args)} ESCAPE '\\'")
        if params.token:
            args.append(params.token)
            clauses.append(f"token = ${len(args)}")

        return " AND ".join(clauses), args

    async def _fetch_one(self, column: str, value: Any, op: str) -> User:
        sql = f"SELECT {USER_COLUMNS} FROM users WHERE {column} = $1 AND deleted_at IS NULL LIMIT 1;"
        try:
            record = await self.conn.fetchrow(sql, value)
        except DB_ERRORS as exc:
            raise StorageError(str(exc), path=f".UserRepository->{op}()", cause=exc) from exc
        if not record:
            raise NotFoundError(path=f".UserRepository->{op}()")
        return User.model_validate(dict(record))

    # ------------------ Retrieval Methods ------------------ #

    async def find_all(self, params: FindAllUsersParams) -> list[User]:
        where, args = self._where(params)
        sql = f"SELECT {USER_COLUMNS} FROM users WHERE {where} ORDER BY id"
        if params.limit > 0:
            args.extend([params.limit, params.offset])
            sql += f" LIMIT ${len(args) - 1} OFFSET ${len(args)}"
        try:
            records = await self.conn.fetch(sql + ";", *args)
        except DB_ERRORS as exc:
            raise StorageError(str(exc), path=".UserRepository->FindAll()", cause=exc) from exc
        return [User.model_validate(dict(record)) for record in records]

    async def count(self, params: FindAllUsersParams) -> int:
        where, args = self._where(params)
        sql = f"SELECT COUNT(*) FROM users WHERE {where};"
        try:
            total = await self.conn.fetchval(sql, *args)
        except DB_ERRORS as exc:
            raise StorageError(str(exc), path=".UserRepository->Count()", cause=exc) from exc
        return int(total or 0)

    async def find_by_id(self, user_id: int) -> User:
        return await self._fetch_one("id", user_id, "FindByID")

    async def find_by_phone(self, phone: str) -> User:
        return await self._fetch_one("phone", phone, "FindByPhone")

    async def find_by_token(self, token: str) -> User:
        return await self._fetch_one("token", token, "FindByToken")

    # ------------------ Mutations ------------------ #

    async def insert(self, user: User) -> User:
        sql = f"""
            INSERT INTO users (role_id, name, phone, password, token, token_expired_at, created_at, updated_at)
            VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
            RETURNING {USER_COLUMNS};
        """
        try:
            record = await self.conn.fetchrow(
                sql,
                user.role_id,
                user.name,
                user.phone,
                user.password,
                user.token,
                user.token_expired_at,
                user.created_at,
                user.updated_at,
            )
        except UniqueViolationError as exc:
            raise PhoneAlreadyExists(path=".UserRepository->Insert()") from exc
        except DB_ERRORS as exc:
            raise StorageError(str(exc), path=".UserRepository->Insert()", cause=exc) from exc
        return User.model_validate(dict(record))

    async def update(self, user: User) -> User:
        sql = f"""
            UPDATE users
            SET role_id = $2, name = $3, phone = $4, password = $5,
                token = $6, token_expired_at = $7, updated_at = $8
            WHERE id = $1 AND deleted_at IS NULL
            RETURNING {USER_COLUMNS};
        """
        try:
            record = await self.conn.fetchrow(
                sql,
                user.id,
                user.role_id,
                user.name,
                user.phone,
                user.password,
                user.token,
                user.token_expired_at,
                user.updated_at,
            )
        except UniqueViolationError as exc:
            raise PhoneAlreadyExists(path=".UserRepository->Update()") from exc
        except DB_ERRORS as exc:
            raise StorageError(str(exc), path=".UserRepository->Update()", cause=exc) from exc
        if not record:
            raise NotFoundError(path=".UserRepository->Update()")
        return User.model_validate(dict(record))

    async def delete(self, user_id: int, deleted_at: Optional[datetime] = None) -> None:
        sql = "UPDATE users SET deleted_at = $2 WHERE id = $1 AND deleted_at IS NULL RETURNING id;"
        try:
            deleted = await self.conn.fetchval(sql, user_id, deleted_at or datetime.now(timezone.utc))
        except DB_ERRORS as exc:
            raise StorageError(str(exc), path=".UserRepository->Delete()", cause=exc) from exc
        if deleted is None:
            raise NotFoundError(path=".UserRepository->Delete()")
