import pytest

from account_service.main import create_account_service
from account_service.repositories.memory_repo import MemoryUserRepository
from account_service.schemas.user_schema import UserCreate


@pytest.mark.asyncio
async def test_create_account_service_wires_settings(settings):
    service = create_account_service(MemoryUserRepository(), settings)
    try:
        assert service.tokens.ttl.total_seconds() == 24 * 3600
        created = await service.create_user(UserCreate(role_id=1, name="Ani", phone="0877", password="pw"))
        stored = await service.user_repo.find_by_id(created.id)
        assert stored.password.startswith("$2b$04$")

        response = await service.login("0877", "pw")
        assert await service.verify_token_jwt(response.session_id) == response.claims
    finally:
        service.hasher.close()
