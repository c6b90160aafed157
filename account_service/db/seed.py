# account_service/db/seed.py
import asyncio
import logging
import random

from faker import Faker
from tqdm import tqdm

from account_service.core.exceptions import PhoneAlreadyExists
from account_service.main import account_service_lifespan, configure_logging
from account_service.schemas.user_schema import UserCreate

logger = logging.getLogger(__name__)

fake = Faker()

NUM_USERS = 50
ROLE_IDS = [1, 2, 3]
DEFAULT_PASSWORD = "secret123"


def random_phone() -> str:
    return f"08{random.randint(1000000000, 9999999999)}"


async def seed(num_users: int = NUM_USERS):
    configure_logging()
    created = 0
    async with account_service_lifespan() as service:
        for _ in tqdm(range(num_users), desc="Creating users"):
            params = UserCreate(
                role_id=random.choice(ROLE_IDS),
                name=fake.name(),
                phone=random_phone(),
                password=DEFAULT_PASSWORD,
            )
            try:
                await service.create_user(params)
            except PhoneAlreadyExists:
                logger.debug("Skipping duplicate phone %s", params.phone)
                continue
            created += 1

    logger.info("Seed finished: %s users created.", created)


if __name__ == "__main__":
    asyncio.run(seed())
