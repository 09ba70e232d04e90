# rental_quotes/scripts/create_admin.py
import asyncio
import logging
import os

from sqlalchemy.future import select

from rental_quotes.core.config import Settings
from rental_quotes.core.db import Database
from rental_quotes.core.logging import configure_logging
from rental_quotes.models.user_models import User

logger = logging.getLogger(__name__)


async def create_admin(settings: Settings, username: str, password: str) -> bool:
    """Create the admin account unless a user with that name exists. Returns True when created."""
    database = Database(settings)
    try:
        await database.init_models()
        async with database.session() as session:
            existing = (await session.execute(select(User).where(User.username == username))).scalars().first()
            if existing:
                logger.info("User '%s' already exists, nothing to do", username)
                return False

            session.add(User(username=username, password_hash=password, role="admin", is_active=True))
            await session.commit()
            logger.info("Admin user '%s' created", username)
            return True
    finally:
        await database.dispose()


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    asyncio.run(create_admin(
        settings,
        os.getenv("ADMIN_USERNAME", "admin"),
        os.getenv("ADMIN_PASSWORD", "admin"),
    ))


if __name__ == "__main__":
    main()
