"""
Script to initialize the first super admin from configuration
"""
import asyncio

from sqlalchemy import select

from realty_crm.core.config import settings
from realty_crm.core.security import get_password_hash
from realty_crm.database import Database
from realty_crm.models.user import AuthProvider, User, UserRole


async def init_superuser(database: Database) -> bool:
    """
    Create the super admin from config settings

    Returns:
        True if an account was created, False if it already existed
    """
    email = settings.FIRST_SUPERUSER_EMAIL.lower()
    async with database.session_factory() as db:
        result = await db.execute(select(User).where(User.email == email))
        existing_user = result.scalar_one_or_none()

        if existing_user:
            print(f"✓ Superuser {email} already exists")
            return False

        user = User(
            name=settings.FIRST_SUPERUSER_NAME,
            email=email,
            hashed_password=get_password_hash(settings.FIRST_SUPERUSER_PASSWORD),
            role=UserRole.SUPER_ADMIN,
            auth_provider=AuthProvider.JWT,
            is_active=True,
        )

        db.add(user)
        await db.commit()
        print(f"✓ Created superuser: {email}")
        print("\n⚠️  IMPORTANT: Change these credentials in production!")
        return True


async def main():
    database = Database(settings.DATABASE_URL)
    try:
        await init_superuser(database)
    finally:
        await database.dispose()


if __name__ == "__main__":
    asyncio.run(main())
