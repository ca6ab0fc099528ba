"""
Seed script to create the tables and the first admin user.

Run once with env set:
  ADMIN_EMAIL=admin@institute.com
  ADMIN_PASSWORD=YourSecurePassword

Creates:
- all tables known to the models (if not exists)
- users: one user with role admin, already approved (created or updated by email)
"""
import asyncio
import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from institute_fees.auth.models import User
from institute_fees.auth.security import hash_password
from institute_fees.core.config import settings
from institute_fees.core.enums import AppRole
from institute_fees.db.session import AsyncSessionLocal, Base, engine

# Register model tables on Base.metadata
import institute_fees.core.models  # noqa: F401

logger = logging.getLogger(__name__)


async def create_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Tables ready.")


async def seed_admin(db: AsyncSession) -> None:
    email = settings.admin_email
    password = settings.admin_password
    if not email or not password:
        logger.warning("ADMIN_EMAIL / ADMIN_PASSWORD not set; skipping admin user.")
        return

    email = email.strip().lower()
    result = await db.execute(select(User).where(User.email == email))
    admin = result.scalar_one_or_none()
    if not admin:
        admin = User(
            full_name=settings.admin_full_name,
            email=email,
            password_hash=hash_password(password),
            role=AppRole.ADMIN.value,
            is_approved=True,
            approved_at=datetime.now(timezone.utc),
            status="ACTIVE",
        )
        db.add(admin)
        logger.info("Created admin user: %s", email)
    else:
        admin.role = AppRole.ADMIN.value
        admin.is_approved = True
        admin.password_hash = hash_password(password)
        admin.full_name = settings.admin_full_name
        logger.info("Updated existing user to admin: %s", email)

    await db.commit()


async def main() -> None:
    logging.basicConfig(level=settings.log_level.upper())
    await create_tables()
    async with AsyncSessionLocal() as db:
        try:
            await seed_admin(db)
        except Exception:
            await db.rollback()
            logger.exception("Admin seed failed")
            raise


if __name__ == "__main__":
    asyncio.run(main())
