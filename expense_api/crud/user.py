# expense_api/crud/user.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from expense_api.core.auth import User
from typing import Optional
import uuid

async def get_user_by_id(user_id: uuid.UUID, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()

async def get_user_by_oauth_identity(provider: str, subject_id: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(
        select(User).where(User.oauth_provider == provider, User.oauth_subject_id == subject_id)
    )
    return result.scalar_one_or_none()
