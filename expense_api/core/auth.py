# expense_api/core/auth.py

import uuid
import logging
from datetime import datetime, timezone
from typing import Optional, Union

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users import BaseUserManager, InvalidPasswordException, UUIDIDMixin, exceptions
from fastapi_users.db import SQLAlchemyUserDatabase

from sqlalchemy import Column, String, Boolean, DateTime, Float, UniqueConstraint, Uuid
from sqlalchemy.ext.asyncio import AsyncSession

from .database import Base, get_async_session
from .security import PasswordHelper, SignupTicket, password_policy_errors

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# 1. User DB model
class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("oauth_provider", "oauth_subject_id", name="uq_users_oauth_identity"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Stored lower-cased so the unique index is case-insensitive in practice
    email = Column(String(254), unique=True, index=True, nullable=False)
    # NULL for accounts that only sign in through an OAuth provider
    hashed_password = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    # Profile fields
    display_name = Column(String(80), nullable=False)
    monthly_income = Column(Float, nullable=False, default=0.0)
    currency = Column(String(3), nullable=False, default="INR")
    avatar_path = Column(String, nullable=True)

    # External identity linkage
    oauth_provider = Column(String(32), nullable=True)
    oauth_subject_id = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def has_password(self) -> bool:
        return bool(self.hashed_password)

    def __repr__(self):
        return f"<User email={self.email}>"


# 2. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    async def validate_password(self, password: str, user: Union[object, User]) -> None:
        errors = password_policy_errors(password)
        if errors:
            raise InvalidPasswordException(reason=errors)

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        from expense_api.crud.category import seed_default_categories_for_user

        logger.info(f"User {user.id} has registered. Seeding default categories…")
        created = await seed_default_categories_for_user(user.id, self.user_db.session)
        logger.info(f"Seeded {len(created)} default categories for user {user.id}")

    async def on_after_update(self, user: User, update_dict: dict, request: Optional[Request] = None):
        changed = sorted(k for k in update_dict if k != "password")
        if "password" in update_dict:
            changed.append("password")
        logger.info(f"User {user.id} updated: {', '.join(changed)}")

    async def authenticate_password(self, email: str, password: str) -> Optional[User]:
        """Verify an email/password pair. Unknown email and wrong password both give None."""
        credentials = OAuth2PasswordRequestForm(username=email.strip().lower(), password=password)
        return await self.authenticate(credentials)

    async def get_by_oauth_identity(self, provider: str, subject_id: str) -> Optional[User]:
        from expense_api.crud.user import get_user_by_oauth_identity

        return await get_user_by_oauth_identity(provider, subject_id, self.user_db.session)

    async def resolve_oauth_identity(self, provider: str, subject_id: str, email: Optional[str]) -> Optional[User]:
        """
        Find the local account for an external identity.

        The provider link wins; otherwise an account with the same email
        (compared case-insensitively) is claimed, so a password user can start
        signing in with the provider without creating a duplicate.
        """
        user = await self.get_by_oauth_identity(provider, subject_id)
        if user is not None:
            return user
        if not email:
            return None
        return await self.user_db.get_by_email(email)

    async def link_oauth_identity(self, user: User, provider: str, subject_id: str) -> User:
        if user.oauth_subject_id is not None:
            return user
        logger.info(f"Linking {provider} identity to user {user.id}")
        return await self.user_db.update(
            user, {"oauth_provider": provider, "oauth_subject_id": subject_id}
        )

    async def create_oauth_user(
        self,
        ticket: SignupTicket,
        display_name: str,
        monthly_income: float,
        currency: str,
        request: Optional[Request] = None,
    ) -> User:
        """Create an account that authenticates only through the ticket's provider."""
        email = ticket.email.strip().lower()
        if await self.user_db.get_by_email(email) is not None:
            raise exceptions.UserAlreadyExists()

        created_user = await self.user_db.create(
            {
                "email": email,
                "hashed_password": None,
                "is_verified": True,  # The provider already verified the email
                "display_name": display_name,
                "monthly_income": monthly_income,
                "currency": currency,
                "oauth_provider": ticket.provider,
                "oauth_subject_id": ticket.subject_id,
            }
        )
        await self.on_after_register(created_user, request)
        return created_user

    async def change_password(
        self,
        user: User,
        current_password: str,
        new_password: str,
        request: Optional[Request] = None,
    ) -> bool:
        """Re-check the current password, then store the new one. False when current is wrong."""
        from expense_api.schemas.user import UserUpdate

        verified, _ = self.password_helper.verify_and_update(current_password, user.hashed_password)
        if not verified:
            logger.warning(f"Password change for user {user.id} rejected: current password mismatch")
            return False
        await self.update(UserUpdate(password=new_password), user, safe=True, request=request)
        return True


# 3. User Database
async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)


# 4. User Manager dependency
async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db, password_helper=PasswordHelper())


__all__ = [
    "User",
    "UserManager",
    "get_user_db",
    "get_user_manager",
]
