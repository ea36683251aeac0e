# expense_api/api/deps.py
import logging
import uuid
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from expense_api.core.auth import User, UserManager, get_user_manager
from expense_api.core.config import Settings
from expense_api.core.database import get_async_session
from expense_api.core.exceptions import InvalidToken, Unauthorized
from expense_api.core.google_auth import GoogleOAuthClient
from expense_api.core.oauth import OAuthLinker
from expense_api.core.security import TokenIssuer
from expense_api.crud.user import get_user_by_id

logger = logging.getLogger(__name__)

# Security scheme; missing credentials are handled below so every failure looks the same
bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_google_client(settings: Settings = Depends(get_settings)) -> GoogleOAuthClient:
    return GoogleOAuthClient.from_settings(settings)


def get_oauth_linker(
    user_manager: UserManager = Depends(get_user_manager),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    google: GoogleOAuthClient = Depends(get_google_client),
) -> OAuthLinker:
    return OAuthLinker(user_manager, token_issuer, google)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    db: AsyncSession = Depends(get_async_session),
) -> User:
    """
    Session guard for every protected route.

    Only the Authorization header is accepted. Missing, malformed, expired and
    forged tokens, and tokens for unknown or inactive users, all produce the
    same 401 response.
    """
    if credentials is None or not credentials.credentials:
        raise Unauthorized()

    try:
        claims = token_issuer.verify(credentials.credentials)
        user_id = uuid.UUID(claims.user_id)
    except (InvalidToken, ValueError):
        raise Unauthorized()

    user = await get_user_by_id(user_id, db)
    if user is None or user.is_active is False:
        logger.debug(f"Rejected token for missing or inactive user {user_id}")
        raise Unauthorized()

    request.state.user_id = user.id
    request.state.token_claims = claims
    return user
