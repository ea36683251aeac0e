# expense_api/api/v1/routes/auth.py
import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi_users import InvalidPasswordException, exceptions
from sqlalchemy.exc import IntegrityError

from expense_api.api.deps import get_current_user, get_settings, get_token_issuer
from expense_api.core.auth import User, UserManager, get_user_manager
from expense_api.core.config import Settings
from expense_api.core.exceptions import (
    BadCurrentPassword,
    Conflict,
    InvalidCredentials,
    InvalidInput,
    InvalidToken,
)
from expense_api.core.security import TokenIssuer
from expense_api.schemas.user import (
    LoginRequest,
    PasswordChangeRequest,
    SessionRead,
    SignupRequest,
    TokenResponse,
    UserCreate,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _password_reasons(exc: InvalidPasswordException) -> list:
    return exc.reason if isinstance(exc.reason, list) else [str(exc.reason)]


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
):
    """
    Create an account and return an access token.

    Either `password` (checked against the password policy) or `oauth_ticket`
    (from a Google `needs_signup` result) must be supplied.
    """
    try:
        if payload.oauth_ticket:
            if payload.password:
                raise InvalidInput.for_field("password", "Send either a password or a Google signup ticket, not both")
            try:
                ticket = token_issuer.verify_signup_ticket(payload.oauth_ticket)
            except InvalidToken:
                raise InvalidInput.for_field("oauth_ticket", "Signup ticket is invalid or expired")
            if ticket.email.lower() != payload.email:
                raise InvalidInput.for_field("email", "Email does not match the Google account")
            if not payload.currency:
                raise InvalidInput.for_field("currency", "Currency is required")
            user = await user_manager.create_oauth_user(
                ticket,
                display_name=payload.display_name,
                monthly_income=payload.monthly_income,
                currency=payload.currency,
                request=request,
            )
        else:
            if not payload.password:
                raise InvalidInput.for_field("password", "Password is required")
            user = await user_manager.create(
                UserCreate(
                    email=payload.email,
                    password=payload.password,
                    display_name=payload.display_name,
                    monthly_income=payload.monthly_income,
                    currency=payload.currency or settings.DEFAULT_CURRENCY,
                ),
                safe=True,
                request=request,
            )
    except InvalidPasswordException as e:
        raise InvalidInput.for_field("password", *_password_reasons(e))
    except exceptions.UserAlreadyExists:
        logger.info("Signup rejected: email already registered")
        raise Conflict("email_exists")
    except IntegrityError:
        # Lost a race with a concurrent signup; the unique index decided
        await user_manager.user_db.session.rollback()
        logger.info("Signup rejected by unique constraint")
        raise Conflict("email_exists")

    logger.info(f"User {user.id} signed up")
    return {"token": token_issuer.issue_for_user(user)}


@router.post("/login", response_model=TokenResponse)
async def login(
    payload: LoginRequest,
    user_manager: UserManager = Depends(get_user_manager),
    token_issuer: TokenIssuer = Depends(get_token_issuer),
):
    user = await user_manager.authenticate_password(payload.email, payload.password)
    if user is None or not user.is_active:
        logger.warning("Login failed: invalid credentials")
        raise InvalidCredentials()

    logger.info(f"User {user.id} logged in")
    return {"token": token_issuer.issue_for_user(user)}


@router.post("/password")
async def change_password(
    payload: PasswordChangeRequest,
    request: Request,
    user: User = Depends(get_current_user),
    user_manager: UserManager = Depends(get_user_manager),
):
    """Change the password; the current password must be supplied again."""
    try:
        changed = await user_manager.change_password(user, payload.current, payload.next, request=request)
    except InvalidPasswordException as e:
        raise InvalidInput.for_field("next", *_password_reasons(e))
    if not changed:
        raise BadCurrentPassword()
    return {"ok": True}


@router.get("/session", response_model=SessionRead)
async def read_session(request: Request, user: User = Depends(get_current_user)):
    """Claims of the presented bearer token."""
    claims = request.state.token_claims
    return SessionRead(
        user_id=claims.user_id,
        email=claims.email,
        name=claims.name,
        expires_at=claims.expires_at,
    )
