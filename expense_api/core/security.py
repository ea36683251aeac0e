# expense_api/core/security.py
import logging
import re
import secrets
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import jwt
from fastapi_users.password import PasswordHelperProtocol
from passlib.context import CryptContext

from .config import Settings
from .exceptions import InvalidToken

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PASSWORD_MIN_LENGTH = 8

# (pattern, message) pairs; every rule must match
PASSWORD_RULES = [
    (re.compile(r"[A-Z]"), "Password must include an uppercase letter"),
    (re.compile(r"[a-z]"), "Password must include a lowercase letter"),
    (re.compile(r"[0-9]"), "Password must include a number"),
    (re.compile(r"[^A-Za-z0-9]"), "Password must include a special character"),
]

ACCESS_TOKEN_TYPE = "access"
SIGNUP_TICKET_TYPE = "oauth_signup"


def password_policy_errors(password: str) -> List[str]:
    """Return every unmet password rule, empty when the password is acceptable."""
    errors = []
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    for pattern, message in PASSWORD_RULES:
        if not pattern.search(password):
            errors.append(message)
    return errors


class PasswordHelper(PasswordHelperProtocol):
    """bcrypt hashing for the user manager, tolerant of password-less accounts."""

    def __init__(self, context: CryptContext = pwd_context):
        self.context = context

    def verify_and_update(self, plain_password: str, hashed_password: Optional[str]) -> Tuple[bool, Optional[str]]:
        if not hashed_password:
            # Keep the timing comparable to a real verification
            self.context.dummy_verify()
            return False, None
        return self.context.verify_and_update(plain_password, hashed_password)

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def generate(self) -> str:
        return secrets.token_urlsafe()


@dataclass
class TokenClaims:
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    expires_at: Optional[datetime] = None
    raw: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SignupTicket:
    provider: str
    subject_id: str
    email: str
    name: Optional[str] = None


class TokenIssuer:
    """
    Mints and verifies signed, time-limited bearer tokens.

    Verification is stateless. Every failure surfaces as InvalidToken so callers
    cannot tell an expired token from a forged one; the reason is logged at
    debug level only.
    """

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        lifetime: timedelta = timedelta(days=7),
        ticket_lifetime: timedelta = timedelta(minutes=15),
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.lifetime = lifetime
        self.ticket_lifetime = ticket_lifetime

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenIssuer":
        return cls(
            secret_key=settings.SECRET_KEY,
            algorithm=settings.ALGORITHM,
            lifetime=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            ticket_lifetime=timedelta(minutes=settings.OAUTH_SIGNUP_TICKET_MINUTES),
        )

    def _encode(self, payload: Dict[str, Any], lifetime: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {**payload, "iat": now, "exp": now + lifetime}
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def _decode(self, token: str, token_type: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            logger.debug("Rejected token: expired")
            raise InvalidToken("expired")
        except jwt.InvalidSignatureError:
            logger.debug("Rejected token: bad signature")
            raise InvalidToken("bad signature")
        except jwt.InvalidTokenError as e:
            logger.debug(f"Rejected token: {e}")
            raise InvalidToken("malformed")

        if payload.get("type") != token_type:
            logger.debug(f"Rejected token: expected type {token_type}, got {payload.get('type')}")
            raise InvalidToken("wrong type")
        return payload

    def issue(self, user_id: Any, email: Optional[str] = None, name: Optional[str] = None) -> str:
        """Create an access token for the given user id."""
        payload: Dict[str, Any] = {"sub": str(user_id), "type": ACCESS_TOKEN_TYPE}
        if email is not None:
            payload["email"] = email
        if name is not None:
            payload["name"] = name
        return self._encode(payload, self.lifetime)

    def issue_for_user(self, user) -> str:
        return self.issue(user.id, email=user.email, name=user.display_name)

    def verify(self, token: str) -> TokenClaims:
        payload = self._decode(token, ACCESS_TOKEN_TYPE)
        return TokenClaims(
            user_id=payload["sub"],
            email=payload.get("email"),
            name=payload.get("name"),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            raw=payload,
        )

    def issue_signup_ticket(self, provider: str, subject_id: str, email: str, name: Optional[str] = None) -> str:
        payload = {
            "sub": subject_id,
            "type": SIGNUP_TICKET_TYPE,
            "provider": provider,
            "email": email,
        }
        if name:
            payload["name"] = name
        return self._encode(payload, self.ticket_lifetime)

    def verify_signup_ticket(self, token: str) -> SignupTicket:
        payload = self._decode(token, SIGNUP_TICKET_TYPE)
        if not payload.get("provider") or not payload.get("email"):
            raise InvalidToken("incomplete ticket")
        return SignupTicket(
            provider=payload["provider"],
            subject_id=payload["sub"],
            email=payload["email"],
            name=payload.get("name"),
        )
