# expense_api/core/oauth.py
"""
Resolve an external sign-in to a local account.

A callback ends in exactly one outcome:

- ``ok``: login flow, account found, access token issued.
- ``already_registered``: signup flow but the account exists; no token.
- ``needs_signup``: no account yet; carries the external email and a signup
  ticket so the client can prefill and finish the signup form.
- ``error``: the provider exchange or profile fetch failed. The client only
  ever sees a generic message.
"""
import enum
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from .auth import UserManager
from .exceptions import OAuthError
from .google_auth import PROVIDER, GoogleOAuthClient
from .security import TokenIssuer

logger = logging.getLogger(__name__)

RESULT_SOURCE = "oauth-google"
GENERIC_FAILURE_MESSAGE = "Sign-in failed"


class OAuthFlow(str, enum.Enum):
    login = "login"
    signup = "signup"


class OAuthStatus(str, enum.Enum):
    ok = "ok"
    already_registered = "already_registered"
    needs_signup = "needs_signup"
    error = "error"


@dataclass
class OAuthOutcome:
    status: OAuthStatus
    token: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    provider_id: Optional[str] = None
    signup_ticket: Optional[str] = None
    message: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        payload = {k: v for k, v in asdict(self).items() if v is not None}
        payload["status"] = self.status.value
        payload["source"] = RESULT_SOURCE
        return payload

    @classmethod
    def failure(cls) -> "OAuthOutcome":
        return cls(status=OAuthStatus.error, message=GENERIC_FAILURE_MESSAGE)


class OAuthLinker:
    def __init__(self, user_manager: UserManager, token_issuer: TokenIssuer, google: GoogleOAuthClient):
        self.user_manager = user_manager
        self.token_issuer = token_issuer
        self.google = google

    async def complete(self, code: Optional[str], flow: OAuthFlow) -> OAuthOutcome:
        """Run exchange, identity fetch, resolve and branch for one callback."""
        try:
            access_token = await self.google.exchange_code(code)
            identity = await self.google.fetch_identity(access_token)
        except OAuthError as e:
            logger.warning(f"Google sign-in failed ({type(e).__name__}): {str(e)}")
            return OAuthOutcome.failure()

        user = await self.user_manager.resolve_oauth_identity(PROVIDER, identity.subject_id, identity.email)

        if user is None:
            logger.info(f"Google identity has no local account, flow={flow.value}")
            return OAuthOutcome(
                status=OAuthStatus.needs_signup,
                email=identity.email,
                name=identity.name,
                provider_id=identity.subject_id,
                signup_ticket=self.token_issuer.issue_signup_ticket(
                    PROVIDER, identity.subject_id, identity.email, identity.name
                ),
            )

        if flow == OAuthFlow.signup:
            logger.info(f"Google signup for existing user {user.id}; asking client to log in")
            return OAuthOutcome(status=OAuthStatus.already_registered)

        user = await self.user_manager.link_oauth_identity(user, PROVIDER, identity.subject_id)
        logger.info(f"User {user.id} signed in with Google")
        return OAuthOutcome(status=OAuthStatus.ok, token=self.token_issuer.issue_for_user(user))

    @staticmethod
    def rejected_state() -> OAuthOutcome:
        logger.warning("Google callback rejected: state does not match this session")
        return OAuthOutcome.failure()
