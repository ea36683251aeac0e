# expense_api/core/google_auth.py
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import httpx
from authlib.common.errors import AuthlibBaseError
from authlib.integrations.httpx_client import AsyncOAuth2Client

from .config import Settings
from .exceptions import OAuthExchangeFailed, OAuthProfileFetchFailed

logger = logging.getLogger(__name__)

# Google OAuth2 endpoints
GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

PROVIDER = "google"

# Scopes required for the application
SCOPES = ["openid", "email", "profile"]


@dataclass
class GoogleIdentity:
    subject_id: str
    email: str
    name: Optional[str] = None


class GoogleOAuthClient:
    """Talks to Google's OAuth endpoints. Pass `transport` to route requests elsewhere (tests)."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "GoogleOAuthClient":
        return cls(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            redirect_uri=settings.GOOGLE_REDIRECT_URI,
            timeout=settings.GOOGLE_HTTP_TIMEOUT,
            transport=transport,
        )

    def _oauth_client(self, token: Optional[Dict[str, Any]] = None) -> AsyncOAuth2Client:
        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if self.transport is not None:
            kwargs["transport"] = self.transport
        return AsyncOAuth2Client(
            client_id=self.client_id,
            client_secret=self.client_secret,
            scope=" ".join(SCOPES),
            redirect_uri=self.redirect_uri,
            token_endpoint_auth_method="client_secret_post",
            token=token,
            **kwargs,
        )

    async def authorization_url(self) -> Tuple[str, str]:
        """Consent screen URL and the fresh state value it carries."""
        async with self._oauth_client() as client:
            return client.create_authorization_url(
                GOOGLE_AUTH_URL,
                prompt="select_account",
                include_granted_scopes="true",
            )

    async def exchange_code(self, code: Optional[str]) -> str:
        """Exchange an authorization code for an access token."""
        if not code:
            raise OAuthExchangeFailed("Missing authorization code")

        logger.debug("Exchanging Google authorization code")

        try:
            async with self._oauth_client() as client:
                token = await client.fetch_token(GOOGLE_TOKEN_URL, code=code)
        except (AuthlibBaseError, httpx.HTTPError) as e:
            raise OAuthExchangeFailed(f"Token exchange failed: {str(e)}") from e
        except (ValueError, TypeError) as e:
            raise OAuthExchangeFailed("Token endpoint returned an unreadable body") from e

        if not isinstance(token, dict):
            raise OAuthExchangeFailed("Token endpoint returned a non-object body")
        access_token = token.get("access_token")
        if not access_token:
            raise OAuthExchangeFailed("No access token received from Google")
        return access_token

    async def fetch_identity(self, access_token: str) -> GoogleIdentity:
        """Get the subject id, email and name for the access token's account."""
        try:
            async with self._oauth_client(token={"access_token": access_token, "token_type": "Bearer"}) as client:
                response = await client.get(GOOGLE_USERINFO_URL)
        except (AuthlibBaseError, httpx.HTTPError) as e:
            raise OAuthProfileFetchFailed(f"Error fetching user info: {str(e)}") from e

        if response.status_code != 200:
            raise OAuthProfileFetchFailed(f"Userinfo endpoint returned {response.status_code}")
        try:
            profile = response.json()
        except ValueError as e:
            raise OAuthProfileFetchFailed("Userinfo endpoint returned invalid JSON") from e
        if not isinstance(profile, dict):
            raise OAuthProfileFetchFailed("Userinfo endpoint returned a non-object body")

        subject_id = profile.get("sub")
        email = profile.get("email")
        if not subject_id or not email:
            raise OAuthProfileFetchFailed("Google profile is missing sub or email")
        return GoogleIdentity(subject_id=str(subject_id), email=email, name=profile.get("name"))
