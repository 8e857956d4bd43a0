"""
Microsoft Band cloud credentials.

A token source supplies a valid bearer token on demand. BearerAuth plugs
a token source into a requests.Session so every outgoing request is
authorized without the caller touching headers.

The consent flow that produces the first token is out of scope: tokens
are supplied by the caller and, when a refresh token is present,
refreshed here against the OAuth token endpoint.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Sequence, Union

import requests
from requests.auth import AuthBase

from msband_cloud.sdk.errors import AuthError
from msband_cloud.sdk.types import DEFAULT_SCOPES, TOKEN_URL
from msband_cloud.utils import parse_timestamp

logger = logging.getLogger(__name__)

# Tokens this close to expiry are treated as expired
EXPIRY_DELTA = timedelta(seconds=10)


@dataclass(frozen=True)
class Token:
    """OAuth 2.0 bearer credential."""
    access_token: str
    token_type: str = "Bearer"
    refresh_token: str = ""
    expiry: Optional[datetime] = None

    def __post_init__(self):
        # Naive expiries are taken as UTC, as in parse_timestamp
        if self.expiry is not None and self.expiry.tzinfo is None:
            object.__setattr__(self, "expiry", self.expiry.replace(tzinfo=timezone.utc))

    @property
    def valid(self) -> bool:
        return bool(self.access_token) and not self.expired()

    def expired(self, now: datetime = None) -> bool:
        if self.expiry is None:
            return False
        now = now or datetime.now(timezone.utc)
        return self.expiry - EXPIRY_DELTA <= now

    def header_value(self) -> str:
        """Authorization header value, e.g. "Bearer abc"."""
        token_type = self.token_type or "Bearer"
        if token_type.lower() == "bearer":
            token_type = "Bearer"
        return f"{token_type} {self.access_token}"

    @classmethod
    def from_response(cls, data: Dict[str, Any], refresh_token: str = "") -> "Token":
        """Build a token from an OAuth token endpoint payload.

        Args:
            data: Parsed token response ({access_token, token_type, expires_in, ...})
            refresh_token: Fallback when the response omits a new refresh token
        """
        expiry = None
        if data.get("expires_in"):
            expiry = datetime.now(timezone.utc) + timedelta(seconds=int(data["expires_in"]))
        return cls(
            access_token=data["access_token"],
            token_type=data.get("token_type") or "Bearer",
            refresh_token=data.get("refresh_token") or refresh_token,
            expiry=expiry,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "access_token": self.access_token,
            "token_type": self.token_type,
            "refresh_token": self.refresh_token,
            "expiry": self.expiry.isoformat() if self.expiry else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Token":
        return cls(
            access_token=data["access_token"],
            token_type=data.get("token_type") or "Bearer",
            refresh_token=data.get("refresh_token") or "",
            expiry=parse_timestamp(data.get("expiry")),
        )


class TokenSource:
    """Supplies a valid token on demand."""

    def token(self) -> Token:
        raise NotImplementedError

    def replace(self, token: Token) -> bool:
        """Swap in a new token. Returns False when the source cannot."""
        return False


class StaticTokenSource(TokenSource):
    """Always returns the same token. No refresh."""

    def __init__(self, token: Union[Token, str]):
        if isinstance(token, str):
            token = Token(access_token=token)
        self._token = token

    def token(self) -> Token:
        return self._token


class RefreshingTokenSource(TokenSource):
    """
    Returns the current token while valid, refreshing it when it expires.

    Refresh uses the refresh_token grant against the OAuth token endpoint.
    A lock serializes refresh so the source can be shared across threads.
    """

    def __init__(
        self,
        token: Token,
        client_id: str,
        client_secret: str = "",
        token_url: str = TOKEN_URL,
        redirect_url: str = "",
        scopes: Sequence[str] = (),
        session: requests.Session = None,
        on_refresh: Callable[[Token], None] = None,
    ):
        self._token = token
        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._redirect_url = redirect_url
        self._scopes = tuple(scopes)
        self._session = session or requests.Session()
        self._on_refresh = on_refresh
        self._lock = threading.Lock()

    def token(self) -> Token:
        with self._lock:
            if self._token.valid:
                return self._token
            self._token = self._refresh()
            token = self._token
        if self._on_refresh:
            self._on_refresh(token)
        return token

    def replace(self, token: Token) -> bool:
        with self._lock:
            self._token = token
        return True

    def _refresh(self) -> Token:
        if not self._token.refresh_token:
            raise AuthError("Token expired and no refresh token is available")

        data = {
            "grant_type": "refresh_token",
            "refresh_token": self._token.refresh_token,
            "client_id": self._client_id,
        }
        if self._client_secret:
            data["client_secret"] = self._client_secret
        if self._redirect_url:
            data["redirect_uri"] = self._redirect_url
        if self._scopes:
            data["scope"] = " ".join(self._scopes)

        try:
            resp = self._session.post(self._token_url, data=data)
        except requests.RequestException as e:
            raise AuthError(f"Token refresh failed: {e}") from e

        if not 200 <= resp.status_code <= 299:
            raise AuthError(f"Token refresh failed: HTTP {resp.status_code}")

        try:
            payload = resp.json()
            token = Token.from_response(payload, refresh_token=self._token.refresh_token)
        except (ValueError, KeyError, TypeError) as e:
            raise AuthError(f"Token refresh returned an invalid payload: {e}") from e
        if not token.access_token:
            raise AuthError("Token refresh returned an empty access token")
        if not token.valid:
            raise AuthError("Token refresh returned a token that is already expired")

        logger.info("Access token refreshed")
        return token


class BearerAuth(AuthBase):
    """requests auth hook that attaches the token source's current token."""

    def __init__(self, token_source: TokenSource):
        self.token_source = token_source

    def __call__(self, request):
        token = self.token_source.token()
        request.headers["Authorization"] = token.header_value()
        return request


class OAuthConfig:
    """
    OAuth application settings.

    Turns a token obtained elsewhere (consent flow, stored session) into
    a refreshing token source or a ready BandClient.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str = "",
        redirect_url: str = "",
        scopes: Sequence[str] = DEFAULT_SCOPES,
        token_url: str = TOKEN_URL,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_url = redirect_url
        self.scopes = tuple(scopes)
        self.token_url = token_url

    def token_source(
        self,
        token: Token,
        on_refresh: Callable[[Token], None] = None,
    ) -> RefreshingTokenSource:
        return RefreshingTokenSource(
            token,
            client_id=self.client_id,
            client_secret=self.client_secret,
            token_url=self.token_url,
            redirect_url=self.redirect_url,
            scopes=self.scopes,
            on_refresh=on_refresh,
        )

    def new_client(self, token: Token, on_refresh: Callable[[Token], None] = None, **client_kwargs):
        """Create a BandClient authorized with a refreshing token source."""
        from msband_cloud.sdk.client import BandClient

        return BandClient(self.token_source(token, on_refresh=on_refresh), **client_kwargs)
