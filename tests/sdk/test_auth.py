"""Tests for SDK auth (tokens, token sources, bearer auth hook)."""

import threading
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import requests

from msband_cloud.sdk.auth import (
    BearerAuth,
    OAuthConfig,
    RefreshingTokenSource,
    StaticTokenSource,
    Token,
)
from msband_cloud.sdk.client import BandClient
from msband_cloud.sdk.errors import AuthError
from msband_cloud.sdk.types import DEFAULT_SCOPES, TOKEN_URL


def _now():
    return datetime.now(timezone.utc)


def _token_response(status_code=200, payload=None):
    resp = Mock(status_code=status_code)
    resp.json = Mock(return_value=payload if payload is not None else {
        "access_token": "fresh",
        "token_type": "bearer",
        "expires_in": 3600,
        "refresh_token": "r2",
    })
    return resp


@pytest.fixture
def expired_token():
    return Token("stale", refresh_token="r1", expiry=_now() - timedelta(minutes=5))


class TestToken:
    def test_valid_without_expiry(self):
        assert Token("abc").valid is True

    def test_empty_access_token_invalid(self):
        assert Token("").valid is False

    def test_expired(self):
        assert Token("abc", expiry=_now() - timedelta(seconds=1)).valid is False

    def test_near_expiry_counts_as_expired(self):
        assert Token("abc", expiry=_now() + timedelta(seconds=5)).valid is False

    def test_future_expiry_valid(self):
        assert Token("abc", expiry=_now() + timedelta(hours=1)).valid is True

    @pytest.mark.parametrize("token_type,expected", [
        ("bearer", "Bearer abc"),
        ("Bearer", "Bearer abc"),
        ("", "Bearer abc"),
        ("MAC", "MAC abc"),
    ])
    def test_header_value(self, token_type, expected):
        assert Token("abc", token_type=token_type).header_value() == expected

    def test_from_response(self):
        before = _now()
        token = Token.from_response({"access_token": "a", "expires_in": 3600})
        assert token.access_token == "a"
        assert token.token_type == "Bearer"
        assert before + timedelta(seconds=3599) <= token.expiry <= _now() + timedelta(seconds=3600)

    def test_from_response_keeps_fallback_refresh_token(self):
        token = Token.from_response({"access_token": "a"}, refresh_token="keep")
        assert token.refresh_token == "keep"
        assert token.expiry is None

    def test_is_immutable(self):
        token = Token("abc")
        with pytest.raises(AttributeError):
            token.access_token = "other"

    def test_dict_roundtrip(self):
        token = Token("abc", "Bearer", "r", datetime(2030, 1, 1, tzinfo=timezone.utc))
        assert Token.from_dict(token.to_dict()) == token


class TestStaticTokenSource:
    def test_returns_same_token(self):
        token = Token("abc")
        source = StaticTokenSource(token)
        assert source.token() is token
        assert source.token() is token

    def test_accepts_string(self):
        assert StaticTokenSource("abc").token() == Token("abc")

    def test_returns_expired_token_without_refresh(self):
        token = Token("abc", expiry=_now() - timedelta(days=1))
        assert StaticTokenSource(token).token() is token

    def test_cannot_replace(self):
        assert StaticTokenSource("abc").replace(Token("x")) is False


class TestRefreshingTokenSource:
    def test_valid_token_not_refreshed(self):
        session = Mock()
        token = Token("abc", refresh_token="r", expiry=_now() + timedelta(hours=1))
        source = RefreshingTokenSource(token, client_id="cid", session=session)
        assert source.token() is token
        session.post.assert_not_called()

    def test_refreshes_expired_token(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response()
        source = RefreshingTokenSource(
            expired_token, client_id="cid", client_secret="secret",
            redirect_url="https://app.example.com/cb", session=session,
        )

        token = source.token()

        assert token.access_token == "fresh"
        assert token.refresh_token == "r2"
        assert token.valid
        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == TOKEN_URL
        assert kwargs["data"] == {
            "grant_type": "refresh_token",
            "refresh_token": "r1",
            "client_id": "cid",
            "client_secret": "secret",
            "redirect_uri": "https://app.example.com/cb",
        }

    def test_refreshed_token_reused(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response()
        source = RefreshingTokenSource(expired_token, client_id="cid", session=session)
        first = source.token()
        assert source.token() is first
        assert session.post.call_count == 1

    def test_keeps_refresh_token_when_not_rotated(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response(payload={
            "access_token": "fresh", "expires_in": 3600,
        })
        source = RefreshingTokenSource(expired_token, client_id="cid", session=session)
        assert source.token().refresh_token == "r1"

    def test_on_refresh_callback(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response()
        on_refresh = Mock()
        source = RefreshingTokenSource(
            expired_token, client_id="cid", session=session, on_refresh=on_refresh,
        )
        token = source.token()
        on_refresh.assert_called_once_with(token)

    def test_no_refresh_token(self):
        token = Token("stale", expiry=_now() - timedelta(minutes=1))
        source = RefreshingTokenSource(token, client_id="cid", session=Mock())
        with pytest.raises(AuthError, match="no refresh token"):
            source.token()

    def test_refresh_http_failure(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response(status_code=400)
        source = RefreshingTokenSource(expired_token, client_id="cid", session=session)
        with pytest.raises(AuthError, match="HTTP 400"):
            source.token()

    def test_refresh_network_failure(self, expired_token):
        session = Mock()
        session.post.side_effect = requests.ConnectionError("down")
        source = RefreshingTokenSource(expired_token, client_id="cid", session=session)
        with pytest.raises(AuthError) as info:
            source.token()
        assert isinstance(info.value.__cause__, requests.ConnectionError)

    def test_refresh_invalid_payload(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response(payload={"error": "invalid_grant"})
        source = RefreshingTokenSource(expired_token, client_id="cid", session=session)
        with pytest.raises(AuthError, match="invalid payload"):
            source.token()

    def test_refresh_non_json(self, expired_token):
        session = Mock()
        resp = _token_response()
        resp.json.side_effect = ValueError("not json")
        session.post.return_value = resp
        source = RefreshingTokenSource(expired_token, client_id="cid", session=session)
        with pytest.raises(AuthError):
            source.token()

    def test_auth_error_is_runtime_error(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response(status_code=500)
        source = RefreshingTokenSource(expired_token, client_id="cid", session=session)
        with pytest.raises(RuntimeError):
            source.token()

    def test_concurrent_callers_refresh_once(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response()
        source = RefreshingTokenSource(expired_token, client_id="cid", session=session)

        results = []
        threads = [threading.Thread(target=lambda: results.append(source.token())) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert session.post.call_count == 1
        assert {r.access_token for r in results} == {"fresh"}


class TestBearerAuth:
    def test_sets_authorization_header(self):
        request = requests.Request("GET", "https://api.example.com/x").prepare()
        BearerAuth(StaticTokenSource("abc"))(request)
        assert request.headers["Authorization"] == "Bearer abc"

    def test_propagates_auth_error(self):
        source = Mock()
        source.token.side_effect = AuthError("nope")
        request = requests.Request("GET", "https://api.example.com/x").prepare()
        with pytest.raises(AuthError):
            BearerAuth(source)(request)
        assert "Authorization" not in request.headers


class TestOAuthConfig:
    def test_defaults(self):
        config = OAuthConfig("cid")
        assert config.scopes == DEFAULT_SCOPES
        assert config.token_url == TOKEN_URL

    def test_token_source(self, expired_token):
        config = OAuthConfig("cid", "secret", token_url="https://login.example.com/token")
        source = config.token_source(expired_token)
        assert isinstance(source, RefreshingTokenSource)
        assert source._token_url == "https://login.example.com/token"
        assert source._client_secret == "secret"

    def test_new_client(self):
        config = OAuthConfig("cid")
        client = config.new_client(Token("abc"), base_url="https://api.example.com/v1/me")
        assert isinstance(client, BandClient)
        assert isinstance(client.token_source, RefreshingTokenSource)
        assert client.base_url == "https://api.example.com/v1/me"


class TestNaiveExpiry:
    def test_naive_expiry_taken_as_utc(self):
        token = Token("abc", expiry=datetime(2030, 1, 1))
        assert token.expiry == datetime(2030, 1, 1, tzinfo=timezone.utc)

    def test_naive_future_expiry_is_valid(self):
        token = Token("abc", expiry=datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=1))
        assert token.valid is True

    def test_refreshing_source_with_naive_expiry(self):
        session = Mock()
        token = Token("abc", refresh_token="r", expiry=datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=1))
        source = RefreshingTokenSource(token, client_id="cid", session=session)
        assert source.token() is token
        session.post.assert_not_called()

    def test_naive_past_expiry_refreshes(self):
        session = Mock()
        session.post.return_value = _token_response()
        token = Token("abc", refresh_token="r", expiry=datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(hours=1))
        source = RefreshingTokenSource(token, client_id="cid", session=session)
        assert source.token().access_token == "fresh"


class TestRefreshedTokenValidity:
    @pytest.mark.parametrize("expires_in", [1, 5, 10])
    def test_short_lived_refresh_rejected(self, expired_token, expires_in):
        session = Mock()
        session.post.return_value = _token_response(payload={
            "access_token": "fresh", "expires_in": expires_in,
        })
        on_refresh = Mock()
        source = RefreshingTokenSource(
            expired_token, client_id="cid", session=session, on_refresh=on_refresh,
        )
        with pytest.raises(AuthError, match="already expired"):
            source.token()
        on_refresh.assert_not_called()


class TestRefreshScopes:
    def test_scopes_sent_with_refresh(self, expired_token):
        session = Mock()
        session.post.return_value = _token_response()
        source = RefreshingTokenSource(
            expired_token, client_id="cid", scopes=("mshealth.ReadProfile", "offline_access"),
            session=session,
        )
        source.token()
        assert session.post.call_args.kwargs["data"]["scope"] == "mshealth.ReadProfile offline_access"

    def test_oauth_config_passes_scopes(self, expired_token):
        source = OAuthConfig("cid", scopes=["mshealth.ReadDevices"]).token_source(expired_token)
        source._session = Mock()
        source._session.post.return_value = _token_response()
        source.token()
        assert source._session.post.call_args.kwargs["data"]["scope"] == "mshealth.ReadDevices"
