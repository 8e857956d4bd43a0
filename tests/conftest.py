"""
Shared pytest fixtures for Microsoft Band cloud testing.

The mock transport is a real requests.Session whose send() is patched to
return hand-built responses, so request preparation (including the auth
hook) runs for real.
"""
import io
import json
from unittest.mock import Mock, patch

import pytest
import requests

from msband_cloud.sdk.auth import StaticTokenSource, Token
from msband_cloud.sdk.client import BandClient

TEST_BASE_URL = "https://api.example.com/v1/me"


def make_response(status_code=200, body=b"", url=TEST_BASE_URL, reason="OK"):
    """Build a requests.Response with a readable body and a counted close().

    body may be bytes, str, or any JSON-serializable value.
    """
    if isinstance(body, str):
        body = body.encode("utf-8")
    elif not isinstance(body, bytes):
        body = json.dumps(body).encode("utf-8")

    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.url = url
    response.encoding = "utf-8"
    response.raw = io.BytesIO(body)
    response.close = Mock(wraps=response.close)
    return response


@pytest.fixture
def token():
    return Token(access_token="test_access_token")


@pytest.fixture
def client(token):
    """BandClient against a test base URL with a static token."""
    return BandClient(StaticTokenSource(token), base_url=TEST_BASE_URL)


@pytest.fixture
def mock_send(client):
    """Patch the client's transport; set return_value / side_effect per test.

    Sent PreparedRequests are available through mock_send.call_args.
    """
    with patch.object(client._session, "send") as send:
        send.return_value = make_response(200, {})
        yield send


def sent_request(mock_send) -> requests.PreparedRequest:
    """The PreparedRequest passed to the most recent send()."""
    return mock_send.call_args[0][0]
