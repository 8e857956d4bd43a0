"""
Live verification fixtures.

These tests hit the REAL Microsoft Health cloud API to check that
response shapes still decode. They require a valid token.

Provide credentials via environment variables:
  MSBAND_TOKEN_JSON = exported token JSON (from BandClient.export_token())
  MSBAND_BASE_URL   = optional base URL override

Run: pytest tests/live/ -v
"""

import os

import pytest

from msband_cloud.sdk.client import BandClient
from msband_cloud.sdk.types import BASE_URL


@pytest.fixture(scope="session")
def live_client():
    """BandClient loaded from MSBAND_TOKEN_JSON. Skips without credentials."""
    token_json = os.environ.get("MSBAND_TOKEN_JSON")
    if not token_json:
        pytest.skip("No Microsoft Health credentials: set MSBAND_TOKEN_JSON")

    client = BandClient("placeholder", base_url=os.environ.get("MSBAND_BASE_URL", BASE_URL))
    client.load_token(token_json)
    return client
