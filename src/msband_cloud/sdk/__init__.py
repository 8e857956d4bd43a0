"""
Microsoft Band cloud low-level SDK.

Thin typed wrapper over the Microsoft Health cloud REST API.
Each accessor function maps 1:1 to an endpoint.
"""

from msband_cloud.sdk.auth import (
    BearerAuth,
    OAuthConfig,
    RefreshingTokenSource,
    StaticTokenSource,
    Token,
    TokenSource,
)
from msband_cloud.sdk.client import BandClient
from msband_cloud.sdk.errors import (
    AuthError,
    BandError,
    DecodeError,
    EncodingError,
    HTTPStatusError,
    InvalidPath,
    TransportError,
)
from msband_cloud.sdk.result import Result, capture
from msband_cloud.sdk.types import (
    ActivityInclude,
    ActivityKind,
    Period,
    SplitDistanceType,
    BASE_URL,
    USER_AGENT,
    TOKEN_URL,
    DEFAULT_SCOPES,
)

__all__ = [
    "BandClient",
    "Token",
    "TokenSource",
    "StaticTokenSource",
    "RefreshingTokenSource",
    "BearerAuth",
    "OAuthConfig",
    "BandError",
    "InvalidPath",
    "EncodingError",
    "TransportError",
    "HTTPStatusError",
    "DecodeError",
    "AuthError",
    "Result",
    "capture",
    "ActivityInclude",
    "ActivityKind",
    "Period",
    "SplitDistanceType",
    "BASE_URL",
    "USER_AGENT",
    "TOKEN_URL",
    "DEFAULT_SCOPES",
]
