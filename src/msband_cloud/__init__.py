"""
Client library for the Microsoft Band cloud API (Microsoft Health).

Typed access to summaries, profile, devices, and recorded activities.

    from msband_cloud import BandClient, profile

    client = BandClient("my-access-token")
    me = profile.get_profile(client)

Layers:
    sdk.client: request building, authorized transport, response decoding
    sdk.auth: tokens and token sources
    sdk.model: record types
    profile, devices, activities, summaries: one function per endpoint
"""

# Client and credentials
from msband_cloud.sdk.client import BandClient
from msband_cloud.sdk.auth import (
    OAuthConfig,
    RefreshingTokenSource,
    StaticTokenSource,
    Token,
)

# Errors
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

# Types and records
from msband_cloud.sdk.types import ActivityInclude, ActivityKind, Period, SplitDistanceType
from msband_cloud.sdk.model import (
    Activities,
    Activity,
    ActivitySegment,
    Device,
    DeviceProfiles,
    Profile,
    Summaries,
    Summary,
)

# Resource accessors
from msband_cloud.sdk import activities, devices, profile, summaries

__version__ = "0.1.0"

__all__ = [
    # Client
    "BandClient", "OAuthConfig", "RefreshingTokenSource", "StaticTokenSource", "Token",
    # Errors
    "BandError", "InvalidPath", "EncodingError", "TransportError",
    "HTTPStatusError", "DecodeError", "AuthError", "Result", "capture",
    # Types
    "ActivityInclude", "ActivityKind", "Period", "SplitDistanceType",
    # Records
    "Activities", "Activity", "ActivitySegment", "Device", "DeviceProfiles",
    "Profile", "Summaries", "Summary",
    # Accessors
    "activities", "devices", "profile", "summaries",
]
