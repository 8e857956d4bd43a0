"""
Microsoft Band cloud API types, enums, and constants.

All endpoint URLs, wire codes, and magic values live here.
"""

from enum import Enum


BASE_URL = "https://api.microsofthealth.net/v1/me"
USER_AGENT = "msband-cloud:v0.1.0"

# Microsoft account OAuth 2.0 token endpoint
TOKEN_URL = "https://login.live.com/oauth20_token.srf"

DEFAULT_SCOPES = (
    "mshealth.ReadProfile",
    "mshealth.ReadActivityHistory",
    "mshealth.ReadDevices",
    "mshealth.ReadActivityLocation",
    "offline_access",
)


class Period(Enum):
    """Aggregation bucket for GET /Summaries/{period}."""
    HOURLY = "hourly"
    DAILY = "daily"


class ActivityKind(Enum):
    """Activity tag, matching the API's activityType values."""
    SLEEP = "Sleep"
    RUN = "Run"
    BIKE = "Bike"
    GOLF = "Golf"
    FREE_PLAY = "FreePlay"
    GUIDED_WORKOUT = "GuidedWorkout"


class ActivityInclude(Enum):
    """Optional detail blocks for activity queries (activityIncludes)."""
    DETAILS = "Details"
    MINUTE_SUMMARIES = "MinuteSummaries"
    MAP_POINTS = "MapPoints"


class SplitDistanceType(Enum):
    """Unit used for split distances in run/bike activities."""
    MILES = "Miles"
    KILOMETERS = "Kilometers"


# Listing key for each activity kind in GET /Activities
ACTIVITY_LIST_KEYS = {
    ActivityKind.SLEEP: "sleepActivities",
    ActivityKind.RUN: "runActivities",
    ActivityKind.BIKE: "bikeActivities",
    ActivityKind.GOLF: "golfActivities",
    ActivityKind.FREE_PLAY: "freePlayActivities",
    ActivityKind.GUIDED_WORKOUT: "guidedWorkoutActivities",
}
