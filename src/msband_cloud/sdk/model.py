"""
Record types for Microsoft Band cloud resources.

Plain dataclasses with no behaviour beyond decoding. Every field has a
zero-value default, so ``Device()`` is the empty record returned
alongside an error by ``capture``. Each field's metadata names its JSON
key and the decoder applied to the raw value; a value of the wrong JSON
type raises TypeError, which the client reports as a DecodeError.
"""

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from msband_cloud.sdk.types import ACTIVITY_LIST_KEYS, ActivityKind
from msband_cloud.utils import parse_duration, parse_timestamp


def _number(value):
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a number, got {value!r}")
    return value


def _integer(value):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an integer, got {value!r}")
    return value


def _string(value):
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


def _boolean(value):
    if not isinstance(value, bool):
        raise TypeError(f"expected a boolean, got {value!r}")
    return value


def _timestamp(value):
    return parse_timestamp(_string(value))


def _record(model) -> Callable[[Any], Any]:
    return model.from_dict


def _records(model) -> Callable[[Any], list]:
    def decode(value):
        if not isinstance(value, list):
            raise TypeError(f"expected a list, got {value!r}")
        return [model.from_dict(item) for item in value]
    return decode


def _key(key: str, decode: Callable = None, default: Any = None, factory: Callable = None):
    """Declare a field bound to a JSON key."""
    metadata = {"key": key, "decode": decode}
    if factory is not None:
        return field(default_factory=factory, metadata=metadata)
    return field(default=default, metadata=metadata)


class _Record:
    @classmethod
    def from_dict(cls, d: Dict[str, Any]):
        if not isinstance(d, dict):
            raise TypeError(f"{cls.__name__}: expected an object, got {d!r}")
        kwargs = {}
        for f in fields(cls):
            key = f.metadata.get("key")
            if key is None or d.get(key) is None:
                continue
            decode = f.metadata.get("decode")
            try:
                kwargs[f.name] = decode(d[key]) if decode else d[key]
            except TypeError as e:
                raise TypeError(f"{cls.__name__}.{key}: {e}") from e
        return cls(**kwargs)


def _seconds(duration: str) -> Optional[int]:
    return parse_duration(duration) if duration else None


# ── Summary blocks ───────────────────────────────────────────────────────

@dataclass
class CaloriesBurnedSummary(_Record):
    period: str = _key("period", _string, "")
    total_calories: int = _key("totalCalories", _integer, 0)


@dataclass
class HeartRateSummary(_Record):
    period: str = _key("period", _string, "")
    average_heart_rate: int = _key("averageHeartRate", _integer, 0)
    peak_heart_rate: int = _key("peakHeartRate", _integer, 0)
    lowest_heart_rate: int = _key("lowestHeartRate", _integer, 0)


@dataclass
class DistanceSummary(_Record):
    """Distances in centimeters; speed and pace as reported by the API."""
    period: str = _key("period", _string, "")
    total_distance: int = _key("totalDistance", _integer, 0)
    total_distance_on_foot: int = _key("totalDistanceOnFoot", _integer, 0)
    actual_distance: int = _key("actualDistance", _integer, 0)
    elevation_gain: int = _key("elevationGain", _integer, 0)
    elevation_loss: int = _key("elevationLoss", _integer, 0)
    max_elevation: int = _key("maxElevation", _integer, 0)
    min_elevation: int = _key("minElevation", _integer, 0)
    waypoint_distance: int = _key("waypointDistance", _integer, 0)
    speed: int = _key("speed", _integer, 0)
    pace: int = _key("pace", _integer, 0)
    overall_pace: int = _key("overallPace", _integer, 0)


@dataclass
class HeartRateZones(_Record):
    """Minutes spent in each heart rate zone."""
    under_healthy_heart: int = _key("underHealthyHeart", _integer, 0)
    under_aerobic: int = _key("underAerobic", _integer, 0)
    aerobic: int = _key("aerobic", _integer, 0)
    anaerobic: int = _key("anaerobic", _integer, 0)
    fitness_zone: int = _key("fitnessZone", _integer, 0)
    healthy_heart: int = _key("healthyHeart", _integer, 0)
    redline: int = _key("redline", _integer, 0)
    over_redline: int = _key("overRedline", _integer, 0)


@dataclass
class PerformanceSummary(_Record):
    finish_heart_rate: int = _key("finishHeartRate", _integer, 0)
    recovery_heart_rate_at_1_minute: int = _key("recoveryHeartRateAt1Minute", _integer, 0)
    recovery_heart_rate_at_2_minutes: int = _key("recoveryHeartRateAt2Minutes", _integer, 0)
    heart_rate_zones: HeartRateZones = _key(
        "heartRateZones", _record(HeartRateZones), factory=HeartRateZones,
    )


@dataclass
class Summary(_Record):
    """Aggregated metrics for one hourly or daily bucket."""
    user_id: str = _key("userId", _string, "")
    period: str = _key("period", _string, "")
    start_time: Optional[datetime] = _key("startTime", _timestamp)
    end_time: Optional[datetime] = _key("endTime", _timestamp)
    parent_day: Optional[datetime] = _key("parentDay", _timestamp)
    is_transit_day: bool = _key("isTransitDay", _boolean, False)
    duration: str = _key("duration", _string, "")
    steps_taken: int = _key("stepsTaken", _integer, 0)
    floors_climbed: int = _key("floorsClimbed", _integer, 0)
    active_hours: int = _key("activeHours", _integer, 0)
    uv_exposure: str = _key("uvExposure", _string, "")
    calories_burned_summary: CaloriesBurnedSummary = _key(
        "caloriesBurnedSummary", _record(CaloriesBurnedSummary), factory=CaloriesBurnedSummary,
    )
    heart_rate_summary: HeartRateSummary = _key(
        "heartRateSummary", _record(HeartRateSummary), factory=HeartRateSummary,
    )
    distance_summary: DistanceSummary = _key(
        "distanceSummary", _record(DistanceSummary), factory=DistanceSummary,
    )

    @property
    def duration_seconds(self) -> Optional[int]:
        return _seconds(self.duration)


@dataclass
class Summaries(_Record):
    summaries: List[Summary] = _key("summaries", _records(Summary), factory=list)
    item_count: int = _key("itemCount", _integer, 0)
    next_page: str = _key("nextPage", _string, "")


# ── Profile and devices ──────────────────────────────────────────────────

@dataclass
class Profile(_Record):
    """User profile. Height in millimeters, weight in grams."""
    # The API spells the first name key "firstString"
    first_name: str = _key("firstString", _string, "")
    middle_name: str = _key("middleName", _string, "")
    last_name: str = _key("lastName", _string, "")
    birthdate: Optional[datetime] = _key("birthdate", _timestamp)
    postal_code: str = _key("postalCode", _string, "")
    gender: str = _key("gender", _string, "")
    height: int = _key("height", _integer, 0)
    weight: int = _key("weight", _integer, 0)
    preferred_locale: str = _key("preferredLocale", _string, "")
    last_update_time: Optional[datetime] = _key("lastUpdateTime", _timestamp)


@dataclass
class Device(_Record):
    id: str = _key("id", _string, "")
    display_name: str = _key("displayName", _string, "")
    last_successful_sync: Optional[datetime] = _key("lastSuccessfulSync", _timestamp)
    device_family: str = _key("deviceFamily", _string, "")
    hardware_version: str = _key("hardwareVersion", _string, "")
    software_version: str = _key("softwareVersion", _string, "")
    model_name: str = _key("modelName", _string, "")
    manufacturer: str = _key("manufacturer", _string, "")
    device_status: str = _key("deviceStatus", _string, "")
    created_date: Optional[datetime] = _key("createdDate", _timestamp)


@dataclass
class DeviceProfiles(_Record):
    devices: List[Device] = _key("deviceProfiles", _records(Device), factory=list)
    item_count: int = _key("itemCount", _integer, 0)


# ── Activities ───────────────────────────────────────────────────────────

@dataclass
class Location(_Record):
    speed_over_ground: float = _key("speedOverGround", _number, 0.0)
    latitude: float = _key("latitude", _number, 0.0)
    longitude: float = _key("longitude", _number, 0.0)
    elevation_from_mean_sea_level: float = _key("elevationFromMeanSeaLevel", _number, 0.0)
    estimated_horizontal_error: float = _key("estimatedHorizontalError", _number, 0.0)
    estimated_vertical_error: float = _key("estimatedVerticalError", _number, 0.0)


@dataclass
class MapPoint(_Record):
    seconds_since_start: int = _key("secondsSinceStart", _integer, 0)
    map_point_type: str = _key("mapPointType", _string, "")
    ordinal: int = _key("ordinal", _integer, 0)
    actual_distance: int = _key("actualDistance", _integer, 0)
    total_distance: int = _key("totalDistance", _integer, 0)
    heart_rate: int = _key("heartRate", _integer, 0)
    pace: int = _key("pace", _integer, 0)
    scaled_pace: int = _key("scaledPace", _integer, 0)
    speed: int = _key("speed", _integer, 0)
    location: Location = _key("location", _record(Location), factory=Location)
    is_paused: bool = _key("isPaused", _boolean, False)
    is_resume: bool = _key("isResume", _boolean, False)


@dataclass
class ActivitySegment(_Record):
    """One segment of an activity: a run split, a sleep phase, a golf hole, a circuit."""
    segment_id: int = _key("segmentId", _integer, 0)
    segment_type: str = _key("segmentType", _string, "")
    day_id: Optional[datetime] = _key("dayId", _timestamp)
    start_time: Optional[datetime] = _key("startTime", _timestamp)
    end_time: Optional[datetime] = _key("endTime", _timestamp)
    duration: str = _key("duration", _string, "")
    paused_duration: str = _key("pausedDuration", _string, "")
    split_distance: int = _key("splitDistance", _integer, 0)
    heart_rate_summary: HeartRateSummary = _key(
        "heartRateSummary", _record(HeartRateSummary), factory=HeartRateSummary,
    )
    calories_burned_summary: CaloriesBurnedSummary = _key(
        "caloriesBurnedSummary", _record(CaloriesBurnedSummary), factory=CaloriesBurnedSummary,
    )
    distance_summary: DistanceSummary = _key(
        "distanceSummary", _record(DistanceSummary), factory=DistanceSummary,
    )
    heart_rate_zones: HeartRateZones = _key(
        "heartRateZones", _record(HeartRateZones), factory=HeartRateZones,
    )
    # Sleep
    sleep_time: int = _key("sleepTime", _integer, 0)
    sleep_type: str = _key("sleepType", _string, "")
    # Guided workout
    circuit_ordinal: int = _key("circuitOrdinal", _integer, 0)
    circuit_type: int = _key("circuitType", _integer, 0)
    # Golf
    hole_number: int = _key("holeNumber", _integer, 0)
    step_count: int = _key("stepCount", _integer, 0)
    distance_walked: int = _key("distanceWalked", _integer, 0)

    @property
    def duration_seconds(self) -> Optional[int]:
        return _seconds(self.duration)


@dataclass
class Activity(_Record):
    """
    A recorded session of any kind.

    One record type serves every kind; ``kind`` tells them apart. Fields
    that do not apply to a kind keep their zero value.
    """
    id: str = _key("id", _string, "")
    kind: Optional[ActivityKind] = None
    activity_type: str = _key("activityType", _string, "")
    name: str = _key("name", _string, "")
    user_id: str = _key("userId", _string, "")
    device_id: str = _key("deviceId", _string, "")
    start_time: Optional[datetime] = _key("startTime", _timestamp)
    end_time: Optional[datetime] = _key("endTime", _timestamp)
    day_id: Optional[datetime] = _key("dayId", _timestamp)
    created_time: Optional[datetime] = _key("createdTime", _timestamp)
    created_by: str = _key("createdBy", _string, "")
    duration: str = _key("duration", _string, "")
    paused_duration: str = _key("pausedDuration", _string, "")
    split_distance: int = _key("splitDistance", _integer, 0)
    uv_exposure: str = _key("uvExposure", _string, "")
    heart_rate_summary: HeartRateSummary = _key(
        "heartRateSummary", _record(HeartRateSummary), factory=HeartRateSummary,
    )
    calories_burned_summary: CaloriesBurnedSummary = _key(
        "caloriesBurnedSummary", _record(CaloriesBurnedSummary), factory=CaloriesBurnedSummary,
    )
    distance_summary: DistanceSummary = _key(
        "distanceSummary", _record(DistanceSummary), factory=DistanceSummary,
    )
    performance_summary: PerformanceSummary = _key(
        "performanceSummary", _record(PerformanceSummary), factory=PerformanceSummary,
    )
    activity_segments: List[ActivitySegment] = _key(
        "activitySegments", _records(ActivitySegment), factory=list,
    )
    minute_summaries: List[Summary] = _key("minuteSummaries", _records(Summary), factory=list)
    map_points: List[MapPoint] = _key("mapPoints", _records(MapPoint), factory=list)
    # Sleep
    awake_duration: str = _key("awakeDuration", _string, "")
    sleep_duration: str = _key("sleepDuration", _string, "")
    number_of_wakeups: int = _key("numberOfWakeups", _integer, 0)
    fall_asleep_duration: str = _key("fallAsleepDuration", _string, "")
    sleep_efficiency_percentage: int = _key("sleepEfficiencyPercentage", _integer, 0)
    total_restless_sleep_duration: str = _key("totalRestlessSleepDuration", _string, "")
    total_restful_sleep_duration: str = _key("totalRestfulSleepDuration", _string, "")
    resting_heart_rate: int = _key("restingHeartRate", _integer, 0)
    fall_asleep_time: Optional[datetime] = _key("fallAsleepTime", _timestamp)
    wakeup_time: Optional[datetime] = _key("wakeupTime", _timestamp)
    # Guided workout
    rounds_performed: int = _key("roundsPerformed", _integer, 0)
    repetitions_performed: int = _key("repetitionsPerformed", _integer, 0)
    workout_plan_id: str = _key("workoutPlanId", _string, "")
    # Golf
    total_step_count: int = _key("totalStepCount", _integer, 0)
    total_distance_walked: int = _key("totalDistanceWalked", _integer, 0)
    par_or_better_count: int = _key("parOrBetterCount", _integer, 0)
    longest_drive_distance: int = _key("longestDriveDistance", _integer, 0)
    longest_stroke_distance: int = _key("longestStrokeDistance", _integer, 0)
    # Multisport
    child_activities: List["Activity"] = field(default_factory=list)

    def __post_init__(self):
        if self.kind is None and self.activity_type:
            self.kind = _kind_from_type(self.activity_type)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Activity":
        activity = super().from_dict(d)
        children = d.get("childActivities")
        if children is not None:
            activity.child_activities = _records(cls)(children)
        return activity

    @property
    def duration_seconds(self) -> Optional[int]:
        return _seconds(self.duration)

    @property
    def sleep_duration_seconds(self) -> Optional[int]:
        return _seconds(self.sleep_duration)


def _kind_from_type(activity_type: str) -> Optional[ActivityKind]:
    try:
        return ActivityKind(activity_type)
    except ValueError:
        return None


@dataclass
class Activities(_Record):
    """
    GET /Activities listing.

    The API groups activities into one array per kind; they are flattened
    here into ``activities``, each tagged with the kind of its array.
    ``next_page`` is returned as-is and never followed.
    """
    activities: List[Activity] = field(default_factory=list)
    item_count: int = _key("itemCount", _integer, 0)
    next_page: str = _key("nextPage", _string, "")

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Activities":
        listing = super().from_dict(d)
        for kind, key in ACTIVITY_LIST_KEYS.items():
            items = d.get(key)
            if items is None:
                continue
            for activity in _records(Activity)(items):
                if activity.kind is None:
                    activity = replace(activity, kind=kind)
                listing.activities.append(activity)
        return listing

    def by_kind(self, kind: ActivityKind) -> List[Activity]:
        return [a for a in self.activities if a.kind is kind]
