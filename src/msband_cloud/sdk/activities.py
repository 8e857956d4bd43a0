"""
Activity SDK functions.

GET /Activities, GET /Activities/{id}
"""

from datetime import datetime
from typing import Iterable, Optional
from urllib.parse import quote

from msband_cloud.sdk.client import BandClient
from msband_cloud.sdk.model import Activities, Activity
from msband_cloud.sdk.types import ActivityInclude, ActivityKind, SplitDistanceType
from msband_cloud.utils import format_timestamp


def get_activities(
    client: BandClient,
    activity_types: Iterable[ActivityKind] = None,
    start_time: datetime = None,
    end_time: datetime = None,
    activity_includes: Iterable[ActivityInclude] = None,
    device_ids: Iterable[str] = None,
    split_distance_type: Optional[SplitDistanceType] = None,
    max_page_size: Optional[int] = None,
) -> Activities:
    """
    List recorded activities.

    GET /Activities

    Only the first page is fetched; Activities.next_page is left to the caller.

    Returns:
        Activities with every activity tagged by kind
    """
    params = {}
    if activity_types:
        params["activityTypes"] = ",".join(ActivityKind(k).value for k in activity_types)
    if start_time:
        params["startTime"] = format_timestamp(start_time)
    if end_time:
        params["endTime"] = format_timestamp(end_time)
    if activity_includes:
        params["activityIncludes"] = _includes(activity_includes)
    if device_ids:
        params["deviceIds"] = ",".join(device_ids)
    if split_distance_type:
        params["splitDistanceType"] = SplitDistanceType(split_distance_type).value
    if max_page_size:
        params["maxPageSize"] = str(max_page_size)

    return client.get("/Activities", Activities, params=params)


def get_activity(
    client: BandClient,
    activity_id: str,
    activity_includes: Iterable[ActivityInclude] = None,
) -> Activity:
    """
    Get a single activity.

    GET /Activities/{id}
    """
    params = {}
    if activity_includes:
        params["activityIncludes"] = _includes(activity_includes)
    return client.get(f"/Activities/{quote(activity_id, safe='')}", Activity, params=params)


def _includes(includes: Iterable[ActivityInclude]) -> str:
    return ",".join(ActivityInclude(i).value for i in includes)
