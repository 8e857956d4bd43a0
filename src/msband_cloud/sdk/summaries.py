"""
Period summary SDK function.

GET /Summaries/{period}
"""

from datetime import datetime
from typing import Iterable, Union

from msband_cloud.sdk.client import BandClient
from msband_cloud.sdk.model import Summaries
from msband_cloud.sdk.types import Period
from msband_cloud.utils import format_timestamp


def get_period_summaries(
    client: BandClient,
    period: Union[Period, str],
    start_time: datetime = None,
    end_time: datetime = None,
    device_ids: Iterable[str] = None,
) -> Summaries:
    """
    Get hourly or daily summaries.

    GET /Summaries/{period}

    Args:
        client: BandClient instance
        period: Period.HOURLY / Period.DAILY, or "hourly" / "daily"
        start_time: Only buckets starting at or after this time
        end_time: Only buckets ending before this time
        device_ids: Restrict to these devices

    Returns:
        Summaries with one Summary per bucket. next_page is not followed.

    Raises:
        ValueError: If period is not a known period
    """
    period = Period(period)

    params = {}
    if start_time:
        params["startTime"] = format_timestamp(start_time)
    if end_time:
        params["endTime"] = format_timestamp(end_time)
    if device_ids:
        params["deviceIds"] = ",".join(device_ids)

    return client.get(f"/Summaries/{period.value}", Summaries, params=params)
