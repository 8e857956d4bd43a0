"""
Device SDK functions.

GET /Devices, GET /Devices/{id}
"""

from urllib.parse import quote

from msband_cloud.sdk.client import BandClient
from msband_cloud.sdk.model import Device, DeviceProfiles


def get_devices(client: BandClient) -> DeviceProfiles:
    """
    List devices registered to the user.

    GET /Devices

    Returns:
        DeviceProfiles with devices and item_count
    """
    return client.get("/Devices", DeviceProfiles)


def get_device(client: BandClient, device_id: str) -> Device:
    """
    Get a single device.

    GET /Devices/{id}
    """
    return client.get(f"/Devices/{quote(device_id, safe='')}", Device)
