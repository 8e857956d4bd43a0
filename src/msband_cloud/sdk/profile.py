"""
Profile SDK function.

GET /Profile
"""

from msband_cloud.sdk.client import BandClient
from msband_cloud.sdk.model import Profile


def get_profile(client: BandClient) -> Profile:
    """Get the signed-in user's profile."""
    return client.get("/Profile", Profile)
