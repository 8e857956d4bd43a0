"""
Value-or-error wrapper for callers that prefer not to catch exceptions.

    result = capture(Device, devices.get_device, client, "abc123")
    if not result.ok:
        print(result.error.status_code)
"""

from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

from msband_cloud.sdk.errors import BandError

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """Outcome of one call. When ``error`` is set, ``value`` is a zero record."""
    value: T
    error: Optional[BandError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value


def capture(default_factory: Callable[[], T], fn: Callable[..., T], *args, **kwargs) -> Result[T]:
    """Call fn, turning a BandError into a Result carrying default_factory().

    Exceptions that are not BandError propagate.
    """
    try:
        return Result(fn(*args, **kwargs))
    except BandError as e:
        return Result(default_factory(), e)
