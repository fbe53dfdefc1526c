"""
Time source for paste expiry.

Times are epoch milliseconds. In test mode the caller may pin the clock with
the value of the ``x-test-now-ms`` header.
"""
import logging
import re
import time
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

logger = logging.getLogger(__name__)

# Leading integer; anything after it, such as a fraction, is ignored
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def current_time_ms(
    test_now_ms: Optional[Union[str, int]] = None,
    test_mode: bool = False,
) -> int:
    """
    Get current time, respecting test mode for deterministic testing.

    Args:
        test_now_ms: Override timestamp (milliseconds since epoch)
        test_mode: Whether overrides are honoured at all

    Returns:
        Current time in milliseconds since epoch
    """
    if test_mode and test_now_ms is not None and test_now_ms != "":
        if isinstance(test_now_ms, int):
            return test_now_ms

        match = _LEADING_INT.match(str(test_now_ms))
        if match:
            return int(match.group(1))
        logger.warning(f"Invalid x-test-now-ms value {test_now_ms!r}")

    return int(time.time() * 1000)


def format_timestamp(timestamp_ms: int) -> str:
    """Render epoch milliseconds as ISO 8601 UTC, e.g. 2024-01-01T00:00:00.000Z."""
    seconds, millis = divmod(timestamp_ms, 1000)
    moment = datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=millis)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
