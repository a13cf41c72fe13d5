from datetime import datetime
from typing import Optional
import time

import pytz


def now_ms() -> int:
    """Current time as epoch milliseconds, the unit stored on presets and history."""
    return int(time.time() * 1000)


def iso_now() -> str:
    """ISO-8601 UTC timestamp with a trailing Z, as written into exports."""
    return to_iso(now_ms())


def to_iso(timestamp_ms: Optional[int]) -> str:
    if timestamp_ms is None:
        return ""
    moment = datetime.fromtimestamp(timestamp_ms / 1000, tz=pytz.utc)
    return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')
