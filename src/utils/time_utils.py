"""Millisecond clock helpers.

Timestamps are stored as integer epoch milliseconds so that the code
validity window can be compared exactly.
"""

from datetime import datetime
from typing import Callable

import pytz

# A clock returns the current time in epoch milliseconds
Clock = Callable[[], int]


def now_ms() -> int:
    """Return the current UTC time in epoch milliseconds."""
    return int(datetime.now(pytz.utc).timestamp() * 1000)


def ms_to_iso(timestamp_ms: int) -> str:
    """Convert epoch milliseconds to an ISO-8601 UTC string.

    The format matches a JavaScript ``Date`` serialized to JSON, for example
    ``2023-11-14T22:13:20.000Z``.
    """
    moment = datetime.fromtimestamp(timestamp_ms // 1000, pytz.utc).replace(
        microsecond=(timestamp_ms % 1000) * 1000
    )
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")
