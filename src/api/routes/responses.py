"""Response envelope helpers shared by the route modules.

Business failures are answered with HTTP 200 and ``success: false`` so the
client can show the message; only unexpected faults use HTTP 500.
"""

from typing import Any


def ok(**payload: Any) -> dict:
    return {"success": True, **payload}


def fail(message: str) -> dict:
    return {"success": False, "message": message}
