"""Response Envelope — the {status, message, data} shape every endpoint returns.

Invariants:
    - status is True exactly when the operation succeeded
    - data is None on failure unless the failure carries details (validation fields)
"""

from typing import Any


def success(message: str, data: Any = None) -> dict:
    return {"status": True, "message": message, "data": data}


def failure(message: str, data: Any = None) -> dict:
    return {"status": False, "message": message, "data": data}
