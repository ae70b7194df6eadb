"""
Response envelopes.

Success: {"success": true, "count": N, "data": ...}   (count only for lists)
Failure: {"success": false, "error": "message"}
"""

from typing import Any, Dict, Optional, Tuple

from internhub.core.errors import ErrorResponse


def success(data: Any = None, count: Optional[int] = None) -> Dict[str, Any]:
    body = {"success": True}
    if count is not None:
        body["count"] = count
    if data is not None:
        body["data"] = data
    return body


def collection(items: list) -> Dict[str, Any]:
    return success(items, count=len(items))


def failure(error: ErrorResponse) -> Tuple[int, Dict[str, Any]]:
    return error.status_code, {"success": False, "error": error.message}
