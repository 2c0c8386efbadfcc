from typing import Any, Dict, List, Optional

from fastapi.responses import JSONResponse


def envelope(data: Any = None, message: Optional[str] = None, pagination: Optional[Dict[str, int]] = None,
             errors: Optional[List[str]] = None, success: bool = True) -> Dict[str, Any]:
    body = {"success": success}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    if errors:
        body["errors"] = errors
    if pagination is not None:
        body["pagination"] = pagination
    return body


def error_response(status_code: int, message: str, errors: Optional[List[str]] = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=envelope(message=message, errors=errors, success=False),
        headers=headers,
    )
