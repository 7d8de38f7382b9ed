"""Acknowledgment responses for webhook notifications.

Both helpers answer HTTP 200. A failure is reported through the body flag
only.
"""

from typing import Any, Dict, Union

from fastapi import status
from fastapi.responses import JSONResponse


def success_body() -> Dict[str, Any]:
    """Body acknowledging an accepted notification."""
    return {"received": True}


def error_body(error: Union[BaseException, str]) -> Dict[str, Any]:
    """Body acknowledging a notification that could not be processed."""
    return {"received": False, "error": str(error)}


def success_response() -> JSONResponse:
    """Acknowledge an accepted notification."""
    return JSONResponse(status_code=status.HTTP_200_OK, content=success_body())


def error_response(error: Union[BaseException, str]) -> JSONResponse:
    """Acknowledge a rejected notification (still HTTP 200)."""
    return JSONResponse(status_code=status.HTTP_200_OK, content=error_body(error))
