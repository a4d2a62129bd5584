# Unified API response helpers
# Every error body carries a stable "code" field for programmatic branching

import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from fastapi.responses import JSONResponse

MISCONFIGURED_ENV = "MISCONFIGURED_ENV"
MISCONFIGURED_ENV_MESSAGE = "Required runtime environment variables are missing"


def create_diagnostic_code(prefix: str = "ORD") -> str:
    """
    Generate a short correlation code, e.g. ORD-1A2B3C4D.

    The code is returned to the caller and written to the server log so a
    client-reported incident can be matched with the backend failure.
    """
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def create_success_response(
    data: Any,
    status_code: int = 200,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """
    Create a success response

    Args:
        data: Response body
        status_code: HTTP status
        headers: Extra response headers

    Returns:
        JSON response
    """
    return JSONResponse(status_code=status_code, content=data, headers=headers)


def create_error_response(
    code: str,
    error: str,
    status_code: int,
    headers: Optional[Dict[str, str]] = None,
    **extra: Any
) -> JSONResponse:
    """
    Create an error response of the form {"code": ..., "error": ..., **extra}

    Args:
        code: Stable error code
        error: Human readable message, never raw backend internals
        status_code: HTTP status
        headers: Extra response headers
        **extra: Additional body fields (diagnosticCode, missing, failures...)

    Returns:
        JSON response
    """
    content: Dict[str, Any] = {"code": code, "error": error}
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def create_misconfigured_response(missing: List[str]) -> JSONResponse:
    """500 response for a deployment without backend credentials"""
    return create_error_response(
        MISCONFIGURED_ENV,
        MISCONFIGURED_ENV_MESSAGE,
        500,
        missing=missing
    )


def create_api_exception(
    status_code: int,
    code: str,
    error: str,
    headers: Optional[Dict[str, str]] = None,
    **extra: Any
) -> HTTPException:
    """
    HTTPException whose detail is already a structured error body.

    Raised from dependencies; the app-level handler renders the detail as is.
    """
    detail: Dict[str, Any] = {"code": code, "error": error}
    detail.update(extra)
    return HTTPException(status_code=status_code, detail=detail, headers=headers)
