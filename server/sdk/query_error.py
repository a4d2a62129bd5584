# Query error normalisation
# Collapses client, backend and unexpected failures into one error shape for display

from typing import Optional

from .api_client import ApiClientError, HTTP_ERROR, TIMEOUT

KIND_UNAUTHORIZED = "unauthorized"
KIND_SERVER = "server"
KIND_TIMEOUT = "timeout"
KIND_UNKNOWN = "unknown"


class QueryError(Exception):
    """
    Normalised read failure

    Attributes:
        code: "<base code>:<cause code>", e.g. MENU_LOAD_FAILED:TIMEOUT
        message: Text safe to show to the customer
        status: HTTP status when known
        kind: unauthorized, server, timeout or unknown
    """

    def __init__(self, code: str, message: str, status: Optional[int], kind: str):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.kind = kind


def _has_error_fields(error: BaseException) -> bool:
    return hasattr(error, "message") or hasattr(error, "status")


def normalize_query_error(error: BaseException, base_code: str, fallback_message: str,
                          configuration_message: Optional[str] = None) -> QueryError:
    """
    Turn any read failure into a QueryError

    Args:
        error: The caught exception
        base_code: Prefix of the resulting code
        fallback_message: Message when nothing better is known
        configuration_message: Message for 500/503 answers, which mean a
            server-side configuration problem

    Returns:
        QueryError
    """
    if isinstance(error, ApiClientError):
        is_server = error.code == HTTP_ERROR and error.status in (500, 503)
        if error.status == 401:
            kind = KIND_UNAUTHORIZED
        elif error.code == TIMEOUT:
            kind = KIND_TIMEOUT
        elif is_server:
            kind = KIND_SERVER
        else:
            kind = KIND_UNKNOWN
        message = (configuration_message or fallback_message) if is_server else fallback_message
        return QueryError(f"{base_code}:{error.code}", message, error.status, kind)

    if _has_error_fields(error):
        status = getattr(error, "status", None)
        status = status if isinstance(status, int) and not isinstance(status, bool) else None
        raw_code = getattr(error, "code", None)
        raw_code = raw_code.strip().upper() if isinstance(raw_code, str) and raw_code.strip() else "BACKEND"
        raw_message = getattr(error, "message", None)
        message = raw_message.strip() if isinstance(raw_message, str) and raw_message.strip() else fallback_message

        if status in (401, 403):
            kind = KIND_UNAUTHORIZED
        elif status is not None and status >= 500:
            kind = KIND_SERVER
        else:
            kind = KIND_UNKNOWN
        return QueryError(f"{base_code}:{raw_code}", message, status, kind)

    text = str(error).strip()
    return QueryError(f"{base_code}:UNKNOWN", text or fallback_message, None, KIND_UNKNOWN)
