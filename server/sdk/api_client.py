# Storefront API client
# JSON-over-HTTP calls with a bounded timeout and a closed set of failure codes

import logging
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0

HTTP_ERROR = "HTTP_ERROR"
INVALID_CONTENT_TYPE = "INVALID_CONTENT_TYPE"
INVALID_JSON = "INVALID_JSON"
TIMEOUT = "TIMEOUT"
NETWORK_ERROR = "NETWORK_ERROR"


class ApiClientError(Exception):
    """
    Failure of a storefront API call.

    Attributes:
        code: One of HTTP_ERROR, INVALID_CONTENT_TYPE, INVALID_JSON, TIMEOUT, NETWORK_ERROR
        status: HTTP status, None for transport failures
        url: Requested URL
        payload: Decoded JSON error body when the server sent one
    """

    def __init__(self, code: str, message: str, status: Optional[int], url: str,
                 payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.status = status
        self.url = url
        self.payload = payload

    def __repr__(self):
        return f"ApiClientError(code={self.code!r}, status={self.status!r}, url={self.url!r})"


def _error_payload(response: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


async def fetch_json(
    url: str,
    method: str = "GET",
    headers: Optional[Dict[str, str]] = None,
    json: Any = None,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> Any:
    """
    Request a URL and decode its JSON response

    Args:
        url: Absolute URL
        method: HTTP method
        headers: Request headers
        json: Request body, sent as JSON when given
        timeout: Seconds before the call fails with TIMEOUT
        transport: Custom httpx transport

    Returns:
        Decoded JSON body

    Raises:
        ApiClientError: on any non-2xx status, non-JSON response or transport failure
    """
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.request(method, url, headers=headers, json=json)
    except httpx.TimeoutException:
        raise ApiClientError(TIMEOUT, f"Request timed out after {int(timeout * 1000)}ms", None, url)
    except httpx.RequestError as e:
        raise ApiClientError(NETWORK_ERROR, str(e) or "Network request failed", None, url)

    if not response.is_success:
        raise ApiClientError(
            HTTP_ERROR,
            f"Request failed with status {response.status_code}",
            response.status_code,
            url,
            payload=_error_payload(response),
        )

    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type.lower():
        raise ApiClientError(
            INVALID_CONTENT_TYPE,
            f"Expected JSON but received '{content_type or 'unknown'}'",
            response.status_code,
            url,
        )

    try:
        return response.json()
    except ValueError:
        raise ApiClientError(INVALID_JSON, "Invalid JSON response payload", response.status_code, url)
