# Hosted database client
# Async REST/RPC/auth access to the backend, one short-lived httpx client per call

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import httpx

logger = logging.getLogger(__name__)

OrderBy = Tuple[str, bool]


class BackendError(Exception):
    """
    Error reported by the backend (non-2xx response).

    Attributes mirror the backend error body: code, message, details, hint.
    """

    def __init__(self, message: str, code: Optional[str] = None, status: Optional[int] = None,
                 details: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code or "UNKNOWN"
        self.status = status
        self.details = details
        self.hint = hint

    def to_log_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class BackendUnavailableError(BackendError):
    """Transport failure: timeout, DNS, connection refused"""


def _format_filter_value(value: Any) -> str:
    if isinstance(value, bool):
        return "eq." + ("true" if value else "false")
    if value is None:
        return "is.null"
    if isinstance(value, (list, tuple, set)):
        return "in.(" + ",".join(str(v) for v in value) + ")"
    return f"eq.{value}"


class BackendClient:
    """
    Minimal client for the hosted database's REST surface.

    Requests carry the anon key as ``apikey`` and either the caller's access
    token or the key itself as the bearer credential, so row-level security is
    evaluated for the end user whenever a token is given.
    """

    def __init__(self, origin: str, api_key: str, access_token: Optional[str] = None,
                 timeout: float = 10.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        if not origin or not api_key:
            raise ValueError("Backend origin and key are required")

        self.origin = origin.rstrip("/")
        self.api_key = api_key
        self.access_token = access_token
        self.timeout = timeout
        self.transport = transport

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.access_token or self.api_key}",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    async def _request(self, method: str, path: str, *, params: Any = None,
                       json: Any = None, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
        url = f"{self.origin}{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.request(method, url, params=params, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Backend request timed out: {method} {path}")
            raise BackendUnavailableError(f"Backend request timed out: {e}", code="TIMEOUT")
        except httpx.RequestError as e:
            logger.warning(f"Backend request failed: {method} {path} - {e}")
            raise BackendUnavailableError(f"Backend request failed: {e}", code="NETWORK_ERROR")

        if response.status_code >= 400:
            raise self._error_from_response(response)

        return response

    @staticmethod
    def _error_from_response(response: httpx.Response) -> BackendError:
        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            return BackendError(f"HTTP {response.status_code}", code=f"HTTP_{response.status_code}",
                                status=response.status_code)

        message = body.get("message") or body.get("msg") or body.get("error_description") \
            or body.get("error") or f"HTTP {response.status_code}"
        code = body.get("code") or body.get("error_code") or f"HTTP_{response.status_code}"
        return BackendError(
            str(message),
            code=str(code),
            status=response.status_code,
            details=body.get("details"),
            hint=body.get("hint"),
        )

    @staticmethod
    def _build_params(columns: Sequence[str], filters: Optional[Dict[str, Any]],
                      order: Optional[Iterable[OrderBy]], limit: Optional[int],
                      offset: Optional[int]) -> List[Tuple[str, str]]:
        params = [("select", ",".join(columns))]
        for column, value in (filters or {}).items():
            params.append((column, _format_filter_value(value)))
        order_parts = [f"{column}.{'asc' if ascending else 'desc'}" for column, ascending in (order or [])]
        if order_parts:
            params.append(("order", ",".join(order_parts)))
        if limit is not None:
            params.append(("limit", str(limit)))
        if offset:
            params.append(("offset", str(offset)))
        return params

    async def select(self, table: str, columns: Sequence[str], filters: Optional[Dict[str, Any]] = None,
                     order: Optional[Iterable[OrderBy]] = None, limit: Optional[int] = None,
                     offset: Optional[int] = None, single: bool = False) -> Any:
        """
        Read rows from a table

        Args:
            table: Table name
            columns: Columns to select
            filters: {column: value}; list values become an ``in`` filter
            order: (column, ascending) pairs
            limit: Row limit
            offset: Row offset
            single: Return the first row (or None) instead of a list

        Returns:
            List of row dicts, or a single row dict / None
        """
        params = self._build_params(columns, filters, order, 1 if single else limit, offset)
        response = await self._request("GET", f"/rest/v1/{table}", params=params, headers=self._headers())
        rows = response.json()
        if not isinstance(rows, list):
            raise BackendError(f"Unexpected response shape from {table}", code="INVALID_RESPONSE",
                               status=response.status_code)
        if single:
            return rows[0] if rows else None
        return rows

    async def count(self, table: str, filters: Optional[Dict[str, Any]] = None,
                    since: Optional[Tuple[str, str]] = None) -> int:
        """
        Count rows matching the filters, optionally with ``column >= value``
        """
        params = self._build_params(["id"], filters, None, None, None)
        if since:
            params.append((since[0], f"gte.{since[1]}"))

        response = await self._request(
            "HEAD", f"/rest/v1/{table}", params=params,
            headers=self._headers({"Prefer": "count=exact"})
        )
        content_range = response.headers.get("content-range", "")
        total = content_range.rsplit("/", 1)[-1] if "/" in content_range else ""
        try:
            return int(total)
        except ValueError:
            raise BackendError(f"Missing row count for {table}", code="INVALID_RESPONSE",
                               status=response.status_code)

    async def insert(self, table: str, row: Dict[str, Any]) -> None:
        await self._request(
            "POST", f"/rest/v1/{table}", json=row,
            headers=self._headers({"Prefer": "return=minimal", "Content-Type": "application/json"})
        )

    async def rpc(self, name: str, params: Dict[str, Any]) -> Any:
        """
        Call a stored procedure with named parameters

        Returns:
            Decoded JSON result (None for an empty body)
        """
        response = await self._request(
            "POST", f"/rest/v1/rpc/{name}", json=params,
            headers=self._headers({"Content-Type": "application/json"})
        )
        if not response.content:
            return None
        return response.json()

    async def get_user(self, token: str) -> Dict[str, Any]:
        """
        Ask the auth service who owns a token

        Raises:
            BackendError: token rejected (status 401/403) or other failure
        """
        headers = self._headers()
        headers["Authorization"] = f"Bearer {token}"
        response = await self._request("GET", "/auth/v1/user", headers=headers)
        user = response.json()
        if not isinstance(user, dict) or not user.get("id"):
            raise BackendError("Auth service returned no user", code="NO_USER", status=401)
        return user
