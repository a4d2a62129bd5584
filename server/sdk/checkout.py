# Checkout client
# Submits an order once per logical checkout; safe retries reuse the same idempotency key

import logging
import uuid
from typing import Any, Dict, Optional

import httpx

from .api_client import ApiClientError, DEFAULT_TIMEOUT_SECONDS, HTTP_ERROR, NETWORK_ERROR, TIMEOUT, fetch_json
from .cart import CartStore
from .retry import with_retry
from utils.payments import create_sberbank_payment_code

logger = logging.getLogger(__name__)

ORDER_CREATE_PATH = "/api/orders/create"
DEFAULT_CHECKOUT_ATTEMPTS = 2
SAFE_RETRY_CODES = (TIMEOUT, NETWORK_ERROR)
DEFAULT_FAILURE_MESSAGE = "Не удалось оформить заказ. Попробуйте снова."


def create_idempotency_key() -> str:
    return str(uuid.uuid4())


def create_checkout_diagnostic_code() -> str:
    return f"CHK-{uuid.uuid4().hex[:8].upper()}"


class CheckoutError(Exception):
    """Checkout failure with the server's code and diagnostic code"""

    def __init__(self, message: str, code: str, diagnostic_code: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.diagnostic_code = diagnostic_code
        self.status = status


def _to_checkout_error(error: ApiClientError) -> CheckoutError:
    if error.code == HTTP_ERROR:
        payload = error.payload or {}
        return CheckoutError(
            payload.get("error") or DEFAULT_FAILURE_MESSAGE,
            payload.get("code") or "ORDER_CREATE_FAILED",
            payload.get("diagnosticCode") or create_checkout_diagnostic_code(),
            status=error.status,
        )
    if error.code in SAFE_RETRY_CODES:
        return CheckoutError(error.message, error.code, create_checkout_diagnostic_code())
    return CheckoutError(DEFAULT_FAILURE_MESSAGE, "UNKNOWN", create_checkout_diagnostic_code(), status=error.status)


def build_order(cart: CartStore, customer_name: str, customer_phone: str, address: str,
                comment: Optional[str] = None, payment_method: str = "cash") -> Dict[str, Any]:
    """Checkout request body for the current cart"""
    total = cart.total
    return {
        "total": total,
        "customerName": customer_name.strip(),
        "customerPhone": customer_phone.strip(),
        "address": address.strip(),
        "comment": (comment or "").strip() or None,
        "paymentMethod": payment_method,
        "paymentCode": create_sberbank_payment_code(total) if payment_method == "sberbank_code" else None,
        "items": cart.to_order_items(),
    }


class CheckoutClient:
    """
    Client for the order submission endpoint

    Args:
        base_url: Storefront API origin
        timeout: Per-attempt timeout in seconds
        attempts: Total attempts; only TIMEOUT and NETWORK_ERROR are retried
        transport: Custom httpx transport
    """

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 attempts: int = DEFAULT_CHECKOUT_ATTEMPTS,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.attempts = attempts
        self.transport = transport

    async def _post(self, order: Dict[str, Any], access_token: str, idempotency_key: str) -> str:
        try:
            payload = await fetch_json(
                f"{self.base_url}{ORDER_CREATE_PATH}",
                method="POST",
                headers={
                    "authorization": f"Bearer {access_token}",
                    "idempotency-key": idempotency_key,
                },
                json=order,
                timeout=self.timeout,
                transport=self.transport,
            )
        except ApiClientError as e:
            raise _to_checkout_error(e)

        order_id = payload.get("orderId") if isinstance(payload, dict) else None
        if not isinstance(order_id, str) or not order_id:
            raise CheckoutError(DEFAULT_FAILURE_MESSAGE, "ORDER_CREATE_FAILED", create_checkout_diagnostic_code())
        return order_id

    async def submit(self, order: Dict[str, Any], access_token: Optional[str],
                     idempotency_key: Optional[str] = None) -> str:
        """
        Submit one logical checkout

        Args:
            order: Request body, see build_order
            access_token: Session token of the customer
            idempotency_key: Key for this checkout; minted when not given

        Returns:
            The order id

        Raises:
            CheckoutError: after the last attempt, or at once for non-retryable failures
        """
        key = idempotency_key or create_idempotency_key()
        if not access_token:
            raise CheckoutError("Unauthorized", "UNAUTHORIZED", f"CHK-{key[:8].upper()}")

        order_id = await with_retry(
            lambda: self._post(order, access_token, key),
            attempts=self.attempts,
            should_retry=lambda error: isinstance(error, CheckoutError) and error.code in SAFE_RETRY_CODES,
        )
        logger.info(f"Order submitted: {order_id}")
        return order_id
