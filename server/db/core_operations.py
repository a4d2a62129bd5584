# Write-side business operations
# Order placement goes through one atomic stored procedure; catering requests are a plain insert

import logging
from typing import Any, Dict, Optional

from .backend import BackendClient, BackendError

logger = logging.getLogger(__name__)

CREATE_ORDER_RPC = "create_order_with_items"


class CoreOperations:
    """
    Write operations against the hosted database
    """
    def __init__(self, backend: BackendClient):
        self.backend = backend

    @staticmethod
    def _build_order_params(order: Dict[str, Any], idempotency_key: str) -> Dict[str, Any]:
        return {
            "p_total": order["total"],
            "p_customer_name": order["customerName"],
            "p_customer_phone": order["customerPhone"],
            "p_address": order["address"],
            "p_comment": order.get("comment"),
            "p_payment_method": order["paymentMethod"],
            "p_payment_code": order.get("paymentCode"),
            "p_items": order["items"],
            "p_idempotency_key": idempotency_key,
        }

    async def create_order_with_items(self, order: Dict[str, Any], idempotency_key: str) -> str:
        """
        Create an order and its items in one backend transaction.

        A repeated idempotency key for the same caller returns the id of the
        order created the first time; the backend enforces that.

        Args:
            order: Normalised order payload (camelCase keys)
            idempotency_key: Trimmed client key

        Returns:
            The order id

        Raises:
            BackendError: the procedure failed or returned no id
        """
        result = await self.backend.rpc(CREATE_ORDER_RPC, self._build_order_params(order, idempotency_key))

        order_id = str(result).strip() if isinstance(result, (str, int)) and not isinstance(result, bool) else ""
        if not order_id:
            raise BackendError("Order procedure returned no id", code="NO_ORDER_ID")

        logger.info(f"Order created: {order_id}")
        return order_id

    async def create_catering_request(self, request: Dict[str, Any], request_ip: str,
                                      user_agent: Optional[str]) -> None:
        """
        Store a validated catering request

        Args:
            request: Output of validate_catering_payload
            request_ip: First x-forwarded-for entry or "unknown"
            user_agent: Caller user agent
        """
        await self.backend.insert("catering_requests", {
            "name": request["name"],
            "phone": request["phone"],
            "event_at": request["event_at"],
            "guests": request["guests"],
            "comment": request["comment"],
            "source": "site",
            "request_ip": request_ip,
            "user_agent": user_agent,
        })
        logger.info(f"Catering request stored for {request['phone']}")
