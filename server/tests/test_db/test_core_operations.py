# Write-side operation tests

import pytest

from db.backend import BackendError

ORDER = {
    "total": 1000,
    "customerName": "Иван",
    "customerPhone": "+79000000000",
    "address": "Ленина, 1",
    "comment": None,
    "paymentMethod": "cash",
    "paymentCode": None,
    "items": [{"title": "Pizza (M)", "qty": 1, "price": 1000}],
}


@pytest.mark.asyncio
class TestCreateOrder:
    """Atomic order procedure"""

    async def test_procedure_parameters(self, core_ops, backend):
        backend.rpc_results["create_order_with_items"] = "order-1"

        order_id = await core_ops.create_order_with_items(ORDER, "idem-1")

        assert order_id == "order-1"
        name, params = backend.calls_of("rpc")[0][1:]
        assert name == "create_order_with_items"
        assert params == {
            "p_total": 1000,
            "p_customer_name": "Иван",
            "p_customer_phone": "+79000000000",
            "p_address": "Ленина, 1",
            "p_comment": None,
            "p_payment_method": "cash",
            "p_payment_code": None,
            "p_items": ORDER["items"],
            "p_idempotency_key": "idem-1",
        }

    async def test_numeric_id_is_stringified(self, core_ops, backend):
        backend.rpc_results["create_order_with_items"] = 42

        assert await core_ops.create_order_with_items(ORDER, "idem-1") == "42"

    @pytest.mark.parametrize("result", [None, "", "  ", True, {"id": "x"}])
    async def test_missing_id(self, core_ops, backend, result):
        backend.rpc_results["create_order_with_items"] = result

        with pytest.raises(BackendError) as exc_info:
            await core_ops.create_order_with_items(ORDER, "idem-1")

        assert exc_info.value.code == "NO_ORDER_ID"


@pytest.mark.asyncio
class TestCateringInsert:

    async def test_row(self, core_ops, backend):
        request = {"name": "Анна", "phone": "+79001234567", "event_at": "2030-01-01T12:00:00+00:00",
                   "guests": 20, "comment": None}

        await core_ops.create_catering_request(request, "203.0.113.5", "pytest")

        table, row = backend.inserted[0]
        assert table == "catering_requests"
        assert row["source"] == "site"
        assert row["request_ip"] == "203.0.113.5"
        assert row["user_agent"] == "pytest"
        assert row["guests"] == 20
