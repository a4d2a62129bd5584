# Shared API test fixtures

import pytest

USER_TOKEN = "user-token"
STAFF_TOKEN = "staff-token"

TEST_USER = {"id": "user-1", "email": "test@example.com", "role": "authenticated"}
TEST_STAFF = {"id": "staff-1", "email": "staff@example.com", "role": "authenticated"}


@pytest.fixture
def order_payload():
    """Valid checkout body"""
    return {
        "total": 1000,
        "customerName": "  Иван  ",
        "customerPhone": " +7 900 000-00-00 ",
        "address": " Ленина, 1 ",
        "comment": "  ",
        "items": [{"title": "Pizza", "qty": 1, "price": 1000}],
    }


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {USER_TOKEN}"}


@pytest.fixture
def order_headers(auth_headers):
    return {**auth_headers, "idempotency-key": "idem-same"}


@pytest.fixture
def known_users(fake_backend):
    """Tokens the fake auth service accepts"""
    fake_backend.users[USER_TOKEN] = TEST_USER
    fake_backend.users[STAFF_TOKEN] = TEST_STAFF
    return fake_backend


@pytest.fixture
def idempotent_orders(fake_backend):
    """create_order_with_items keyed on p_idempotency_key, like the real procedure"""
    orders_by_key = {}

    def create_order(params):
        key = params["p_idempotency_key"]
        if key not in orders_by_key:
            orders_by_key[key] = f"order-idem-{len(orders_by_key) + 1}"
        return orders_by_key[key]

    fake_backend.rpc_results["create_order_with_items"] = create_order
    return orders_by_key
