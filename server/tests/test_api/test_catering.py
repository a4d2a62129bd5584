# Catering endpoint tests

from datetime import datetime, timedelta, timezone

import pytest

from db.backend import BackendError

CATERING_URL = "/api/catering"


@pytest.fixture
def catering_payload():
    event_at = datetime.now(timezone.utc) + timedelta(days=3)
    return {
        "name": " Ольга ",
        "phone": "8 (900) 123-45-67",
        "eventDateTime": event_at.isoformat(),
        "guests": 40,
        "comment": " Фуршет ",
    }


@pytest.mark.usefixtures("service_role_env")
class TestCateringRequest:
    """POST /api/catering"""

    def test_request_is_stored(self, client, fake_backend, catering_payload):
        response = client.post(
            CATERING_URL, json=catering_payload,
            headers={"x-forwarded-for": "203.0.113.5, 10.0.0.1", "user-agent": "pytest"}
        )

        assert response.status_code == 200
        assert response.json() == {"ok": True}

        table, row = fake_backend.inserted[0]
        assert table == "catering_requests"
        assert row["name"] == "Ольга"
        assert row["phone"] == "+79001234567"
        assert row["guests"] == 40
        assert row["comment"] == "Фуршет"
        assert row["source"] == "site"
        assert row["request_ip"] == "203.0.113.5"
        assert row["user_agent"] == "pytest"
        assert fake_backend.instances[0]["api_key"] == "service-role-key"

    def test_rate_limit_counts_by_phone(self, client, fake_backend, catering_payload):
        client.post(CATERING_URL, json=catering_payload)

        count_call = fake_backend.calls_of("count")[0]
        assert count_call[1] == "catering_requests"
        assert count_call[2]["filters"] == {"phone": "+79001234567"}
        assert count_call[2]["since"][0] == "created_at"

    def test_rate_limited(self, client, fake_backend, catering_payload):
        fake_backend.count_results["catering_requests"] = 3

        response = client.post(CATERING_URL, json=catering_payload)

        assert response.status_code == 429
        assert response.json()["code"] == "RATE_LIMITED"
        assert fake_backend.inserted == []

    def test_under_limit(self, client, fake_backend, catering_payload):
        fake_backend.count_results["catering_requests"] = 2

        response = client.post(CATERING_URL, json=catering_payload)

        assert response.status_code == 200

    @pytest.mark.parametrize("change", [
        {"name": ""},
        {"name": "x" * 81},
        {"phone": "123"},
        {"eventDateTime": "tomorrow"},
        {"guests": 0},
        {"guests": 5001},
        {"guests": 2.5},
        {"comment": "x" * 1001},
    ])
    def test_invalid_payload(self, client, fake_backend, catering_payload, change):
        response = client.post(CATERING_URL, json={**catering_payload, **change})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PAYLOAD"
        assert fake_backend.instances == []

    def test_event_too_soon(self, client, fake_backend, catering_payload):
        soon = datetime.now(timezone.utc) + timedelta(minutes=30)

        response = client.post(CATERING_URL, json={**catering_payload, "eventDateTime": soon.isoformat()})

        assert response.status_code == 400
        assert "60 minutes" in response.json()["error"]

    def test_invalid_json(self, client, fake_backend):
        response = client.post(CATERING_URL, content="{", headers={"content-type": "application/json"})

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_JSON"

    def test_insert_failure(self, client, fake_backend, catering_payload):
        fake_backend.insert_errors["catering_requests"] = BackendError("boom", code="XX000", status=500)

        response = client.post(CATERING_URL, json=catering_payload)

        assert response.status_code == 502
        assert response.json()["code"] == "CATERING_REQUEST_FAILED"


class TestCateringConfiguration:

    @pytest.mark.usefixtures("backend_env")
    def test_service_role_key_required(self, client, fake_backend, catering_payload):
        response = client.post(CATERING_URL, json=catering_payload)

        assert response.status_code == 500
        assert response.json()["code"] == "MISCONFIGURED_ENV"
        assert response.json()["missing"] == ["SUPABASE_SERVICE_ROLE_KEY"]
        assert fake_backend.instances == []
