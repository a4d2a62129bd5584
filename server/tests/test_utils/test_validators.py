# Payload validator tests

from datetime import datetime, timedelta, timezone

import pytest

from utils.validators import (
    normalize_order_payload, normalize_phone, validate_catering_payload, validate_order_payload
)

ORDER = {
    "total": 1000,
    "customerName": "Иван",
    "customerPhone": "+7 900 000-00-00",
    "address": "Ленина, 1",
    "items": [{"title": "Pizza", "qty": 1, "price": 1000}],
}

NOW = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestOrderPayload:
    """Checkout body shape"""

    def test_minimal(self):
        assert validate_order_payload(ORDER)

    def test_empty_items_are_accepted(self):
        assert validate_order_payload({**ORDER, "items": []})

    def test_optional_fields(self):
        assert validate_order_payload({**ORDER, "comment": None, "paymentMethod": "sberbank_code",
                                       "paymentCode": None})

    @pytest.mark.parametrize("change", [
        {"total": float("nan")},
        {"total": float("inf")},
        {"total": None},
        {"address": 1},
        {"items": None},
        {"items": ["Pizza"]},
        {"items": [{"title": "Pizza", "qty": "1", "price": 1}]},
        {"items": [{"title": "Pizza", "qty": 1}]},
        {"paymentMethod": None},
        {"total": 10 ** 400},
        {"items": [{"title": "Pizza", "qty": 10 ** 400, "price": 1}]},
        {"items": [{"title": "Pizza", "qty": 1, "price": -(10 ** 400)}]},
    ])
    def test_rejected(self, change):
        assert not validate_order_payload({**ORDER, **change})

    @pytest.mark.parametrize("payload", [None, [], "order"])
    def test_non_object(self, payload):
        assert not validate_order_payload(payload)


class TestOrderNormalisation:

    def test_trimmed(self):
        order = normalize_order_payload({**ORDER, "customerName": "  Иван ", "address": " Ленина, 1 ",
                                         "comment": "   "})

        assert order["customerName"] == "Иван"
        assert order["address"] == "Ленина, 1"
        assert order["comment"] is None
        assert order["paymentMethod"] == "cash"
        assert order["paymentCode"] is None

    def test_comment_is_kept(self):
        assert normalize_order_payload({**ORDER, "comment": " домофон 12 "})["comment"] == "домофон 12"

    def test_blank_payment_code_is_derived(self):
        order = normalize_order_payload({**ORDER, "total": 1140, "paymentMethod": "sberbank_code",
                                         "paymentCode": "  "})

        assert order["paymentCode"] == "SBER|TAGIL_PIZZA|114000|9047"

    def test_items_are_passed_through(self):
        items = [{"title": "Pizza (L)", "qty": 2, "price": 700, "extra": True}]

        assert normalize_order_payload({**ORDER, "items": items})["items"] is items


class TestPhone:

    @pytest.mark.parametrize("raw, expected", [
        ("8 (900) 123-45-67", "+79001234567"),
        ("79001234567", "+79001234567"),
        ("9001234567", "+79001234567"),
        ("+7 900 123 45 67", "+79001234567"),
        ("+44 20 7946 0958", "+442079460958"),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_phone(raw) == expected


class TestCateringPayload:
    """Catering request validation"""

    def payload(self, **changes):
        body = {
            "name": " Анна ",
            "phone": "8 (900) 123-45-67",
            "eventDateTime": (NOW + timedelta(days=2)).isoformat(),
            "guests": 30,
            "comment": "  ",
        }
        body.update(changes)
        return body

    def test_valid(self):
        values, error = validate_catering_payload(self.payload(), now=NOW)

        assert error is None
        assert values == {
            "name": "Анна",
            "phone": "+79001234567",
            "event_at": "2030-01-03T12:00:00+00:00",
            "guests": 30,
            "comment": None,
        }

    def test_zulu_time(self):
        values, error = validate_catering_payload(self.payload(eventDateTime="2030-01-03T12:00:00Z"), now=NOW)

        assert error is None
        assert values["event_at"] == "2030-01-03T12:00:00+00:00"

    @pytest.mark.parametrize("changes, message", [
        ({"name": "  "}, "Invalid name"),
        ({"name": "x" * 81}, "Invalid name"),
        ({"phone": "12345"}, "Invalid phone"),
        ({"phone": None}, "Invalid phone"),
        ({"eventDateTime": "tomorrow"}, "Invalid eventDateTime"),
        ({"eventDateTime": 5}, "Invalid eventDateTime"),
        ({"guests": 0}, "Invalid guests"),
        ({"guests": 5001}, "Invalid guests"),
        ({"guests": 2.5}, "Invalid guests"),
        ({"guests": True}, "Invalid guests"),
        ({"comment": 1}, "Invalid comment"),
        ({"comment": "x" * 1001}, "Comment is too long"),
    ])
    def test_rejected(self, changes, message):
        values, error = validate_catering_payload(self.payload(**changes), now=NOW)

        assert values is None
        assert error == message

    def test_event_too_soon(self):
        soon = (NOW + timedelta(minutes=30)).isoformat()

        values, error = validate_catering_payload(self.payload(eventDateTime=soon), now=NOW)

        assert values is None
        assert error == "eventDateTime must be at least 60 minutes in future"

    def test_non_object(self):
        assert validate_catering_payload(["x"], now=NOW) == (None, "Invalid payload")
