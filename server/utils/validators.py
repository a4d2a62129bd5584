# Payload validators
# Shape checks run on decoded JSON before it is turned into typed models

import math
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

from utils.payments import create_sberbank_payment_code

PAYMENT_METHODS = ("cash", "sberbank_code")
DEFAULT_PAYMENT_METHOD = "cash"

CATERING_LIMITS = {
    "name_max": 80,
    "comment_max": 1000,
    "guests_min": 1,
    "guests_max": 5000,
    "min_minutes_before_event": 60,
}

PHONE_PATTERN = re.compile(r'^\+?[0-9()\-\s]{10,20}$')


def validate_number(value: Any) -> bool:
    """
    Check for a JSON number; booleans do not count

    Args:
        value: Decoded JSON value

    Returns:
        Validation result
    """
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_finite_number(value: Any) -> bool:
    """
    Check for a finite JSON number (rejects NaN and Infinity literals and
    integers too large for a float)
    """
    if not validate_number(value):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def validate_optional_string(value: Any) -> bool:
    return value is None or isinstance(value, str)


def validate_payment_method(method: Any) -> bool:
    return method in PAYMENT_METHODS


def validate_order_item(item: Any) -> bool:
    """
    Check one cart line: string title, finite qty and price
    """
    if not isinstance(item, dict):
        return False

    return (
        isinstance(item.get("title"), str)
        and validate_finite_number(item.get("qty"))
        and validate_finite_number(item.get("price"))
    )


def validate_order_payload(payload: Any) -> bool:
    """
    Validate a checkout request body

    Args:
        payload: Decoded JSON body

    Returns:
        True when the body can be turned into an order request
    """
    if not isinstance(payload, dict):
        return False

    if not validate_finite_number(payload.get("total")):
        return False

    for field in ("customerName", "customerPhone", "address"):
        if not isinstance(payload.get(field), str):
            return False

    if not validate_optional_string(payload.get("comment")):
        return False

    items = payload.get("items")
    if not isinstance(items, list):
        return False

    if "paymentMethod" in payload and not validate_payment_method(payload["paymentMethod"]):
        return False

    if "paymentCode" in payload and not validate_optional_string(payload["paymentCode"]):
        return False

    return all(validate_order_item(item) for item in items)


def validate_string_length(value: Any, min_length: int = 0, max_length: Optional[int] = None) -> bool:
    """
    Validate string length

    Args:
        value: String value
        min_length: Minimum length
        max_length: Maximum length

    Returns:
        Validation result
    """
    if not isinstance(value, str):
        return False

    if len(value) < min_length:
        return False

    if max_length is not None and len(value) > max_length:
        return False

    return True


def normalize_phone(raw: str) -> str:
    """
    Bring a Russian phone number to +7XXXXXXXXXX form.

    8XXXXXXXXXX and 7XXXXXXXXXX become +7XXXXXXXXXX, a bare ten digit number
    gets +7 prepended, anything else just gets a leading '+'.
    """
    stripped = re.sub(r'[()\-\s]', '', raw.strip())
    if stripped.startswith("8") and len(stripped) == 11:
        return f"+7{stripped[1:]}"
    if not stripped.startswith("+") and len(stripped) == 11 and stripped.startswith("7"):
        return f"+{stripped}"
    if not stripped.startswith("+") and len(stripped) == 10:
        return f"+7{stripped}"
    return stripped if stripped.startswith("+") else f"+{stripped}"


def _parse_event_datetime(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def validate_catering_payload(
    payload: Any,
    now: Optional[datetime] = None
) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """
    Validate and normalise a catering request body

    Args:
        payload: Decoded JSON body
        now: Reference time, defaults to the current UTC time

    Returns:
        (normalised values, None) on success, (None, error message) otherwise
    """
    if not isinstance(payload, dict):
        return None, "Invalid payload"

    now = now or datetime.now(timezone.utc)
    name = payload.get("name")
    phone = payload.get("phone")
    event_at_raw = payload.get("eventDateTime")
    guests = payload.get("guests")
    comment = payload.get("comment")

    if not isinstance(name, str) or not validate_string_length(name.strip(), 1, CATERING_LIMITS["name_max"]):
        return None, "Invalid name"

    if not isinstance(phone, str) or not PHONE_PATTERN.match(phone.strip()):
        return None, "Invalid phone"

    if not isinstance(event_at_raw, str):
        return None, "Invalid eventDateTime"

    event_at = _parse_event_datetime(event_at_raw)
    if event_at is None:
        return None, "Invalid eventDateTime"

    min_minutes = CATERING_LIMITS["min_minutes_before_event"]
    if event_at < now + timedelta(minutes=min_minutes):
        return None, f"eventDateTime must be at least {min_minutes} minutes in future"

    if (
        not isinstance(guests, int)
        or isinstance(guests, bool)
        or guests < CATERING_LIMITS["guests_min"]
        or guests > CATERING_LIMITS["guests_max"]
    ):
        return None, "Invalid guests"

    if not validate_optional_string(comment):
        return None, "Invalid comment"

    if isinstance(comment, str) and len(comment.strip()) > CATERING_LIMITS["comment_max"]:
        return None, "Comment is too long"

    return {
        "name": name.strip(),
        "phone": normalize_phone(phone),
        "event_at": event_at.astimezone(timezone.utc).isoformat(),
        "guests": guests,
        "comment": (comment.strip() or None) if isinstance(comment, str) else None,
    }, None


def normalize_order_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Normalise a validated checkout body before it is sent to the backend.

    Free-text fields are trimmed, an empty comment becomes None, the payment
    method falls back to cash and a payment code is only kept for
    sberbank_code (derived from the total when the client sent none).
    """
    payment_method = payload.get("paymentMethod")
    if not validate_payment_method(payment_method):
        payment_method = DEFAULT_PAYMENT_METHOD

    payment_code = None
    if payment_method == "sberbank_code":
        supplied = payload.get("paymentCode")
        payment_code = (supplied.strip() if isinstance(supplied, str) else "") \
            or create_sberbank_payment_code(payload["total"])

    comment = payload.get("comment")
    comment = comment.strip() if isinstance(comment, str) else ""

    return {
        "total": payload["total"],
        "customerName": payload["customerName"].strip(),
        "customerPhone": payload["customerPhone"].strip(),
        "address": payload["address"].strip(),
        "comment": comment or None,
        "paymentMethod": payment_method,
        "paymentCode": payment_code,
        "items": payload["items"],
    }
