# Payment helpers

import math

SBERBANK_PAYMENT_PREFIX = "SBER"
MERCHANT_TAG = "TAGIL_PIZZA"


def _checksum(payload: str) -> str:
    checksum = 0
    for i, char in enumerate(payload):
        checksum = (checksum + ord(char) * (i + 1)) % 10_000
    return str(checksum).zfill(4)


def create_sberbank_payment_code(total_rub) -> str:
    """
    Build the deterministic Sberbank transfer code for an order amount.

    Format: ``SBER|TAGIL_PIZZA|<amount in kopeks>|<4 digit checksum>``.
    Non-finite and negative amounts are treated as zero.
    """
    try:
        total = float(total_rub)
    except (TypeError, ValueError, OverflowError):
        total = 0.0
    safe_total = max(0.0, total) if math.isfinite(total) else 0.0

    # halves round up
    amount_kopeks = math.floor(safe_total * 100 + 0.5)
    payload = f"{SBERBANK_PAYMENT_PREFIX}|{MERCHANT_TAG}|{amount_kopeks}"
    return f"{payload}|{_checksum(payload)}"
