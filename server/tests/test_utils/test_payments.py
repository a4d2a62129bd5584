# Payment code tests

import pytest

from utils.payments import create_sberbank_payment_code


class TestSberbankPaymentCode:

    def test_known_amount(self):
        assert create_sberbank_payment_code(1140) == "SBER|TAGIL_PIZZA|114000|9047"

    @pytest.mark.parametrize("total", [float("nan"), float("inf"), -5, None, "abc", 10 ** 400])
    def test_unusable_amount_is_zero(self, total):
        assert create_sberbank_payment_code(total) == "SBER|TAGIL_PIZZA|0|3890"

    def test_deterministic(self):
        assert create_sberbank_payment_code(999.99) == create_sberbank_payment_code(999.99)

    def test_half_kopek_rounds_up(self):
        assert create_sberbank_payment_code(0.005).split("|")[2] == "1"

    def test_checksum_is_four_digits(self):
        checksum = create_sberbank_payment_code(1).split("|")[3]
        assert len(checksum) == 4
        assert checksum.isdigit()
