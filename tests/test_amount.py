# tests/test_amount.py
import pytest
from decimal import Decimal
from zenon_wallet_api.blockchain.amount import add_decimals, extract_decimals, scale
from zenon_wallet_api.exceptions import InvalidArgument

class TestAmount:
    def test_scale_whole_amount(self):
        assert scale("1.000000", decimals=8) == 100000000
        assert extract_decimals("10.5", 8) == 1050000000
        assert extract_decimals(3, 8) == 300000000
        assert extract_decimals(Decimal("0.00000001"), 8) == 1

    def test_scale_accepts_json_numbers(self):
        assert extract_decimals(10.5, 8) == 1050000000
        assert extract_decimals(0.1, 8) == 10000000

    def test_excess_precision_rejected(self):
        with pytest.raises(InvalidArgument):
            scale("0.000000009", decimals=8)

    def test_negative_rejected(self):
        with pytest.raises(InvalidArgument):
            scale("-1", decimals=8)

    @pytest.mark.parametrize("value", ["", "abc", "NaN", "Infinity", "1e", True])
    def test_malformed_rejected(self, value):
        with pytest.raises(InvalidArgument):
            extract_decimals(value, 8)

    @pytest.mark.parametrize("value", ["1E+999999", "1e70", Decimal("9" * 80)])
    def test_out_of_range_rejected(self, value):
        with pytest.raises(InvalidArgument):
            extract_decimals(value, 8)

    def test_tiny_exponent_is_excess_precision(self):
        with pytest.raises(InvalidArgument):
            extract_decimals("1E-999999999", 8)
        assert extract_decimals("0E+999999", 8) == 0

    def test_large_amounts_are_exact(self):
        """No rounding beyond the default decimal context precision"""
        amount = "123456789012345678901234567890.12345678"
        assert extract_decimals(amount, 8) == 12345678901234567890123456789012345678

    def test_zero_decimals_token(self):
        assert extract_decimals("42", 0) == 42
        with pytest.raises(InvalidArgument):
            extract_decimals("42.1", 0)

    def test_add_decimals(self):
        assert add_decimals(1050000000, 8) == "10.5"
        assert add_decimals(100000000, 8) == "1"
        assert add_decimals(1, 8) == "0.00000001"
        assert add_decimals(0, 8) == "0"
