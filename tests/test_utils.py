import pytest
from decimal import Decimal
from lptracker.utils import (
    calculate_price_from_sqrt_price, decimal_to_raw, is_valid_address,
    normalize_address, seconds_between, tick_to_price
)
from lptracker.utils.v3_math import (
    MAX_TICK, MIN_TICK, Q96, get_amount0_delta, get_amount1_delta, get_amounts_for_liquidity,
    get_sqrt_ratio_at_tick
)


class TestHelpers:
    """Test amount, price and address helpers"""

    def test_decimal_to_raw(self):
        assert decimal_to_raw("1.5", 6) == 1500000
        assert decimal_to_raw("0.0000001", 6) == 1
        assert decimal_to_raw("-0.5", 0) == 0

    def test_price_from_sqrt_price(self):
        assert Decimal(calculate_price_from_sqrt_price(2 * Q96, 18, 18)) == 4
        assert Decimal(calculate_price_from_sqrt_price(Q96, 18, 6)) == Decimal(10 ** 12)

    def test_tick_to_price(self):
        assert Decimal(tick_to_price(0, 18, 18)) == 1
        assert float(tick_to_price(1, 18, 18)) == pytest.approx(1.0001)

    def test_seconds_between(self):
        assert seconds_between(100, 160) == 60
        assert seconds_between(160, 100) == -60

    def test_addresses(self):
        address = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"
        assert normalize_address(address) == "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
        assert is_valid_address(address)
        assert not is_valid_address("0x123")
        assert not is_valid_address("not-an-address")


class TestV3Math:
    """Test tick and liquidity math"""

    def test_sqrt_ratio_bounds(self):
        assert get_sqrt_ratio_at_tick(0) == Q96
        assert get_sqrt_ratio_at_tick(MIN_TICK) == 4295128739
        assert get_sqrt_ratio_at_tick(MAX_TICK) == 1461446703485210103287273052203988822378723970342

    def test_sqrt_ratio_is_monotonic(self):
        assert get_sqrt_ratio_at_tick(-1) < get_sqrt_ratio_at_tick(0) < get_sqrt_ratio_at_tick(1)

    def test_tick_out_of_range(self):
        with pytest.raises(ValueError):
            get_sqrt_ratio_at_tick(MAX_TICK + 1)

    def test_deltas_ignore_argument_order(self):
        a = get_sqrt_ratio_at_tick(-60)
        b = get_sqrt_ratio_at_tick(60)
        assert get_amount0_delta(a, b, 10 ** 18) == get_amount0_delta(b, a, 10 ** 18)
        assert get_amount1_delta(a, b, 10 ** 18) == get_amount1_delta(b, a, 10 ** 18)

    def test_amounts_in_range(self):
        amount0, amount1 = get_amounts_for_liquidity(Q96, -60, 60, 10 ** 18)
        assert amount0 > 0
        assert amount1 > 0
        # symmetric range around price 1 holds roughly equal amounts
        assert abs(amount0 - amount1) <= 2

    def test_amounts_below_range(self):
        amount0, amount1 = get_amounts_for_liquidity(get_sqrt_ratio_at_tick(-120), -60, 60, 10 ** 18)
        assert amount0 > 0
        assert amount1 == 0

    def test_amounts_above_range(self):
        amount0, amount1 = get_amounts_for_liquidity(get_sqrt_ratio_at_tick(120), -60, 60, 10 ** 18)
        assert amount0 == 0
        assert amount1 > 0
