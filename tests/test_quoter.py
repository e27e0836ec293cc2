import pytest
from lptracker.errors import UnknownAssetError
from lptracker.models import AssetAmount, Pool, Token
from lptracker.services.quoter import quote


class TestQuote:
    """Test valuing two-token amounts in a base token"""

    @pytest.fixture
    def priced_pool(self, token0, token1):
        # one token0 is worth four token1
        return Pool(token0=token0, token1=token1, fee=3000, sqrt_price_x96=2 * 2 ** 96)

    def test_quote_in_token1(self, priced_pool, token0, token1):
        value = quote(priced_pool, token1, AssetAmount.from_raw(token0, 10), AssetAmount.from_raw(token1, 5))
        assert value.token == token1
        assert value.raw == 45

    def test_quote_in_token0(self, priced_pool, token0, token1):
        value = quote(priced_pool, token0, AssetAmount.from_raw(token0, 10), AssetAmount.from_raw(token1, 8))
        assert value.token == token0
        assert value.raw == 12

    def test_single_sided_amounts(self, pool, token0, token1):
        value = quote(pool, token1, AssetAmount.from_decimal(token0, 100), AssetAmount.zero(token1))
        assert value.to_significant() == "100"

    def test_unknown_base_token(self, pool, token0, token1):
        stranger = Token(chain_id=1, address="0x5555555555555555555555555555555555555555", decimals=18)
        with pytest.raises(UnknownAssetError) as exc_info:
            quote(pool, stranger, AssetAmount.zero(token0), AssetAmount.zero(token1))
        assert exc_info.value.asset == stranger.address
