import pytest
from lptracker.config.chains import WETH9
from lptracker.models import AssetAmount, EventKind, Pool, RawEvent, Token, TransactionInfo

TOKEN0_ADDRESS = "0x1111111111111111111111111111111111111111"
TOKEN1_ADDRESS = "0x2222222222222222222222222222222222222222"
POOL_ADDRESS = "0x3333333333333333333333333333333333333333"
OWNER_ADDRESS = "0x4444444444444444444444444444444444444444"


@pytest.fixture
def token0():
    return Token(chain_id=1, address=TOKEN0_ADDRESS, decimals=18, symbol="TKA", name="Token A")


@pytest.fixture
def token1():
    return Token(chain_id=1, address=TOKEN1_ADDRESS, decimals=18, symbol="TKB", name="Token B")


@pytest.fixture
def weth():
    return WETH9[1]


@pytest.fixture
def pool(token0, token1):
    """Pool quoting token0 and token1 one to one"""
    return Pool(token0=token0, token1=token1, fee=3000, sqrt_price_x96=2 ** 96, address=POOL_ADDRESS)


@pytest.fixture
def make_event(token0, token1):
    """Factory for raw events with human readable amounts"""
    def _make(kind, tx_id, timestamp, amount0="0", amount1="0", gas_used=100000, gas_price=10 ** 9,
              tick_lower=-60, tick_upper=60):
        return RawEvent(
            kind=EventKind(kind),
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            timestamp=timestamp,
            amount0=AssetAmount.from_decimal(token0, amount0),
            amount1=AssetAmount.from_decimal(token1, amount1),
            transaction=TransactionInfo(id=tx_id, gas_used=gas_used, gas_price=gas_price),
        )
    return _make
