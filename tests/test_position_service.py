import pytest
from fractions import Fraction
from unittest.mock import AsyncMock, patch
from lptracker.errors import UnknownAssetError
from lptracker.models import AssetAmount, EventKind, PositionInfo, PositionStatus
from lptracker.services.currency_service import GasConverter, currency_service
from lptracker.services.position_service import PositionService
from lptracker.services.subgraph_service import subgraph_service
from lptracker.services.web3_service import web3_manager

OWNER = "0x4444444444444444444444444444444444444444"


class TestPositionService:
    """Test assembling position history and performance"""

    @pytest.fixture
    def service(self):
        return PositionService()

    @pytest.fixture
    def history(self, make_event):
        return {
            "mints_burns": [
                make_event("mint", "0x1", 0, amount0="60", amount1="40", gas_used=0),
                make_event("burn", "0x2", 100, amount0="10", gas_used=0),
            ],
            "collects": [make_event("collect", "0x2", 100, amount0="11", gas_used=0)],
        }

    @pytest.mark.asyncio
    async def test_get_transactions(self, service, pool, history):
        with patch.object(subgraph_service, "get_pool", new=AsyncMock(return_value=pool)), \
                patch.object(subgraph_service, "get_mints_burns",
                             new=AsyncMock(return_value=history["mints_burns"])), \
                patch.object(subgraph_service, "get_collects",
                             new=AsyncMock(return_value=history["collects"])) as get_collects:
            result = await service.get_transactions("ethereum", pool.address, [OWNER])

        found_pool, transactions = result
        assert found_pool is pool
        assert [tx.type for tx in transactions] == [EventKind.MINT, EventKind.BURN, EventKind.COLLECT]
        assert transactions[2].amount0.to_significant() == "1"
        get_collects.assert_called_once_with("ethereum", pool, ["0x2"])

    @pytest.mark.asyncio
    async def test_get_transactions_unknown_pool(self, service, pool):
        with patch.object(subgraph_service, "get_pool", new=AsyncMock(return_value=None)):
            assert await service.get_transactions("ethereum", pool.address, [OWNER]) is None

    def test_resolve_base_token(self, service, pool, token0, token1):
        assert service.resolve_base_token(pool) == token1
        assert service.resolve_base_token(pool, token0.address) == token0
        with pytest.raises(UnknownAssetError):
            service.resolve_base_token(pool, "0x5555555555555555555555555555555555555555")

    @pytest.mark.asyncio
    async def test_position_states(self, service, pool, token1):
        positions = [
            PositionInfo(id="1", owner=OWNER, tick_lower=-60, tick_upper=60, liquidity=10 ** 18),
            PositionInfo(id="2", owner=OWNER, tick_lower=-60, tick_upper=60, liquidity=0),
        ]
        with patch.object(subgraph_service, "get_positions", new=AsyncMock(return_value=positions)), \
                patch.object(web3_manager, "is_available", return_value=False):
            states = await service.get_position_states("ethereum", pool, token1, [OWNER])

        assert len(states) == 2
        active, closed = states
        assert active.status == PositionStatus.IN_RANGE
        assert active.amount0.raw > 0
        assert active.amount1.raw > 0
        assert active.value.equal_to(pool.quote(active.amount0).add(active.amount1))
        assert active.uncollected_fees == []
        assert closed.status == PositionStatus.INACTIVE
        assert closed.value.is_zero()

    @pytest.mark.asyncio
    async def test_position_states_with_fees(self, service, pool, token0, token1):
        positions = [PositionInfo(id="7", owner=OWNER, tick_lower=-60, tick_upper=60, liquidity=10 ** 18)]
        fees = [AssetAmount.from_raw(token0, 5), AssetAmount.from_raw(token1, 6)]
        with patch.object(subgraph_service, "get_positions", new=AsyncMock(return_value=positions)), \
                patch.object(web3_manager, "is_available", return_value=True), \
                patch.object(web3_manager, "get_position_liquidity", return_value=0), \
                patch.object(web3_manager, "get_uncollected_fees", return_value=fees) as get_fees:
            states = await service.get_position_states("ethereum", pool, token1, [OWNER])

        # on-chain liquidity wins over the indexed value
        assert states[0].liquidity == 0
        assert states[0].status == PositionStatus.INACTIVE
        assert states[0].uncollected_fees == fees
        get_fees.assert_called_once_with("ethereum", 7, OWNER, pool)

    @pytest.mark.asyncio
    async def test_liquidity_falls_back_to_index(self, service, pool, token1):
        positions = [PositionInfo(id="7", owner=OWNER, tick_lower=-60, tick_upper=60, liquidity=10 ** 18)]
        with patch.object(subgraph_service, "get_positions", new=AsyncMock(return_value=positions)), \
                patch.object(web3_manager, "is_available", return_value=True), \
                patch.object(web3_manager, "get_position_liquidity", return_value=None), \
                patch.object(web3_manager, "get_uncollected_fees", return_value=[]):
            states = await service.get_position_states("ethereum", pool, token1, [OWNER])

        assert states[0].liquidity == 10 ** 18
        assert states[0].status == PositionStatus.IN_RANGE

    @pytest.mark.asyncio
    async def test_get_performance(self, service, pool, token1, weth, history):
        converter = GasConverter(weth, token1, Fraction(1))
        with patch.object(subgraph_service, "get_pool", new=AsyncMock(return_value=pool)), \
                patch.object(subgraph_service, "get_mints_burns",
                             new=AsyncMock(return_value=history["mints_burns"])), \
                patch.object(subgraph_service, "get_collects",
                             new=AsyncMock(return_value=history["collects"])), \
                patch.object(subgraph_service, "get_positions", new=AsyncMock(return_value=[])), \
                patch.object(currency_service, "get_gas_converter", new=AsyncMock(return_value=converter)):
            report = await service.get_performance("ethereum", pool.address, [OWNER], now=1000)

        assert report.base_token == token1
        assert report.pool == pool
        assert report.totals.total_mint.to_significant() == "100"
        assert report.totals.total_burn.to_significant() == "10"
        assert report.totals.total_collect.to_significant() == "1"
        # 0 + 10 + 1 - 100
        assert report.return_value.to_significant() == "-89"
        assert report.return_percent == pytest.approx(-89.0)
        assert report.current_liquidity == 0
        # closed position: annualized over the 100s it was open
        assert report.apr == pytest.approx(-89.0 / 100 * 365 * 24 * 60 * 60)
        assert report.fee_apy == pytest.approx(31536000 * 100 / 100 / 100, rel=1e-6)
        assert report.generated_at == 1000

    @pytest.mark.asyncio
    async def test_get_performance_without_gas_rate(self, service, pool, token1, make_event):
        events = [make_event("mint", "0x1", 0, amount0="100")]
        with patch.object(subgraph_service, "get_pool", new=AsyncMock(return_value=pool)), \
                patch.object(subgraph_service, "get_mints_burns", new=AsyncMock(return_value=events)), \
                patch.object(subgraph_service, "get_collects", new=AsyncMock(return_value=[])), \
                patch.object(subgraph_service, "get_positions", new=AsyncMock(return_value=[])), \
                patch.object(currency_service, "get_gas_converter", new=AsyncMock(return_value=None)):
            report = await service.get_performance("ethereum", pool.address, [OWNER], now=1000)

        # gas left out of the return
        assert report.return_value.to_significant() == "-100"
        assert report.return_percent == pytest.approx(-100.0)
        assert report.apr == 0.0
        assert report.fee_apy == 0.0

    @pytest.mark.asyncio
    async def test_get_performance_unknown_pool(self, service, pool):
        with patch.object(subgraph_service, "get_pool", new=AsyncMock(return_value=None)):
            assert await service.get_performance("ethereum", pool.address, [OWNER]) is None
