import pytest
from decimal import Decimal
from lptracker.models import AssetAmount, PerformanceReport, PositionState, PositionStatus
from lptracker.services.metrics import compute_totals
from lptracker.services.reconciler import reconcile
from lptracker.services.serializer_service import serializer_service


class TestSerializerService:
    """Test conversion of results to API views"""

    @pytest.fixture
    def transactions(self, make_event):
        return reconcile(
            [make_event("mint", "0x1", 100, amount0="1", amount1="3")],
            [make_event("collect", "0x2", 200, amount1="0.5")],
        )

    def test_serialize_amount(self, token0):
        assert serializer_service.serialize_amount(AssetAmount.from_decimal(token0, "1.5")).amount == "1.5"
        assert serializer_service.serialize_amount(AssetAmount.from_decimal(token0, "100")).amount == "100"
        assert serializer_service.serialize_amount(AssetAmount.zero(token0)).amount == "0"

        view = serializer_service.serialize_amount(AssetAmount.from_raw(token0, 1))
        assert view.amount == "0.000000000000000001"
        assert view.tokenId == token0.address
        assert view.symbol == "TKA"

    def test_serialize_transaction(self, pool, token1, transactions):
        view = serializer_service.serialize_transaction(pool, token1, transactions[0])

        assert view.txnId == "0x1"
        assert view.type == "mint"
        assert view.label == "Add liquidity"
        assert view.timestamp == 100
        assert view.value.amount == "4"
        assert view.percent0 == "25.00"
        assert view.percent1 == "75.00"
        assert view.gasCost.symbol == "WETH"

    def test_serialize_position(self, pool, token0, token1):
        position = PositionState(
            id="42",
            tick_lower=-60,
            tick_upper=60,
            liquidity=1000,
            amount0=AssetAmount.from_decimal(token0, 1),
            amount1=AssetAmount.from_decimal(token1, 2),
            value=AssetAmount.from_decimal(token1, 3),
            status=PositionStatus.IN_RANGE,
        )

        view = serializer_service.serialize_position(pool, position)

        assert view.liquidity == "1000"
        assert view.status == "in_range"
        assert float(view.priceLower) == pytest.approx(1.0001 ** -60)
        assert float(view.priceUpper) == pytest.approx(1.0001 ** 60)
        assert view.value.amount == "3"
        assert view.uncollectedFees == []

    def test_serialize_performance(self, pool, token1, transactions):
        report = PerformanceReport(
            network="ethereum",
            pool_address=pool.address,
            pool=pool,
            base_token=token1,
            transactions=transactions,
            totals=compute_totals(transactions, token1, pool),
            current_value=AssetAmount.from_decimal(token1, 4),
            current_liquidity=10,
            return_value=AssetAmount.from_decimal(token1, "0.5"),
            return_percent=12.3456,
            apr=45.678,
            fee_apy=9.5,
            generated_at=300,
        )

        response = serializer_service.serialize_performance(report)

        assert response.pairId == pool.address
        assert response.baseToken.symbol == "TKB"
        assert Decimal(response.price) == 1
        assert response.totals["mint"].amount == "4"
        assert response.totals["collect"].amount == "0.5"
        assert response.returnPercent == 12.35
        assert response.apr == 45.68
        assert response.feeApy == 9.5
        assert len(response.transactions) == 2
        assert response.metadata["currentLiquidity"] == "10"

        summary = serializer_service.serialize_performance(report, include_transactions=False)
        assert summary.transactions == []
