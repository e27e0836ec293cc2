from typing import List
from lptracker.models import (
    AmountView, AssetAmount, EventKind, PerformanceReport, PerformanceResponse, Pool,
    PositionState, PositionView, ReconciledTransaction, Token, TokenView, TransactionView
)
from lptracker.services.metrics import transaction_breakdown
from lptracker.utils import calculate_price_from_sqrt_price, tick_to_price


TYPE_LABELS = {
    EventKind.MINT: "Add liquidity",
    EventKind.BURN: "Remove liquidity",
    EventKind.COLLECT: "Collect fees",
}

# Decimal places kept in serialized amounts
AMOUNT_PLACES = 18


class SerializerService:
    """Service for converting position data to API response format"""

    def serialize_token(self, token: Token) -> TokenView:
        return TokenView(
            id=token.address,
            symbol=token.symbol,
            name=token.name,
            decimals=token.decimals,
            chainId=token.chain_id,
        )

    def serialize_amount(self, amount: AssetAmount) -> AmountView:
        """Format amount as a plain decimal string without trailing zeros"""
        formatted = amount.to_fixed(AMOUNT_PLACES)
        if "." in formatted:
            formatted = formatted.rstrip("0").rstrip(".")
        return AmountView(
            tokenId=amount.token.address,
            symbol=amount.token.symbol,
            amount=formatted,
        )

    def serialize_transaction(self, pool: Pool, base_token: Token, tx: ReconciledTransaction) -> TransactionView:
        breakdown = transaction_breakdown(pool, base_token, tx)
        return TransactionView(
            txnId=tx.id,
            type=tx.type.value,
            label=TYPE_LABELS[tx.type],
            timestamp=tx.timestamp,
            tickLower=tx.tick_lower,
            tickUpper=tx.tick_upper,
            amount0=self.serialize_amount(tx.amount0),
            amount1=self.serialize_amount(tx.amount1),
            value=self.serialize_amount(breakdown.value),
            percent0=breakdown.percent0,
            percent1=breakdown.percent1,
            gasCost=self.serialize_amount(tx.gas.cost_currency),
        )

    def serialize_transactions(self, pool: Pool, base_token: Token,
                               transactions: List[ReconciledTransaction]) -> List[TransactionView]:
        return [self.serialize_transaction(pool, base_token, tx) for tx in transactions]

    def serialize_position(self, pool: Pool, position: PositionState) -> PositionView:
        decimals0, decimals1 = pool.token0.decimals, pool.token1.decimals
        return PositionView(
            id=position.id,
            tickLower=position.tick_lower,
            tickUpper=position.tick_upper,
            priceLower=tick_to_price(position.tick_lower, decimals0, decimals1),
            priceUpper=tick_to_price(position.tick_upper, decimals0, decimals1),
            liquidity=str(position.liquidity),
            status=position.status.value,
            amount0=self.serialize_amount(position.amount0),
            amount1=self.serialize_amount(position.amount1),
            value=self.serialize_amount(position.value),
            uncollectedFees=[self.serialize_amount(fee) for fee in position.uncollected_fees],
        )

    def serialize_performance(self, report: PerformanceReport,
                              include_transactions: bool = True) -> PerformanceResponse:
        totals = report.totals
        transactions = (
            self.serialize_transactions(report.pool, report.base_token, report.transactions)
            if include_transactions else []
        )

        return PerformanceResponse(
            network=report.network,
            pairId=report.pool_address,
            baseToken=self.serialize_token(report.base_token),
            price=calculate_price_from_sqrt_price(
                report.pool.sqrt_price_x96, report.pool.token0.decimals, report.pool.token1.decimals
            ),
            totals={
                "mint": self.serialize_amount(totals.total_mint),
                "burn": self.serialize_amount(totals.total_burn),
                "collect": self.serialize_amount(totals.total_collect),
                "gas": self.serialize_amount(totals.total_gas_cost),
            },
            currentValue=self.serialize_amount(report.current_value),
            returnValue=self.serialize_amount(report.return_value),
            returnPercent=round(report.return_percent, 2),
            apr=round(report.apr, 2),
            feeApy=report.fee_apy,
            positions=[self.serialize_position(report.pool, position) for position in report.positions],
            transactions=transactions,
            metadata={
                "generatedAt": str(report.generated_at),
                "currentLiquidity": str(report.current_liquidity),
            },
        )


# Global serializer service
serializer_service = SerializerService()
