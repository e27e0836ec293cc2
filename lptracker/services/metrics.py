import logging
from typing import Callable, Optional, Sequence

from lptracker.config.chains import ChainCurrencies, chain_currencies
from lptracker.models import (
    AssetAmount, EventKind, Pool, PositionStatus, ReconciledTransaction, ReturnResult,
    Token, Totals, TransactionBreakdown
)
from lptracker.services.quoter import quote
from lptracker.utils import SECONDS_PER_YEAR, current_timestamp, seconds_between

logger = logging.getLogger(__name__)

# Significant digits kept when rendering amounts for the return percentage
RETURN_SIGNIFICANT_DIGITS = 6

# Significant digits used for the per-token share of a transaction
BREAKDOWN_SIGNIFICANT_DIGITS = 15

GasConversion = Callable[[AssetAmount], AssetAmount]


def compute_totals(transactions: Sequence[ReconciledTransaction], base_token: Token, pool: Pool,
                   currencies: Optional[ChainCurrencies] = None) -> Totals:
    """Sum minted, burned and collected value in ``base_token`` plus all gas paid"""
    currencies = currencies or chain_currencies

    total_mint = AssetAmount.zero(base_token)
    total_burn = AssetAmount.zero(base_token)
    total_collect = AssetAmount.zero(base_token)
    total_gas_cost = AssetAmount.zero(currencies.gas_token(base_token.chain_id))

    for tx in transactions:
        value = quote(pool, base_token, tx.amount0, tx.amount1)
        if tx.type == EventKind.MINT:
            total_mint = total_mint.add(value)
        elif tx.type == EventKind.BURN:
            total_burn = total_burn.add(value)
        elif tx.type == EventKind.COLLECT:
            total_collect = total_collect.add(value)

        total_gas_cost = total_gas_cost.add(tx.gas.cost_currency)

    return Totals(
        total_mint=total_mint,
        total_burn=total_burn,
        total_collect=total_collect,
        total_gas_cost=total_gas_cost,
    )


def compute_return(base_token: Token, totals: Totals, current_value: AssetAmount,
                   convert_gas: GasConversion,
                   significant_digits: int = RETURN_SIGNIFICANT_DIGITS) -> ReturnResult:
    """
    Realized return of a position history.

    return = current + burned + collected - minted - gas
    percent = return / (minted + gas) * 100

    Both sides of the percentage go through a limited significant digit
    rendering before the float division. Zero invested value gives 0%.
    """
    gas_cost = convert_gas(totals.total_gas_cost)
    if not gas_cost.token.equals(base_token):
        raise ValueError(f"Gas cost was converted into {gas_cost.token.symbol}, expected {base_token.symbol}")

    return_value = (
        current_value
        .add(totals.total_burn)
        .add(totals.total_collect)
        .subtract(totals.total_mint)
        .subtract(gas_cost)
    )

    invested = totals.total_mint.add(gas_cost)
    invested_value = float(invested.to_significant(significant_digits))
    if invested_value == 0:
        return ReturnResult(return_value=return_value, return_percent=0.0)

    return_percent = float(return_value.to_significant(significant_digits)) / invested_value * 100
    return ReturnResult(return_value=return_value, return_percent=return_percent)


def compute_apr(transactions: Sequence[ReconciledTransaction], return_percent: float,
                current_liquidity: int, now: Optional[int] = None) -> float:
    """
    Annualize ``return_percent`` over the life of the position.

    The window runs from the first transaction to the last one for a fully
    withdrawn position (zero liquidity), otherwise to now. An empty window
    gives 0.
    """
    if not transactions:
        return 0.0

    start = transactions[0].timestamp
    if current_liquidity == 0:
        end = transactions[-1].timestamp
    else:
        end = current_timestamp() if now is None else now

    seconds = seconds_between(start, end)
    if seconds <= 0:
        logger.debug(f"APR window is {seconds}s, reporting 0")
        return 0.0

    return return_percent / seconds * SECONDS_PER_YEAR


def transaction_breakdown(pool: Pool, base_token: Token, tx: ReconciledTransaction) -> TransactionBreakdown:
    """Value of ``tx`` in ``base_token`` and the share of each token in percent"""
    value = quote(pool, base_token, tx.amount0, tx.amount1)
    if value.is_zero():
        return TransactionBreakdown(value=value, percent0="0", percent1="0")

    if pool.token0.equals(base_token):
        value0, value1 = tx.amount0, pool.quote(tx.amount1)
    else:
        value0, value1 = pool.quote(tx.amount0), tx.amount1

    total = float(value.to_significant(BREAKDOWN_SIGNIFICANT_DIGITS))

    def percent(part: AssetAmount) -> str:
        return f"{float(part.to_significant(BREAKDOWN_SIGNIFICANT_DIGITS)) / total * 100:.2f}"

    return TransactionBreakdown(value=value, percent0=percent(value0), percent1=percent(value1))


def get_position_status(tick_current: int, tick_lower: int, tick_upper: int, liquidity: int) -> PositionStatus:
    """Inactive without liquidity, otherwise in or out of range of the current tick"""
    if liquidity == 0:
        return PositionStatus.INACTIVE
    if tick_lower < tick_current < tick_upper:
        return PositionStatus.IN_RANGE
    return PositionStatus.OUT_RANGE
