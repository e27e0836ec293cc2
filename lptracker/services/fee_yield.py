import logging
from typing import List, Optional, Sequence

from lptracker.models import (
    AssetAmount, EventKind, PeriodState, Pool, ReconciledTransaction, Token, YieldSample
)
from lptracker.services.quoter import quote
from lptracker.utils import SECONDS_PER_YEAR, current_timestamp, seconds_between

logger = logging.getLogger(__name__)


def period_yield(fees: AssetAmount, liquidity: AssetAmount, start: int, end: int) -> AssetAmount:
    """
    Fee rate per second earned by ``liquidity`` between ``start`` and ``end``.

    The fee/liquidity ratio is scaled by the token's decimal scale before the
    time division, so the result reads as a fraction of liquidity per second.
    Zero liquidity or an empty window yields zero.
    """
    zero = AssetAmount.zero(liquidity.token)
    if liquidity.is_zero():
        return zero

    elapsed = seconds_between(start, end)
    if elapsed <= 0:
        return zero

    return AssetAmount(token=liquidity.token, raw=fees.ratio(liquidity) * liquidity.decimal_scale / elapsed)


def uncollected_fee_value(pool: Pool, base_token: Token,
                          uncollected_fees: Sequence[AssetAmount]) -> Optional[AssetAmount]:
    """Value the accrued fee legs in ``base_token``, None when no legs are given"""
    if not uncollected_fees:
        return None
    if len(uncollected_fees) > 1:
        return quote(pool, base_token, uncollected_fees[0], uncollected_fees[1])

    fees = uncollected_fees[0]
    if fees.token.equals(base_token):
        return fees
    return pool.quote(fees)


def _sample(fees: AssetAmount, liquidity: AssetAmount, start: int, end: int) -> YieldSample:
    return YieldSample(
        start=start,
        end=end,
        fees=fees,
        liquidity=liquidity,
        rate=period_yield(fees, liquidity, start, end),
    )


def yield_samples(pool: Pool, base_token: Token, uncollected_fees: Sequence[AssetAmount],
                  transactions: Sequence[ReconciledTransaction],
                  now: Optional[int] = None) -> List[YieldSample]:
    """
    Walk the transactions and emit one fee yield sample per Collect.

    Minted value accumulates into the open period (the period starts at the
    first Mint after it emptied), burned value is only taken out when a
    Collect closes the period. Fees accrued since the last Collect produce a
    trailing sample up to ``now``.
    """
    if not transactions:
        return []

    now = current_timestamp() if now is None else now
    zero = AssetAmount.zero(base_token)
    period = PeriodState(start=now, liquidity_added=zero, liquidity_removed=zero)
    samples: List[YieldSample] = []

    for tx in transactions:
        value = quote(pool, base_token, tx.amount0, tx.amount1)

        if tx.type == EventKind.MINT:
            if period.liquidity_added <= zero:
                period.start = tx.timestamp
            period.liquidity_added = period.liquidity_added.add(value)

        elif tx.type == EventKind.BURN:
            period.liquidity_removed = period.liquidity_removed.add(value)

        elif tx.type == EventKind.COLLECT:
            samples.append(_sample(value, period.liquidity_added, period.start, tx.timestamp))

            # close the period
            period.liquidity_added = period.liquidity_added.subtract(period.liquidity_removed)
            period.liquidity_removed = zero
            period.start = tx.timestamp

    fees = uncollected_fee_value(pool, base_token, uncollected_fees)
    if fees is not None and not fees.is_zero():
        samples.append(_sample(fees, period.liquidity_added, period.start, now))

    return samples


def compute_fee_apy(pool: Pool, base_token: Token, uncollected_fees: Sequence[AssetAmount],
                    transactions: Sequence[ReconciledTransaction],
                    now: Optional[int] = None) -> float:
    """Annualized fee yield in percent, rounded to two decimals"""
    if not transactions:
        return 0.0

    samples = yield_samples(pool, base_token, uncollected_fees, transactions, now=now)
    if not samples:
        return 0.0

    total = AssetAmount.zero(base_token)
    for sample in samples:
        total = total.add(sample.rate)

    apy = total.divide(len(samples)).multiply(SECONDS_PER_YEAR).multiply(100)
    logger.debug(f"Fee APY over {len(samples)} periods: {apy.to_fixed(2)}%")
    return float(apy.to_fixed(2))
