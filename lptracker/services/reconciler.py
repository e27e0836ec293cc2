import logging
from typing import Dict, Iterable, List, Optional, Tuple

from lptracker.config.chains import ChainCurrencies, chain_currencies
from lptracker.models import (
    AssetAmount, EventKind, GasCost, RawEvent, ReconciledTransaction
)

logger = logging.getLogger(__name__)

# Events are folded mints first, then burns, then collects
FOLD_ORDER = (EventKind.MINT, EventKind.BURN, EventKind.COLLECT)


def to_transaction(event: RawEvent, currencies: Optional[ChainCurrencies] = None) -> ReconciledTransaction:
    """Convert a raw event into a provisional transaction with its gas cost"""
    currencies = currencies or chain_currencies
    gas_token = currencies.gas_token(event.chain_id)
    cost = event.transaction.gas_used * event.transaction.gas_price

    return ReconciledTransaction(
        id=event.transaction.id,
        type=event.kind,
        tick_lower=event.tick_lower,
        tick_upper=event.tick_upper,
        timestamp=event.timestamp,
        amount0=event.amount0,
        amount1=event.amount1,
        gas=GasCost(
            used=event.transaction.gas_used,
            price=event.transaction.gas_price,
            cost=cost,
            cost_currency=AssetAmount.from_raw(gas_token, cost),
        ),
    )


def _net_collect(collect: ReconciledTransaction, burn: ReconciledTransaction) -> ReconciledTransaction:
    """Strip the principal of ``burn`` from ``collect`` and drop its gas (paid by the burn)"""
    return collect.model_copy(update={
        "amount0": collect.amount0.subtract(burn.amount0),
        "amount1": collect.amount1.subtract(burn.amount1),
        "gas": collect.gas.model_copy(update={
            "cost": 0,
            "cost_currency": AssetAmount.zero(collect.gas.cost_currency.token),
        }),
    })


def reconcile(mint_burn_events: Iterable[RawEvent], collect_events: Iterable[RawEvent],
              currencies: Optional[ChainCurrencies] = None) -> List[ReconciledTransaction]:
    """
    Merge raw Mint/Burn/Collect events into one chronological transaction list.

    Events sharing a transaction id are paired against the first entry
    recorded for that id:

    - a zero-liquidity entry (Burn used only to collect fees) is dropped once
      anything else arrives for its transaction; the newcomer is still paired
      against it
    - a zero-liquidity Burn arriving for a known transaction is discarded
    - a Collect is reduced by the paired entry's amounts so it holds fees
      only, and its gas is zeroed since the Burn already carries it

    Zero-liquidity Burns that never got paired carry no information and are
    left out. Ties on timestamp keep insertion order.
    """
    currencies = currencies or chain_currencies
    events = list(mint_burn_events) + list(collect_events)
    ordered = [event for kind in FOLD_ORDER for event in events if event.kind == kind]

    pending: Dict[str, List[Tuple[int, ReconciledTransaction]]] = {}

    for seq, event in enumerate(ordered):
        tx = to_transaction(event, currencies)
        entries = pending.setdefault(tx.id, [])

        if not entries:
            entries.append((seq, tx))
            continue

        match = entries[0][1]

        if match.is_zero_liquidity:
            entries.pop(0)

        if tx.type == EventKind.BURN and tx.is_zero_liquidity:
            logger.debug(f"Discarding empty burn in {tx.id}")
            continue

        if tx.type == EventKind.COLLECT:
            tx = _net_collect(tx, match)

        entries.append((seq, tx))

    drained = [
        (seq, tx)
        for entries in pending.values()
        for seq, tx in entries
        if not (tx.type == EventKind.BURN and tx.is_zero_liquidity)
    ]
    drained.sort(key=lambda entry: (entry[1].timestamp, entry[0]))

    logger.debug(f"Reconciled {len(ordered)} events into {len(drained)} transactions")
    return [tx for _, tx in drained]
