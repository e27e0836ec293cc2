import asyncio
import logging
from fractions import Fraction
from typing import List, Optional, Tuple

from lptracker.config import settings
from lptracker.config.chains import chain_currencies
from lptracker.errors import UnknownAssetError
from lptracker.models import (
    AssetAmount, EventKind, PerformanceReport, Pool, PositionInfo, PositionState,
    ReconciledTransaction, Token
)
from lptracker.services.currency_service import GasConverter, currency_service
from lptracker.services.fee_yield import compute_fee_apy
from lptracker.services.metrics import compute_apr, compute_return, compute_totals, get_position_status
from lptracker.services.quoter import quote
from lptracker.services.reconciler import reconcile
from lptracker.services.subgraph_service import subgraph_service
from lptracker.services.web3_service import web3_manager
from lptracker.utils import current_timestamp, get_amounts_for_liquidity

logger = logging.getLogger(__name__)


class PositionService:
    """Service for assembling the transaction history and performance of a position"""

    async def get_transactions(self, network: str, pool_address: str,
                               origins: List[str]) -> Optional[Tuple[Pool, List[ReconciledTransaction]]]:
        """Fetch the pool snapshot and the reconciled history of ``origins`` in it"""
        pool = await subgraph_service.get_pool(network, pool_address)
        if not pool:
            logger.warning(f"Pool {pool_address} not found on {network}")
            return None

        mints_burns = await subgraph_service.get_mints_burns(network, pool, origins)
        burn_ids = [event.transaction.id for event in mints_burns if event.kind == EventKind.BURN]
        collects = await subgraph_service.get_collects(network, pool, burn_ids)

        transactions = reconcile(mints_burns, collects)
        logger.info(f"Reconciled {len(transactions)} transactions for {pool_address} on {network}")
        return pool, transactions

    def resolve_base_token(self, pool: Pool, base_token_address: Optional[str] = None) -> Token:
        """Pick the base token, token1 unless another pool token is requested"""
        if not base_token_address:
            return pool.token1
        for token in (pool.token0, pool.token1):
            if token.address.lower() == base_token_address.lower():
                return token
        raise UnknownAssetError(base_token_address, pool.address or "")

    async def _get_uncollected_fees(self, network: str, position: PositionInfo, pool: Pool) -> List[AssetAmount]:
        if not web3_manager.is_available(network):
            return []
        return await asyncio.to_thread(
            web3_manager.get_uncollected_fees, network, int(position.id), position.owner, pool
        )

    async def _get_liquidity(self, network: str, position: PositionInfo) -> int:
        """On-chain liquidity of a position, the indexed value when no RPC is configured"""
        if not web3_manager.is_available(network):
            return position.liquidity
        liquidity = await asyncio.to_thread(web3_manager.get_position_liquidity, network, int(position.id))
        return position.liquidity if liquidity is None else liquidity

    async def get_position_states(self, network: str, pool: Pool, base_token: Token,
                                  owners: List[str]) -> List[PositionState]:
        """Current amounts, value, status and pending fees of every position of ``owners``"""
        positions = await subgraph_service.get_positions(network, pool, owners)

        states = []
        for position in positions:
            liquidity = await self._get_liquidity(network, position)
            raw0, raw1 = get_amounts_for_liquidity(
                pool.sqrt_price_x96, position.tick_lower, position.tick_upper, liquidity
            )
            amount0 = AssetAmount.from_raw(pool.token0, raw0)
            amount1 = AssetAmount.from_raw(pool.token1, raw1)

            states.append(PositionState(
                id=position.id,
                tick_lower=position.tick_lower,
                tick_upper=position.tick_upper,
                liquidity=liquidity,
                amount0=amount0,
                amount1=amount1,
                value=quote(pool, base_token, amount0, amount1),
                uncollected_fees=await self._get_uncollected_fees(network, position, pool),
                status=get_position_status(pool.tick, position.tick_lower, position.tick_upper, liquidity),
            ))
        return states

    async def _get_gas_converter(self, network: str, pool: Pool, base_token: Token) -> GasConverter:
        converter = await currency_service.get_gas_converter(network, base_token, pool)
        if converter is None:
            logger.warning(f"Gas costs on {network} are left out of the return")
            converter = GasConverter(chain_currencies.gas_token(base_token.chain_id), base_token, Fraction(0))
        return converter

    async def get_performance(self, network: str, pool_address: str, origins: List[str],
                              base_token_address: Optional[str] = None,
                              now: Optional[int] = None) -> Optional[PerformanceReport]:
        """Compute return, APR and fee APY of the liquidity ``origins`` provided to a pool"""
        history = await self.get_transactions(network, pool_address, origins)
        if history is None:
            return None

        pool, transactions = history
        now = current_timestamp() if now is None else now
        base_token = self.resolve_base_token(pool, base_token_address)

        positions = await self.get_position_states(network, pool, base_token, origins)

        current_value = AssetAmount.zero(base_token)
        current_liquidity = 0
        fees0 = AssetAmount.zero(pool.token0)
        fees1 = AssetAmount.zero(pool.token1)
        for position in positions:
            current_value = current_value.add(position.value)
            current_liquidity += position.liquidity
            if len(position.uncollected_fees) == 2:
                fees0 = fees0.add(position.uncollected_fees[0])
                fees1 = fees1.add(position.uncollected_fees[1])
        uncollected_fees = [fees0, fees1] if any(p.uncollected_fees for p in positions) else []

        totals = compute_totals(transactions, base_token, pool)
        converter = await self._get_gas_converter(network, pool, base_token)
        returns = compute_return(
            base_token, totals, current_value, converter,
            significant_digits=settings.return_significant_digits,
        )

        return PerformanceReport(
            network=network,
            pool_address=pool.address or pool_address,
            pool=pool,
            base_token=base_token,
            transactions=transactions,
            totals=totals,
            positions=positions,
            current_value=current_value,
            current_liquidity=current_liquidity,
            return_value=returns.return_value,
            return_percent=returns.return_percent,
            apr=compute_apr(transactions, returns.return_percent, current_liquidity, now=now),
            fee_apy=compute_fee_apy(pool, base_token, uncollected_fees, transactions, now=now),
            generated_at=now,
        )


# Global position service
position_service = PositionService()
