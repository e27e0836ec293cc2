from enum import Enum
from pydantic import BaseModel, ConfigDict

from lptracker.models.tokens import AssetAmount


class EventKind(str, Enum):
    """Kind of liquidity event"""
    MINT = "mint"
    BURN = "burn"
    COLLECT = "collect"


class TransactionInfo(BaseModel):
    """On-chain transaction that emitted an event"""
    model_config = ConfigDict(frozen=True)

    id: str
    gas_used: int
    gas_price: int


class RawEvent(BaseModel):
    """Decoded Mint, Burn or Collect event as reported by the indexer"""
    model_config = ConfigDict(frozen=True)

    kind: EventKind
    tick_lower: int
    tick_upper: int
    timestamp: int
    amount0: AssetAmount
    amount1: AssetAmount
    transaction: TransactionInfo

    @property
    def chain_id(self) -> int:
        return self.amount0.token.chain_id


class GasCost(BaseModel):
    """Gas paid by a transaction"""
    model_config = ConfigDict(frozen=True)

    used: int
    price: int
    cost: int  # used * price, in wei
    cost_currency: AssetAmount  # cost valued in the chain's gas currency


class ReconciledTransaction(BaseModel):
    """One logical liquidity action of the investor"""
    model_config = ConfigDict(frozen=True)

    id: str
    type: EventKind
    tick_lower: int
    tick_upper: int
    timestamp: int
    amount0: AssetAmount
    amount1: AssetAmount
    gas: GasCost

    @property
    def is_zero_liquidity(self) -> bool:
        return self.amount0.is_zero() and self.amount1.is_zero()
