from enum import Enum
from typing import List
from pydantic import BaseModel, ConfigDict

from lptracker.models.events import ReconciledTransaction
from lptracker.models.pool import Pool
from lptracker.models.tokens import AssetAmount, Token


class Totals(BaseModel):
    """Summed value of a transaction history"""
    model_config = ConfigDict(frozen=True)

    total_mint: AssetAmount
    total_burn: AssetAmount
    total_collect: AssetAmount
    total_gas_cost: AssetAmount  # in the chain's gas currency


class ReturnResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    return_value: AssetAmount
    return_percent: float


class PeriodState(BaseModel):
    """Open fee period carried through the yield fold"""
    start: int
    liquidity_added: AssetAmount
    liquidity_removed: AssetAmount


class YieldSample(BaseModel):
    """Per-second fee rate over one period"""
    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    fees: AssetAmount
    liquidity: AssetAmount
    rate: AssetAmount


class TransactionBreakdown(BaseModel):
    """Value of a transaction and the share contributed by each token"""
    model_config = ConfigDict(frozen=True)

    value: AssetAmount
    percent0: str
    percent1: str


class PositionStatus(str, Enum):
    INACTIVE = "inactive"
    IN_RANGE = "in_range"
    OUT_RANGE = "out_range"


class PositionState(BaseModel):
    """Current state of one liquidity position"""
    id: str
    tick_lower: int
    tick_upper: int
    liquidity: int
    amount0: AssetAmount
    amount1: AssetAmount
    value: AssetAmount  # in the base token
    uncollected_fees: List[AssetAmount] = []
    status: PositionStatus


class PerformanceReport(BaseModel):
    """Performance of an investor's liquidity in one pool"""
    network: str
    pool_address: str
    pool: Pool
    base_token: Token
    transactions: List[ReconciledTransaction]
    totals: Totals
    positions: List[PositionState] = []
    current_value: AssetAmount
    current_liquidity: int
    return_value: AssetAmount
    return_percent: float
    apr: float
    fee_apy: float
    generated_at: int
