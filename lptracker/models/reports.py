from typing import Dict, List, Optional
from pydantic import BaseModel


class TokenView(BaseModel):
    id: str
    symbol: str
    name: str
    decimals: int
    chainId: int


class AmountView(BaseModel):
    tokenId: str
    symbol: str
    amount: str  # decimal string, no exponent notation


class TransactionView(BaseModel):
    txnId: str
    type: str  # "mint", "burn" or "collect"
    label: str
    timestamp: int
    tickLower: int
    tickUpper: int
    amount0: AmountView
    amount1: AmountView
    value: AmountView
    percent0: str
    percent1: str
    gasCost: AmountView


class PositionView(BaseModel):
    id: str
    tickLower: int
    tickUpper: int
    priceLower: str  # token0 in token1 at the lower tick
    priceUpper: str
    liquidity: str
    status: str
    amount0: AmountView
    amount1: AmountView
    value: AmountView
    uncollectedFees: List[AmountView] = []


class TransactionsResponse(BaseModel):
    transactions: List[TransactionView]


class PerformanceResponse(BaseModel):
    network: str
    pairId: str
    baseToken: TokenView
    price: str  # current price of token0 in token1
    totals: Dict[str, AmountView]
    currentValue: AmountView
    returnValue: AmountView
    returnPercent: float
    apr: float
    feeApy: float
    positions: List[PositionView] = []
    transactions: List[TransactionView] = []
    metadata: Optional[Dict[str, str]] = None
