from .tokens import *
from .pool import *
from .events import *
from .metrics import *
from .reports import *

__all__ = [
    "Token", "AssetAmount", "Pool", "PositionInfo",
    "EventKind", "TransactionInfo", "RawEvent", "GasCost", "ReconciledTransaction",
    "Totals", "ReturnResult", "PeriodState", "YieldSample", "TransactionBreakdown",
    "PositionStatus", "PositionState", "PerformanceReport",
    "TokenView", "AmountView", "TransactionView", "PositionView",
    "TransactionsResponse", "PerformanceResponse",
]
