from .quoter import quote
from .reconciler import reconcile
from .fee_yield import period_yield, compute_fee_apy
from .metrics import compute_totals, compute_return, compute_apr, transaction_breakdown, get_position_status
from .subgraph_service import subgraph_service
from .currency_service import currency_service
from .web3_service import web3_manager
from .position_service import position_service
from .serializer_service import serializer_service

__all__ = [
    "quote",
    "reconcile",
    "period_yield",
    "compute_fee_apy",
    "compute_totals",
    "compute_return",
    "compute_apr",
    "transaction_breakdown",
    "get_position_status",
    "subgraph_service",
    "currency_service",
    "web3_manager",
    "position_service",
    "serializer_service"
]
