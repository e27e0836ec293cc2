from .helpers import *
from .v3_math import *

__all__ = [
    "SECONDS_PER_YEAR", "decimal_to_raw", "calculate_price_from_sqrt_price",
    "tick_to_price", "current_timestamp", "seconds_between", "normalize_address", "is_valid_address",
    "get_sqrt_ratio_at_tick", "get_amounts_for_liquidity",
]
