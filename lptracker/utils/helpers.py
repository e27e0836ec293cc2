import math
import time
from decimal import Decimal, localcontext
from typing import Union

SECONDS_PER_YEAR = 365 * 24 * 60 * 60


def decimal_to_raw(amount: Union[str, int, Decimal], decimals: int) -> int:
    """
    Scale a decimal token amount (as returned by the subgraph) up to raw units,
    rounding up like the indexer's consumers do
    """
    with localcontext() as ctx:
        ctx.prec = 80
        scaled = Decimal(str(amount)) * Decimal(10 ** decimals)
    return math.ceil(scaled)


def calculate_price_from_sqrt_price(sqrt_price_x96: int, decimals0: int, decimals1: int) -> str:
    """
    Calculate price of token0 in token1 from sqrtPriceX96
    Price = (sqrtPriceX96 / 2^96)^2 * (10^decimals0 / 10^decimals1)
    """
    with localcontext() as ctx:
        ctx.prec = 80
        sqrt_price = Decimal(sqrt_price_x96) / Decimal(2 ** 96)
        price = sqrt_price ** 2

        # Adjust for token decimals
        price = price * (Decimal(10 ** decimals0) / Decimal(10 ** decimals1))

    return str(price)


def tick_to_price(tick: int, decimals0: int, decimals1: int) -> str:
    """
    Convert tick to price of token0 in token1
    Price = 1.0001^tick * (10^decimals0 / 10^decimals1)
    """
    with localcontext() as ctx:
        ctx.prec = 80
        price = Decimal("1.0001") ** tick
        price = price * (Decimal(10 ** decimals0) / Decimal(10 ** decimals1))

    return str(price)


def current_timestamp() -> int:
    """Current Unix time in whole seconds"""
    return int(time.time())


def seconds_between(start: int, end: int) -> int:
    """Whole seconds from ``start`` to ``end`` (negative when end is earlier)"""
    return int(end) - int(start)


def normalize_address(address: str) -> str:
    """
    Normalize Ethereum address to checksum format
    """
    from web3 import Web3
    return Web3.to_checksum_address(address.lower())


def is_valid_address(address: str) -> bool:
    """
    Check if address is valid Ethereum address
    """
    from web3 import Web3
    try:
        Web3.to_checksum_address(address)
        return True
    except (ValueError, TypeError):
        return False
