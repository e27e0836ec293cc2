"""
Chain ids and the native gas currency of each supported chain.

Gas costs are valued in the wrapped native token of the chain (WETH9 on the
Ethereum-family chains) except on Polygon, where gas is paid in MATIC.
"""

import logging
from typing import Dict, Optional

from lptracker.models.tokens import Token

logger = logging.getLogger(__name__)

# Chain IDs
CHAIN_IDS = {
    "ethereum": 1,
    "optimism": 10,
    "polygon": 137,
    "arbitrum": 42161,
}

POLYGON_CHAIN_ID = 137

WETH9 = {
    1: Token(
        chain_id=1,
        address="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        decimals=18,
        symbol="WETH",
        name="Wrapped Ether",
    ),
    10: Token(
        chain_id=10,
        address="0x4200000000000000000000000000000000000006",
        decimals=18,
        symbol="WETH",
        name="Wrapped Ether",
    ),
    42161: Token(
        chain_id=42161,
        address="0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
        decimals=18,
        symbol="WETH",
        name="Wrapped Ether",
    ),
}

MATIC = {
    POLYGON_CHAIN_ID: Token(
        chain_id=POLYGON_CHAIN_ID,
        address="0x0000000000000000000000000000000000001010",
        decimals=18,
        symbol="MATIC",
        name="Matic",
    ),
}


class ChainCurrencies:
    """Lookup of the gas currency for a chain id"""

    def __init__(self, gas_tokens: Optional[Dict[int, Token]] = None):
        if gas_tokens is None:
            gas_tokens = {**WETH9, **MATIC}
        self._gas_tokens: Dict[int, Token] = dict(gas_tokens)

    def gas_token(self, chain_id: int) -> Token:
        """Get the token gas is paid in on ``chain_id``"""
        token = self._gas_tokens.get(chain_id)
        if token is None:
            raise KeyError(f"No gas currency configured for chain {chain_id}")
        return token

    def register(self, token: Token):
        """Register (or replace) the gas currency of ``token.chain_id``"""
        logger.debug(f"Registering gas currency {token.symbol} for chain {token.chain_id}")
        self._gas_tokens[token.chain_id] = token

    def __contains__(self, chain_id: int) -> bool:
        return chain_id in self._gas_tokens


def get_chain_id(network: str) -> int:
    """Resolve a network name into its chain id"""
    try:
        return CHAIN_IDS[network.lower()]
    except KeyError:
        raise ValueError(f"Unsupported network: {network}")


# Global chain currency registry
chain_currencies = ChainCurrencies()
