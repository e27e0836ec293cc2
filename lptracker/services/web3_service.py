import logging
from typing import Any, Dict, List, Optional
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware
from lptracker.config import settings
from lptracker.models import AssetAmount, Pool
from lptracker.utils import normalize_address
from lptracker.utils.abi import MAX_UINT128, POSITION_MANAGER_ABI

logger = logging.getLogger(__name__)

# Networks whose blocks carry PoA extra data
POA_NETWORKS = ["polygon"]


class Web3Manager:
    """Manages Web3 connections for different networks"""

    def __init__(self):
        self._connections: Dict[str, Web3] = {}

    def _connect(self, network: str) -> Optional[Web3]:
        """Open a Web3 connection for ``network`` if an RPC URL is configured"""
        rpc_url = settings.get_rpc_url(network)
        if not rpc_url:
            logger.debug(f"No RPC URL configured for {network}")
            return None

        try:
            w3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": settings.request_timeout}))

            # Add PoA middleware for networks that need it
            if network in POA_NETWORKS:
                w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)

            if w3.is_connected():
                logger.info(f"Connected to {network} network")
                return w3
            logger.error(f"Failed to connect to {network} network")
        except Exception as e:
            logger.error(f"Error connecting to {network}: {e}")
        return None

    def get_web3(self, network: str) -> Optional[Web3]:
        """Get Web3 instance for specific network, connecting on first use"""
        if network not in self._connections:
            w3 = self._connect(network)
            if w3 is None:
                return None
            self._connections[network] = w3
        return self._connections[network]

    def is_available(self, network: str) -> bool:
        return bool(settings.get_rpc_url(network))

    def call_contract_function(self, network: str, contract_address: str, abi: list,
                               function_name: str, *args, tx_params: Optional[dict] = None) -> Any:
        """Call contract function without sending a transaction"""
        w3 = self.get_web3(network)
        if w3:
            try:
                contract = w3.eth.contract(address=normalize_address(contract_address), abi=abi)
                function = getattr(contract.functions, function_name)
                return function(*args).call(tx_params or {})
            except Exception as e:
                logger.error(f"Error calling {function_name} on {contract_address}: {e}")
        return None

    def get_position_liquidity(self, network: str, token_id: int) -> Optional[int]:
        """Current liquidity of an NFT position"""
        position = self.call_contract_function(
            network, settings.position_manager_address, POSITION_MANAGER_ABI, "positions", token_id
        )
        if position is None:
            return None
        return int(position[7])

    def get_uncollected_fees(self, network: str, token_id: int, owner: str, pool: Pool) -> List[AssetAmount]:
        """
        Fees accrued by a position and not collected yet.

        Simulates ``collect`` with maximum amounts from the owner's account;
        the returned amounts are what a collect would pay out right now.
        """
        owner = normalize_address(owner)
        params = (token_id, owner, MAX_UINT128, MAX_UINT128)
        result = self.call_contract_function(
            network, settings.position_manager_address, POSITION_MANAGER_ABI, "collect", params,
            tx_params={"from": owner},
        )
        if result is None:
            return []

        amount0, amount1 = result
        return [
            AssetAmount.from_raw(pool.token0, int(amount0)),
            AssetAmount.from_raw(pool.token1, int(amount1)),
        ]


# Global Web3 manager instance
web3_manager = Web3Manager()
