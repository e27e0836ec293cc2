import logging
import aiohttp

from decimal import Decimal
from fractions import Fraction
from typing import Dict, List, Optional
from lptracker.config import settings
from lptracker.config.chains import get_chain_id
from lptracker.models import (
    AssetAmount, EventKind, Pool, PositionInfo, RawEvent, Token, TransactionInfo
)
from lptracker.utils import decimal_to_raw, normalize_address

logger = logging.getLogger(__name__)

# Largest page the hosted subgraphs serve
PAGE_SIZE = 1000

EVENT_FIELDS = """
                id
                tickLower
                tickUpper
                timestamp
                amount0
                amount1
                transaction {
                    id
                    gasUsed
                    gasPrice
                }"""


class SubgraphService:
    """Service for fetching pools, positions and liquidity events from Uniswap V3 subgraphs"""

    def __init__(self):
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=settings.request_timeout)
            )
        return self._session

    async def close(self):
        """Close aiohttp session"""
        if self._session and not self._session.closed:
            await self._session.close()

    async def query_subgraph(self, network: str, query: str, variables: Optional[Dict] = None) -> Optional[Dict]:
        """Execute GraphQL query against subgraph"""
        subgraph_url = settings.get_subgraph_url(network)
        if not subgraph_url:
            logger.error(f"No subgraph URL configured for network: {network}")
            return None

        session = await self._get_session()

        payload = {
            "query": query,
            "variables": variables or {}
        }

        try:
            async with session.post(subgraph_url, json=payload) as response:
                if response.status == 200:
                    data = await response.json()
                    if "errors" in data:
                        logger.error(f"Subgraph query errors: {data['errors']}")
                        return None
                    return data.get("data")
                else:
                    logger.error(f"Subgraph request failed with status {response.status}")
                    return None
        except Exception as e:
            logger.error(f"Error querying subgraph for {network}: {e}")
            return None

    async def get_latest_block(self, network: str) -> Optional[Dict]:
        """Get latest indexed block from subgraph"""
        query = """
        query GetLatestBlock {
            _meta {
                block {
                    number
                    timestamp
                }
            }
        }
        """

        result = await self.query_subgraph(network, query)
        if result and "_meta" in result:
            block_data = result["_meta"]["block"]
            return {
                "blockNumber": int(block_data["number"]),
                "blockTimestamp": int(block_data["timestamp"] or 0)
            }
        return None

    def _parse_token(self, network: str, token_data: Dict) -> Token:
        return Token(
            chain_id=get_chain_id(network),
            address=normalize_address(token_data["id"]),
            decimals=int(token_data.get("decimals", 18)),
            symbol=token_data.get("symbol", ""),
            name=token_data.get("name", ""),
        )

    async def get_pool(self, network: str, pool_address: str) -> Optional[Pool]:
        """Get the current pool snapshot with full token details in one query"""
        query = """
        query GetPool($poolId: ID!) {
            pool(id: $poolId) {
                id
                token0 {
                    id
                    symbol
                    name
                    decimals
                }
                token1 {
                    id
                    symbol
                    name
                    decimals
                }
                feeTier
                sqrtPrice
                tick
                liquidity
            }
        }
        """

        variables = {"poolId": pool_address.lower()}
        result = await self.query_subgraph(network, query, variables)

        if result and "pool" in result and result["pool"]:
            pool_data = result["pool"]
            try:
                return Pool(
                    address=normalize_address(pool_data["id"]),
                    token0=self._parse_token(network, pool_data["token0"]),
                    token1=self._parse_token(network, pool_data["token1"]),
                    fee=int(pool_data.get("feeTier", 0)),
                    sqrt_price_x96=int(pool_data["sqrtPrice"]),
                    tick=int(pool_data["tick"]) if pool_data.get("tick") is not None else 0,
                    liquidity=int(pool_data.get("liquidity", 0)),
                )
            except Exception as e:
                logger.error(f"Error parsing pool data: {e}")

        return None

    async def _query_paginated(self, network: str, entity: str, where: str,
                               fields: str, variables: Dict) -> List[Dict]:
        """Fetch every ``entity`` matching ``where`` using id cursor pagination"""
        query = f"""
        query Paginated{entity.capitalize()}($first: Int!, $lastId: ID!, {variables_signature(variables)}) {{
            {entity}(
                where: {{ {where}, id_gt: $lastId }},
                first: $first,
                orderBy: id,
                orderDirection: asc
            ) {{{fields}
            }}
        }}
        """

        records: List[Dict] = []
        last_id = ""

        while True:
            page_variables = {**variables, "first": PAGE_SIZE, "lastId": last_id}
            result = await self.query_subgraph(network, query, page_variables)
            batch = result[entity] if result and entity in result else []
            if not batch:
                break

            records.extend(batch)
            last_id = batch[-1]["id"]
            if len(batch) < PAGE_SIZE:
                break

        return records

    def _parse_event(self, kind: EventKind, event_data: Dict, pool: Pool) -> RawEvent:
        transaction = event_data["transaction"]
        return RawEvent(
            kind=kind,
            tick_lower=int(event_data["tickLower"]),
            tick_upper=int(event_data["tickUpper"]),
            timestamp=int(event_data["timestamp"]),
            amount0=AssetAmount.from_raw(pool.token0, decimal_to_raw(event_data["amount0"], pool.token0.decimals)),
            amount1=AssetAmount.from_raw(pool.token1, decimal_to_raw(event_data["amount1"], pool.token1.decimals)),
            transaction=TransactionInfo(
                id=transaction["id"],
                # the subgraph reports the gas limit here, not the gas actually used
                gas_used=int(transaction["gasUsed"]),
                gas_price=int(transaction["gasPrice"]),
            ),
        )

    def _parse_events(self, kind: EventKind, records: List[Dict], pool: Pool) -> List[RawEvent]:
        events = []
        for event_data in records:
            try:
                events.append(self._parse_event(kind, event_data, pool))
            except Exception as e:
                logger.error(f"Error parsing {kind.value} data: {e}")
                continue
        return events

    async def get_mints_burns(self, network: str, pool: Pool, origins: List[str]) -> List[RawEvent]:
        """Get every Mint and Burn sent by ``origins`` in ``pool``"""
        variables = {
            "origins": [origin.lower() for origin in origins],
            "poolAddress": pool.address.lower() if pool.address else "",
        }
        where = "origin_in: $origins, pool: $poolAddress"

        mints = await self._query_paginated(network, "mints", where, EVENT_FIELDS, variables)
        burns = await self._query_paginated(network, "burns", where, EVENT_FIELDS, variables)

        events = self._parse_events(EventKind.MINT, mints, pool) + self._parse_events(EventKind.BURN, burns, pool)
        logger.info(f"Fetched {len(mints)} mints and {len(burns)} burns from {network} subgraph")
        return events

    async def get_collects(self, network: str, pool: Pool, transaction_ids: List[str]) -> List[RawEvent]:
        """Get the Collect events emitted by ``transaction_ids`` in ``pool``"""
        if not transaction_ids:
            return []

        variables = {
            "ids": sorted(set(transaction_ids)),
            "poolAddress": pool.address.lower() if pool.address else "",
        }
        where = "transaction_in: $ids, pool: $poolAddress"

        collects = await self._query_paginated(network, "collects", where, EVENT_FIELDS, variables)
        logger.info(f"Fetched {len(collects)} collects from {network} subgraph")
        return self._parse_events(EventKind.COLLECT, collects, pool)

    async def get_positions(self, network: str, pool: Pool, owners: List[str]) -> List[PositionInfo]:
        """Get the NFT positions held by ``owners`` in ``pool``"""
        fields = """
                id
                owner
                liquidity
                tickLower {
                    tickIdx
                }
                tickUpper {
                    tickIdx
                }"""
        variables = {
            "owners": [owner.lower() for owner in owners],
            "poolAddress": pool.address.lower() if pool.address else "",
        }
        where = "owner_in: $owners, pool: $poolAddress"

        records = await self._query_paginated(network, "positions", where, fields, variables)

        positions = []
        for position_data in records:
            try:
                positions.append(PositionInfo(
                    id=position_data["id"],
                    owner=normalize_address(position_data["owner"]),
                    tick_lower=int(position_data["tickLower"]["tickIdx"]),
                    tick_upper=int(position_data["tickUpper"]["tickIdx"]),
                    liquidity=int(position_data["liquidity"]),
                ))
            except Exception as e:
                logger.error(f"Error parsing position data: {e}")
                continue
        return positions

    async def get_native_price(self, network: str, token: Token) -> Optional[Fraction]:
        """Get the price of one ``token`` in the chain's native currency"""
        query = """
        query GetNativePrice($tokenId: ID!) {
            token(id: $tokenId) {
                id
                derivedETH
            }
        }
        """

        variables = {"tokenId": token.address.lower()}
        result = await self.query_subgraph(network, query, variables)

        if result and "token" in result and result["token"]:
            try:
                return Fraction(Decimal(str(result["token"]["derivedETH"])))
            except Exception as e:
                logger.error(f"Error parsing native price of {token.address}: {e}")

        return None


def variables_signature(variables: Dict) -> str:
    """GraphQL variable declarations for the filter variables of a paginated query"""
    types = {
        "origins": "[String!]!",
        "owners": "[String!]!",
        "ids": "[String!]!",
        "poolAddress": "String!",
    }
    return ", ".join(f"${name}: {types[name]}" for name in variables)


# Global subgraph service instance
subgraph_service = SubgraphService()
