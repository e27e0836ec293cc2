import logging
from typing import List, Optional
from fastapi import APIRouter, HTTPException, Query, Path
from lptracker.errors import UnknownAssetError
from lptracker.models import PerformanceResponse, TransactionsResponse
from lptracker.services import position_service, serializer_service
from lptracker.utils import is_valid_address, normalize_address
from lptracker.config import settings

logger = logging.getLogger(__name__)
router = APIRouter()


def _parse_origins(origins: str) -> List[str]:
    """Validate a comma-separated list of investor addresses"""
    addresses = [origin.strip() for origin in origins.split(",") if origin.strip()]
    if not addresses:
        raise HTTPException(status_code=400, detail="At least one origin address is required")
    for address in addresses:
        if not is_valid_address(address):
            raise HTTPException(status_code=400, detail=f"Invalid address format: {address}")
    return [normalize_address(address) for address in addresses]


def _check_request(network: str, pool_address: str):
    if network not in settings.active_networks:
        raise HTTPException(status_code=400, detail=f"Unsupported network: {network}")

    if not is_valid_address(pool_address):
        raise HTTPException(status_code=400, detail="Invalid address format")


@router.get("/{network}/pools/{pool_address}/transactions")
async def get_transactions(
    network: str = Path(..., description="Network name"),
    pool_address: str = Path(..., description="Pool address"),
    origins: str = Query(..., description="Comma-separated investor addresses"),
    base: Optional[str] = Query(None, description="Base token address (defaults to token1)")
) -> TransactionsResponse:
    """Get the reconciled liquidity transactions of the investor in a pool"""
    try:
        _check_request(network, pool_address)
        addresses = _parse_origins(origins)

        history = await position_service.get_transactions(network, pool_address, addresses)
        if history is None:
            raise HTTPException(status_code=404, detail=f"Pool {pool_address} not found on {network}")

        pool, transactions = history
        base_token = position_service.resolve_base_token(pool, base)
        return TransactionsResponse(
            transactions=serializer_service.serialize_transactions(pool, base_token, transactions)
        )

    except HTTPException:
        raise
    except UnknownAssetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to fetch transactions for {pool_address}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch transactions")


@router.get("/{network}/pools/{pool_address}/performance")
async def get_performance(
    network: str = Path(..., description="Network name"),
    pool_address: str = Path(..., description="Pool address"),
    origins: str = Query(..., description="Comma-separated investor addresses"),
    base: Optional[str] = Query(None, description="Base token address (defaults to token1)"),
    includeTransactions: bool = Query(True, description="Include the transaction list")
) -> PerformanceResponse:
    """Get return, APR and fee APY of the investor's liquidity in a pool"""
    try:
        _check_request(network, pool_address)
        addresses = _parse_origins(origins)

        report = await position_service.get_performance(network, pool_address, addresses, base)
        if report is None:
            raise HTTPException(status_code=404, detail=f"Pool {pool_address} not found on {network}")

        return serializer_service.serialize_performance(report, include_transactions=includeTransactions)

    except HTTPException:
        raise
    except UnknownAssetError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Failed to compute performance for {pool_address}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute performance")
