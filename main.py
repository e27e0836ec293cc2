import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from lptracker.api import router
from lptracker.config import settings
from lptracker.config.chains import get_chain_id

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    from lptracker.services import subgraph_service
    await subgraph_service.close()


# Create FastAPI app
app = FastAPI(
    title="LP Position Tracker",
    description="Return, APR and fee APY of concentrated liquidity positions",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(router, prefix="")

@app.get("/")
async def root():
    """Service info"""
    return {
        "name": "LP Position Tracker",
        "version": "1.0.0",
        "networks": settings.active_networks,
        "endpoints": [
            "/{network}/pools/{pool_address}/transactions",
            "/{network}/pools/{pool_address}/performance"
        ],
        "status": "healthy"
    }

@app.get("/health")
async def health():
    """Subgraph sync state and RPC availability per network"""
    from lptracker.services import subgraph_service, web3_manager

    network_status = {}
    for network in settings.active_networks:
        try:
            latest_block = await subgraph_service.get_latest_block(network)
            network_status[network] = {
                "connected": latest_block is not None,
                "chain_id": get_chain_id(network),
                "latest_block": latest_block.get("blockNumber") if latest_block else None,
                "latest_block_timestamp": latest_block.get("blockTimestamp") if latest_block else None,
                "subgraph_available": True,
                "rpc_available": web3_manager.is_available(network)
            }
        except Exception as e:
            network_status[network] = {
                "connected": False,
                "error": str(e),
                "subgraph_available": False
            }

    return {
        "status": "healthy",
        "networks": network_status
    }

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower()
    )
