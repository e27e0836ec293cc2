import os
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # API Configuration
    log_level: str = "INFO"
    request_timeout: int = 30

    # Network Configuration
    networks: str = "ethereum,polygon,arbitrum,optimism"
    network: Optional[str] = None

    # Uniswap V3 NonfungiblePositionManager (same address on all supported chains)
    position_manager_address: str = "0xC36442b4a4522E871399CD717aBDD847Ab11FE88"

    # Significant digits used when rendering amounts for the return percentage
    return_significant_digits: int = 6

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        env_prefix="",  # No prefix for env vars
    )

    @property
    def networks_list(self) -> List[str]:
        """Parse networks from comma-separated string"""
        return [network.strip() for network in self.networks.split(",") if network.strip()]

    @property
    def active_networks(self) -> List[str]:
        """Get active networks (single network mode or all configured)"""
        all_networks = self.networks_list
        if self.network and self.network in all_networks:
            return [self.network]  # Single network mode
        return all_networks

    def get_subgraph_url(self, network: str) -> str:
        """Get subgraph URL for specific network from environment variables"""
        env_var_name = f"{network.upper()}_SUBGRAPH_URL"
        return os.getenv(env_var_name, "")

    def get_rpc_url(self, network: str) -> str:
        """Get RPC URL for specific network from environment variables"""
        env_var_name = f"{network.upper()}_RPC_URL"
        return os.getenv(env_var_name, "")


settings = Settings()
