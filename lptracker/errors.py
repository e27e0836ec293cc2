"""
Exception classes raised by the metrics engine.
"""


class LPTrackerError(Exception):
    """Base exception for position tracking."""
    pass


class UnknownAssetError(LPTrackerError, ValueError):
    """Raised when a base asset is not one of the pool's assets."""

    def __init__(self, asset: str, pool: str = ""):
        message = f"Asset {asset} is not part of pool {pool}" if pool else f"Unknown asset {asset}"
        super().__init__(message)
        self.asset = asset
        self.pool = pool


class AssetMismatchError(LPTrackerError, ValueError):
    """Raised when amounts of different assets are combined."""
    pass
