from lptracker.errors import UnknownAssetError
from lptracker.models import AssetAmount, Pool, Token


def quote(pool: Pool, base_token: Token, amount0: AssetAmount, amount1: AssetAmount) -> AssetAmount:
    """
    Value a two-token amount in ``base_token`` at the pool's current price.

    The leg that is not the base token is quoted through the pool and added
    to the base leg.
    """
    if pool.token0.equals(base_token):
        return pool.quote(amount1).add(amount0)
    if pool.token1.equals(base_token):
        return pool.quote(amount0).add(amount1)
    raise UnknownAssetError(base_token.symbol or base_token.address, pool.address or "")
