from decimal import Decimal, localcontext
from fractions import Fraction
from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, model_validator

from lptracker.errors import UnknownAssetError
from lptracker.models.tokens import AssetAmount, Token

Q192 = 2 ** 192


class Pool(BaseModel):
    """
    Snapshot of a concentrated liquidity pool.

    The price of token0 in token1 (raw units) is ``sqrt_price_x96**2 / 2**192``.
    A new Pool is built whenever on-chain state changes.
    """
    model_config = ConfigDict(frozen=True)

    token0: Token
    token1: Token
    fee: int
    sqrt_price_x96: int = Field(gt=0)
    tick: int = 0
    liquidity: int = 0
    address: Optional[str] = None

    @model_validator(mode="after")
    def _check_tokens(self):
        if self.token0.chain_id != self.token1.chain_id:
            raise ValueError("Pool tokens must be on the same chain")
        if self.token0.equals(self.token1):
            raise ValueError("Pool tokens must be different")
        return self

    @classmethod
    def from_price(cls, token0: Token, token1: Token, fee: int,
                   price: Union[str, int, Decimal], **kwargs) -> "Pool":
        """Build a pool from a human readable price of token0 in token1"""
        with localcontext() as ctx:
            ctx.prec = 80
            raw_price = Decimal(str(price)) * Decimal(10 ** token1.decimals) / Decimal(10 ** token0.decimals)
            sqrt_price_x96 = int(raw_price.sqrt() * Decimal(2 ** 96))
        return cls(token0=token0, token1=token1, fee=fee, sqrt_price_x96=sqrt_price_x96, **kwargs)

    @property
    def chain_id(self) -> int:
        return self.token0.chain_id

    @property
    def token0_price(self) -> Fraction:
        """Raw amount of token1 for one raw unit of token0"""
        return Fraction(self.sqrt_price_x96 * self.sqrt_price_x96, Q192)

    @property
    def token1_price(self) -> Fraction:
        """Raw amount of token0 for one raw unit of token1"""
        return Fraction(Q192, self.sqrt_price_x96 * self.sqrt_price_x96)

    def involves_token(self, token: Token) -> bool:
        return token.equals(self.token0) or token.equals(self.token1)

    def price_of(self, token: Token) -> Fraction:
        """Price of ``token`` denominated in the other pool token"""
        if token.equals(self.token0):
            return self.token0_price
        if token.equals(self.token1):
            return self.token1_price
        raise UnknownAssetError(token.symbol or token.address, self.address or "")

    def other(self, token: Token) -> Token:
        if token.equals(self.token0):
            return self.token1
        if token.equals(self.token1):
            return self.token0
        raise UnknownAssetError(token.symbol or token.address, self.address or "")

    def quote(self, amount: AssetAmount) -> AssetAmount:
        """Convert ``amount`` into the other pool token at the current price"""
        return AssetAmount(token=self.other(amount.token), raw=amount.raw * self.price_of(amount.token))


class PositionInfo(BaseModel):
    """Liquidity position as indexed by the subgraph"""
    model_config = ConfigDict(frozen=True)

    id: str  # NFT token id
    owner: str
    tick_lower: int
    tick_upper: int
    liquidity: int
