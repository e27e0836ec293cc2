from decimal import Decimal, ROUND_HALF_UP, localcontext
from fractions import Fraction
from typing import Union
from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from lptracker.errors import AssetMismatchError

Scalar = Union[int, Fraction]

# Precision used when rendering exact amounts as decimals
RENDER_PRECISION = 80


class Token(BaseModel):
    """ERC-20 token identity"""
    model_config = ConfigDict(frozen=True)

    chain_id: int
    address: str
    decimals: int
    symbol: str = ""
    name: str = ""

    def equals(self, other: "Token") -> bool:
        return self.chain_id == other.chain_id and self.address.lower() == other.address.lower()

    def __eq__(self, other):
        if isinstance(other, Token):
            return self.equals(other)
        return NotImplemented

    def __hash__(self):
        return hash((self.chain_id, self.address.lower()))


class AssetAmount(BaseModel):
    """
    Exact quantity of a single token.

    ``raw`` holds the magnitude in the token's smallest unit as an exact
    rational, so quoting through a pool price and dividing never loses
    precision. Human value is ``raw / 10**decimals``.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    token: Token
    raw: Fraction

    @field_validator("raw", mode="before")
    @classmethod
    def _to_fraction(cls, value):
        if isinstance(value, Fraction):
            return value
        if isinstance(value, float):
            return Fraction(Decimal(str(value)))
        return Fraction(value)

    @field_serializer("raw")
    def _serialize_raw(self, raw: Fraction) -> str:
        return str(raw)

    @classmethod
    def zero(cls, token: Token) -> "AssetAmount":
        return cls(token=token, raw=0)

    @classmethod
    def from_raw(cls, token: Token, raw: Union[int, str, Fraction]) -> "AssetAmount":
        return cls(token=token, raw=raw)

    @classmethod
    def from_decimal(cls, token: Token, value: Union[str, int, Decimal]) -> "AssetAmount":
        """Build from a human readable value, e.g. ``"1.5"`` WETH"""
        return cls(token=token, raw=Fraction(Decimal(str(value))) * (10 ** token.decimals))

    @property
    def decimal_scale(self) -> int:
        return 10 ** self.token.decimals

    @property
    def quotient(self) -> int:
        """Raw amount truncated toward zero"""
        return int(self.raw)

    def _check(self, other: "AssetAmount"):
        if not isinstance(other, AssetAmount):
            raise TypeError(f"Expected AssetAmount, got {type(other).__name__}")
        if not self.token.equals(other.token):
            raise AssetMismatchError(
                f"Cannot combine {self.token.symbol or self.token.address} "
                f"with {other.token.symbol or other.token.address}"
            )

    # Arithmetic

    def add(self, other: "AssetAmount") -> "AssetAmount":
        self._check(other)
        return AssetAmount(token=self.token, raw=self.raw + other.raw)

    def subtract(self, other: "AssetAmount") -> "AssetAmount":
        self._check(other)
        return AssetAmount(token=self.token, raw=self.raw - other.raw)

    def multiply(self, factor: Scalar) -> "AssetAmount":
        return AssetAmount(token=self.token, raw=self.raw * Fraction(factor))

    def divide(self, divisor: Scalar) -> "AssetAmount":
        return AssetAmount(token=self.token, raw=self.raw / Fraction(divisor))

    def ratio(self, other: "AssetAmount") -> Fraction:
        """Dimensionless ``self / other`` of two amounts of the same token"""
        self._check(other)
        return self.raw / other.raw

    def __add__(self, other: "AssetAmount") -> "AssetAmount":
        return self.add(other)

    def __sub__(self, other: "AssetAmount") -> "AssetAmount":
        return self.subtract(other)

    def __neg__(self) -> "AssetAmount":
        return AssetAmount(token=self.token, raw=-self.raw)

    # Comparison

    def is_zero(self) -> bool:
        return self.raw == 0

    def equal_to(self, other: "AssetAmount") -> bool:
        self._check(other)
        return self.raw == other.raw

    def less_than(self, other: "AssetAmount") -> bool:
        self._check(other)
        return self.raw < other.raw

    def greater_than(self, other: "AssetAmount") -> bool:
        self._check(other)
        return self.raw > other.raw

    def __lt__(self, other: "AssetAmount") -> bool:
        return self.less_than(other)

    def __le__(self, other: "AssetAmount") -> bool:
        return not self.greater_than(other)

    def __gt__(self, other: "AssetAmount") -> bool:
        return self.greater_than(other)

    def __ge__(self, other: "AssetAmount") -> bool:
        return not self.less_than(other)

    # Rendering

    def to_decimal(self) -> Decimal:
        with localcontext() as ctx:
            ctx.prec = RENDER_PRECISION
            return Decimal(self.raw.numerator) / Decimal(self.raw.denominator) / Decimal(self.decimal_scale)

    def to_significant(self, digits: int = 6) -> str:
        """Render with ``digits`` significant digits, rounding half up"""
        value = self.to_decimal()
        if value == 0:
            return "0"
        with localcontext() as ctx:
            ctx.prec = digits
            ctx.rounding = ROUND_HALF_UP
            rounded = +value
        return _plain(rounded)

    def to_fixed(self, places: int = 2) -> str:
        """Render with ``places`` decimal places, rounding half up"""
        quantum = Decimal(1).scaleb(-places)
        with localcontext() as ctx:
            ctx.prec = RENDER_PRECISION
            text = format(self.to_decimal().quantize(quantum, rounding=ROUND_HALF_UP), "f")
        return text[1:] if text.startswith("-") and not text.strip("-0.") else text

    def __float__(self) -> float:
        return float(self.to_decimal())

    def __str__(self) -> str:
        return f"{self.to_significant(6)} {self.token.symbol}".strip()


def _plain(value: Decimal) -> str:
    """Format a Decimal without exponent notation, dropping trailing zeros after the point"""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text
