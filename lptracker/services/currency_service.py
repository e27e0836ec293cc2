import logging
from fractions import Fraction
from typing import Optional

from lptracker.config.chains import ChainCurrencies, chain_currencies
from lptracker.errors import AssetMismatchError
from lptracker.models import AssetAmount, Pool, Token
from lptracker.services.subgraph_service import subgraph_service

logger = logging.getLogger(__name__)


class GasConverter:
    """Converts gas-currency amounts into a base token at a fixed rate"""

    def __init__(self, gas_token: Token, base_token: Token, rate: Fraction):
        self.gas_token = gas_token
        self.base_token = base_token
        self.rate = Fraction(rate)  # base tokens per one gas token, human units

    @classmethod
    def from_pool(cls, pool: Pool, gas_token: Token, base_token: Token) -> "GasConverter":
        """Use the pool's own price when it trades the gas token against the base token"""
        one = AssetAmount.from_decimal(gas_token, 1)
        quoted = pool.quote(one)
        if not quoted.token.equals(base_token):
            raise AssetMismatchError(f"Pool does not trade {gas_token.symbol} against {base_token.symbol}")
        return cls(gas_token, base_token, Fraction(quoted.raw, quoted.decimal_scale))

    def convert(self, amount: AssetAmount) -> AssetAmount:
        if amount.token.equals(self.base_token):
            return amount
        if not amount.token.equals(self.gas_token):
            raise AssetMismatchError(f"Cannot convert {amount.token.symbol} with a {self.gas_token.symbol} rate")

        human = amount.raw / amount.decimal_scale
        return AssetAmount(token=self.base_token, raw=human * self.rate * (10 ** self.base_token.decimals))

    def __call__(self, amount: AssetAmount) -> AssetAmount:
        return self.convert(amount)


class CurrencyService:
    """Service for valuing gas costs in the investor's base token"""

    def __init__(self, currencies: Optional[ChainCurrencies] = None):
        self._currencies = currencies or chain_currencies

    async def get_gas_converter(self, network: str, base_token: Token,
                                pool: Optional[Pool] = None) -> Optional[GasConverter]:
        """
        Build a converter from the chain's gas currency into ``base_token``
        at the current rate. Returns None when no rate is available.
        """
        gas_token = self._currencies.gas_token(base_token.chain_id)

        if gas_token.equals(base_token):
            return GasConverter(gas_token, base_token, Fraction(1))

        if pool is not None and pool.involves_token(gas_token) and pool.involves_token(base_token):
            return GasConverter.from_pool(pool, gas_token, base_token)

        native_price = await subgraph_service.get_native_price(network, base_token)
        if not native_price:
            logger.warning(f"No native price for {base_token.symbol} on {network}")
            return None

        return GasConverter(gas_token, base_token, 1 / native_price)


# Global currency service
currency_service = CurrencyService()
