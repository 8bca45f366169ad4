"""Quote provider base class."""
from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal


class BaseQuoteProvider(ABC):
    """Abstract base class for exchange rate quote providers.

    A provider returns the price of one Siacoin in the requested fiat
    currency. Implementations raise ``QuoteUnavailable`` on transport or
    payload failures and ``CurrencyNotFoundError`` when the currency is
    absent from the upstream response.
    """

    NAME: str = "base"

    @abstractmethod
    async def get_quote(self, currency: str) -> Decimal:
        """Fetch the current exchange rate for a currency."""
