"""Market data models for Kraken spot pairs."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TradingPair:
    """A base/quote pair and both of its Kraken symbol encodings.

    Kraken's public Ticker endpoint accepts the short name (``XBTEUR``) but
    keys its result by the legacy name (``XXBTZEUR``), which is also the
    name AddOrder expects. Both are derived here so they cannot drift.
    """

    base: str = "XBT"
    quote: str = "EUR"

    @property
    def query_symbol(self) -> str:
        return f"{self.base}{self.quote}"

    @property
    def legacy_symbol(self) -> str:
        return f"X{self.base}Z{self.quote}"

    def __str__(self) -> str:
        return f"{self.base}/{self.quote}"


@dataclass(frozen=True)
class TickerSnapshot:
    pair: TradingPair
    last_trade_price: Decimal
