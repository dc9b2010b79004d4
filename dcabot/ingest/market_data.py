"""Kraken public Ticker client for last-trade prices."""

import logging
from decimal import Decimal, InvalidOperation

import httpx

from dcabot.models.market import TickerSnapshot, TradingPair

logger = logging.getLogger(__name__)

KRAKEN_BASE_URL = "https://api.kraken.com"
TICKER_PATH = "/0/public/Ticker"


class MarketDataError(Exception):
    """Base for price-fetch failures. No order is attempted after one."""


class MarketUnavailable(MarketDataError):
    """Raised on transport failure or a non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(MarketDataError):
    """Raised when the ticker payload lacks a usable last-trade price."""


def parse_last_price(payload: object, pair: TradingPair) -> Decimal:
    """Extract result.<legacy_symbol>.c[0] as an exact Decimal.

    The error array only matters when the price is absent; Kraken also puts
    W-prefixed warnings there alongside a valid result.
    """
    if not isinstance(payload, dict):
        raise MalformedResponse("ticker response is not a JSON object")
    result = payload.get("result")
    entry = result.get(pair.legacy_symbol) if isinstance(result, dict) else None
    closes = entry.get("c") if isinstance(entry, dict) else None
    if not isinstance(closes, list) or not closes or not isinstance(closes[0], str):
        errors = payload.get("error") or []
        detail = f" (ticker error: {'; '.join(map(str, errors))})" if errors else ""
        raise MalformedResponse(f"missing result.{pair.legacy_symbol}.c[0]{detail}")

    try:
        price = Decimal(closes[0])
    except InvalidOperation as e:
        raise MalformedResponse(f"last trade price {closes[0]!r} is not a decimal") from e
    if not price.is_finite():
        raise MalformedResponse(f"last trade price {closes[0]!r} is not finite")
    return price


class MarketDataClient:
    def __init__(
        self,
        http: httpx.Client,
        base_url: str = KRAKEN_BASE_URL,
        timeout: float = 30.0,
    ):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_last_price(self, pair: TradingPair) -> TickerSnapshot:
        """Fetch the last trade price for a pair."""
        url = f"{self.base_url}{TICKER_PATH}"
        try:
            resp = self.http.get(url, params={"pair": pair.query_symbol}, timeout=self.timeout)
        except httpx.RequestError as e:
            logger.error("Ticker request failed for %s: %s", pair.query_symbol, e)
            raise MarketUnavailable(f"Ticker request failed: {e}") from e

        if not resp.is_success:
            logger.error("Ticker %s returned HTTP %d", pair.query_symbol, resp.status_code)
            raise MarketUnavailable(f"HTTP {resp.status_code}", resp.status_code)

        try:
            payload = resp.json()
        except ValueError as e:
            raise MalformedResponse("ticker response is not JSON") from e

        price = parse_last_price(payload, pair)
        logger.debug("Last trade price for %s: %s", pair, price)
        return TickerSnapshot(pair=pair, last_trade_price=price)
