"""
Price history providers.

A provider turns a symbol into a ``PriceHistory``: ascending daily bars, the
latest price and volume, and a company name when one is known. Partial bars
are skipped rather than failing the whole history.

Usage:
    from swingdesk.services.price_provider import YFinancePriceProvider

    provider = YFinancePriceProvider()
    history = await provider.get_history("RELIANCE")
"""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Optional, Protocol

import pandas as pd
import yfinance as yf

from swingdesk.core.config import settings
from swingdesk.core.exceptions import PriceFeedError
from swingdesk.core.logging import get_logger
from swingdesk.domain.price import PriceHistory


logger = get_logger("services.price_provider")

# Thread pool for blocking yfinance calls
_executor = ThreadPoolExecutor(max_workers=4)


class PriceHistoryProvider(Protocol):
    """Source of OHLCV history for a symbol."""

    async def get_history(self, symbol: str) -> PriceHistory: ...


def to_provider_symbol(symbol: str, suffix: str | None = None) -> str:
    """Append the default exchange suffix to bare symbols.

    ``RELIANCE`` -> ``RELIANCE.NS``; ``TCS.BO`` and ``^NSEI`` are left alone.
    """
    suffix = settings.default_exchange_suffix if suffix is None else suffix
    if "." in symbol or symbol.startswith("^") or not suffix:
        return symbol
    return f"{symbol}{suffix}"


def _company_name(info: dict[str, Any]) -> Optional[str]:
    return info.get("longName") or info.get("shortName") or None


class YFinancePriceProvider:
    """Yahoo Finance daily history via yfinance, run in a thread pool."""

    def __init__(
        self,
        period: str | None = None,
        suffix: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.period = period or settings.history_period
        self.suffix = suffix
        self.timeout = timeout or settings.external_api_timeout

    def _fetch_sync(self, symbol: str) -> PriceHistory:
        yahoo_symbol = to_provider_symbol(symbol, self.suffix)
        logger.info(f"Fetching price history for {yahoo_symbol}")

        ticker = yf.Ticker(yahoo_symbol)
        try:
            df: pd.DataFrame = ticker.history(
                period=self.period, interval="1d", auto_adjust=False
            )
        except Exception as e:
            raise PriceFeedError(
                f"Price history request failed for {symbol}",
                details={"symbol": symbol},
            ) from e

        company_name = None
        try:
            company_name = _company_name(ticker.info or {})
        except Exception as e:
            logger.debug(f"Ticker info unavailable for {yahoo_symbol}: {e}")

        return PriceHistory.from_dataframe(symbol, df, company_name=company_name)

    async def get_history(self, symbol: str) -> PriceHistory:
        loop = asyncio.get_running_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(_executor, self._fetch_sync, symbol),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            raise PriceFeedError(
                f"Price history request timed out for {symbol}",
                details={"symbol": symbol, "timeout": self.timeout},
            ) from None
