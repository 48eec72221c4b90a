"""Price domain models.

Type-safe representations of price history data.
"""

from __future__ import annotations

from datetime import date as DateType

import pandas as pd
from pydantic import BaseModel, Field


class PriceBar(BaseModel):
    """Single OHLCV price bar.

    Represents one daily candlestick of price data.
    """

    date: DateType = Field(..., description="Trading date")
    open: float = Field(..., ge=0, description="Opening price")
    high: float = Field(..., ge=0, description="High price")
    low: float = Field(..., ge=0, description="Low price")
    close: float = Field(..., ge=0, description="Closing price")
    volume: int = Field(default=0, ge=0, description="Trading volume")

    model_config = {
        "from_attributes": True,
        "frozen": True,
    }


class PriceHistory(BaseModel):
    """Price history for a symbol as returned by a price history provider.

    ``bars`` are ascending by date with no duplicate dates. ``current_price``
    and ``current_volume`` describe the latest quote, which may be more recent
    than the last complete bar.
    """

    symbol: str = Field(..., description="Ticker symbol")
    company_name: str | None = Field(None, description="Company display name")
    bars: list[PriceBar] = Field(default_factory=list, description="Price bars (chronological)")
    current_price: float | None = Field(None, description="Latest traded price")
    current_volume: int = Field(default=0, ge=0, description="Latest session volume")

    model_config = {
        "from_attributes": True,
    }

    @property
    def closes(self) -> list[float]:
        return [bar.close for bar in self.bars]

    @property
    def volumes(self) -> list[float]:
        return [float(bar.volume) for bar in self.bars]

    @classmethod
    def from_dataframe(
        cls,
        symbol: str,
        df: pd.DataFrame | None,
        company_name: str | None = None,
    ) -> "PriceHistory":
        """Create PriceHistory from a yfinance-style DataFrame.

        Rows with a missing or non-positive open/high/low/close are skipped.
        Duplicate dates keep the last row. The current price and volume are
        taken from the last valid bar.
        """
        if df is None or df.empty:
            return cls(symbol=symbol, company_name=company_name, bars=[])

        open_col = "Open" if "Open" in df.columns else "open"
        high_col = "High" if "High" in df.columns else "high"
        low_col = "Low" if "Low" in df.columns else "low"
        close_col = "Close" if "Close" in df.columns else "close"
        volume_col = "Volume" if "Volume" in df.columns else "volume"

        by_date: dict[DateType, PriceBar] = {}
        for idx, row in df.iterrows():
            if hasattr(idx, "date"):
                bar_date = idx.date() if callable(idx.date) else idx.date
            else:
                bar_date = idx

            ohlc = [row.get(col) for col in (open_col, high_col, low_col, close_col)]
            if any(v is None or pd.isna(v) or float(v) <= 0 for v in ohlc):
                continue

            volume = row.get(volume_col, 0)
            try:
                by_date[bar_date] = PriceBar(
                    date=bar_date,
                    open=float(ohlc[0]),
                    high=float(ohlc[1]),
                    low=float(ohlc[2]),
                    close=float(ohlc[3]),
                    volume=0 if volume is None or pd.isna(volume) else int(volume),
                )
            except (ValueError, TypeError):
                continue

        bars = [by_date[d] for d in sorted(by_date)]
        return cls(
            symbol=symbol,
            company_name=company_name,
            bars=bars,
            current_price=bars[-1].close if bars else None,
            current_volume=bars[-1].volume if bars else 0,
        )
