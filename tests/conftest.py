"""Pytest configuration and fixtures."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Generator, Sequence

import pytest
from fastapi.testclient import TestClient

from swingdesk.cache.store import InMemoryAnalysisStore
from swingdesk.core.exceptions import PriceFeedError
from swingdesk.domain.price import PriceBar, PriceHistory


def make_bars(
    closes: Sequence[float],
    volumes: Sequence[int] | None = None,
    start: date = date(2024, 1, 1),
) -> list[PriceBar]:
    """Daily bars with a 1% range around each close."""
    volumes = volumes if volumes is not None else [100_000] * len(closes)
    return [
        PriceBar(
            date=start + timedelta(days=i),
            open=close,
            high=close * 1.01,
            low=close * 0.99,
            close=close,
            volume=volume,
        )
        for i, (close, volume) in enumerate(zip(closes, volumes))
    ]


def make_history(
    symbol: str,
    closes: Sequence[float],
    volumes: Sequence[int] | None = None,
    company_name: str | None = None,
) -> PriceHistory:
    bars = make_bars(closes, volumes)
    return PriceHistory(
        symbol=symbol,
        company_name=company_name,
        bars=bars,
        current_price=bars[-1].close if bars else None,
        current_volume=bars[-1].volume if bars else 0,
    )


class FakePriceProvider:
    """In-memory price provider that records every request."""

    def __init__(self, histories: dict[str, PriceHistory] | None = None) -> None:
        self.histories = dict(histories or {})
        self.calls: list[str] = []

    def add(self, history: PriceHistory) -> None:
        self.histories[history.symbol] = history

    async def get_history(self, symbol: str) -> PriceHistory:
        self.calls.append(symbol)
        if symbol not in self.histories:
            raise PriceFeedError(f"No history for {symbol}")
        return self.histories[symbol]


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2024, 6, 3, 9, 15, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def rising_closes(n: int = 120, start: float = 2000.0, step: float = 4.0) -> list[float]:
    return [start + i * step for i in range(n)]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryAnalysisStore:
    return InMemoryAnalysisStore()


@pytest.fixture
def provider() -> FakePriceProvider:
    """Provider with RELIANCE (rising) and an empty-history symbol."""
    return FakePriceProvider(
        {
            "RELIANCE": make_history(
                "RELIANCE", rising_closes(), company_name="Reliance Industries Limited"
            ),
            "EMPTY": PriceHistory(symbol="EMPTY", bars=[]),
        }
    )


@pytest.fixture
def client(
    store: InMemoryAnalysisStore, provider: FakePriceProvider
) -> Generator[TestClient, None, None]:
    """Test client for the FastAPI app with the store and provider overridden."""
    from swingdesk.api.app import create_api_app
    from swingdesk.api.dependencies import get_price_provider, get_store

    app = create_api_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_price_provider] = lambda: provider
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
