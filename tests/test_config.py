"""Tests for settings parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from swingdesk.core.config import Settings


class TestSettings:
    def test_defaults(self):
        cfg = Settings()
        assert cfg.analysis_ttl_hours == 4.0
        assert cfg.analysis_strategy == "margin"
        assert cfg.macd_signal_mode == "approx"
        assert cfg.position_exposure == 15_000
        assert len(cfg.morning_watchlist) == 14

    def test_watchlist_from_comma_string(self):
        assert Settings(morning_watchlist="tcs, infy ,").morning_watchlist == ["TCS", "INFY"]

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("ANALYSIS_STRATEGY", "swing")
        monkeypatch.setenv("ANALYSIS_TTL_HOURS", "2")
        cfg = Settings()
        assert cfg.analysis_strategy == "swing"
        assert cfg.analysis_ttl_hours == 2.0

    def test_cors_origins_from_comma_string(self):
        cfg = Settings(cors_origins="http://a.test, http://b.test")
        assert cfg.cors_origins == ["http://a.test", "http://b.test"]

    def test_log_level_normalized(self):
        assert Settings(log_level="debug").log_level == "DEBUG"

    def test_invalid_values(self):
        with pytest.raises(ValidationError):
            Settings(log_level="loud")
        with pytest.raises(ValidationError):
            Settings(macd_signal_mode="fancy")
