"""Tests for utils/timezone.py - UTC-everywhere time handling."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from utils.timezone import now_utc, to_utc, to_epoch_seconds


class TestNowUtc:
    """Tests for now_utc()."""

    def test_returns_timezone_aware(self):
        """Result must have tzinfo set (not naive)."""
        assert now_utc().tzinfo is not None

    def test_is_utc(self):
        """Result timezone must be specifically UTC."""
        assert now_utc().tzinfo == timezone.utc


class TestToUtc:
    """Tests for to_utc()."""

    def test_raises_on_naive(self):
        """Naive datetime must raise ValueError."""
        with pytest.raises(ValueError, match="naive"):
            to_utc(datetime(2024, 1, 1, 12, 0, 0))

    def test_converts_other_timezone(self):
        """Sao Paulo 09:00 in June (UTC-3) becomes UTC 12:00."""
        local = datetime(2024, 6, 1, 9, 0, 0, tzinfo=ZoneInfo("America/Sao_Paulo"))
        result = to_utc(local)
        assert result.tzinfo == timezone.utc
        assert result.hour == 12


class TestEpochSeconds:
    """Epoch conversions used by session tokens."""

    def test_to_epoch_seconds(self):
        assert to_epoch_seconds(datetime(1970, 1, 2, tzinfo=timezone.utc)) == 86400

    def test_truncates_fraction(self):
        dt = datetime(1970, 1, 1, 0, 0, 1, 900000, tzinfo=timezone.utc)
        assert to_epoch_seconds(dt) == 1

    def test_naive_rejected(self):
        with pytest.raises(ValueError):
            to_epoch_seconds(datetime(2024, 1, 1))
