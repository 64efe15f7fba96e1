"""Tests for datetime and money helper utilities."""
from datetime import UTC, date, datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation

import pytest

from clubledger.utils.datetime_helpers import day_bounds, ensure_utc
from clubledger.utils.money import MAX_AMOUNT, ZERO, format_money, parse_amount, to_money


def test_ensure_utc_none_returns_none():
    """The helper should gracefully handle ``None`` inputs."""

    assert ensure_utc(None) is None


def test_ensure_utc_attaches_timezone_to_naive_datetime():
    """Naive datetimes should be marked as UTC without adjusting the clock."""

    naive = datetime(2024, 5, 1, 12, 30, 0)

    result = ensure_utc(naive)

    assert result.tzinfo is UTC
    assert result.replace(tzinfo=None) == naive


def test_ensure_utc_converts_from_other_timezones_to_utc():
    """Timezone-aware datetimes not already UTC should be converted."""

    eastern = timezone(timedelta(hours=-4))
    aware = datetime(2024, 5, 1, 8, 0, tzinfo=eastern)

    result = ensure_utc(aware)

    assert result.tzinfo is UTC
    assert result.hour == 12


def test_day_bounds_is_half_open_utc_day():
    start, end = day_bounds(date(2026, 3, 14))

    assert start == datetime(2026, 3, 14, tzinfo=UTC)
    assert end == datetime(2026, 3, 15, tzinfo=UTC)
    # The last microsecond of the day belongs to it; midnight belongs to the next day
    last_moment = datetime(2026, 3, 14, 23, 59, 59, 999999, tzinfo=UTC)
    assert start <= last_moment < end


def test_to_money_rounds_to_cents():
    assert to_money("10") == Decimal("10.00")
    assert to_money(0.1) == Decimal("0.10")
    assert to_money(Decimal("2.005")) == Decimal("2.01")
    assert to_money(None) == ZERO


@pytest.mark.parametrize("value", ["abc", "NaN", "Infinity", True, ""])
def test_to_money_rejects_non_numeric(value):
    with pytest.raises((InvalidOperation, ValueError)):
        to_money(value)


def test_parse_amount_keeps_typed_value():
    assert parse_amount("10") == Decimal("10.00")
    assert parse_amount(0.1) == Decimal("0.10")
    assert parse_amount(" 75.50 ") == Decimal("75.50")
    assert parse_amount(MAX_AMOUNT) == MAX_AMOUNT


@pytest.mark.parametrize("value", ["10.005", 2.999, None, False, "NaN", "1e10", -10_000_000_000, "1e40"])
def test_parse_amount_rejects_inexact_or_unstorable(value):
    with pytest.raises((InvalidOperation, ValueError)):
        parse_amount(value)


def test_format_money():
    assert format_money(Decimal("50")) == "$50.00"
    assert format_money(Decimal("7.5"), symbol="€") == "€7.50"
