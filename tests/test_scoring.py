"""Tests for scoring rules."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from pantry_score.domain.products import ProductStatus
from pantry_score.services.scoring import (
    consumed_contribution,
    consumption_bonus,
    days_remaining,
    product_score,
)


def test_days_remaining_counts_whole_days() -> None:
    assert days_remaining(date(2026, 3, 15), date(2026, 3, 10)) == 5
    assert days_remaining(date(2026, 3, 10), date(2026, 3, 10)) == 0
    assert days_remaining(date(2026, 3, 8), date(2026, 3, 10)) == -2


def test_days_remaining_ignores_time_of_day() -> None:
    late = datetime(2026, 3, 10, 23, 59, tzinfo=UTC)
    early = datetime(2026, 3, 10, 0, 1, tzinfo=UTC)

    assert days_remaining(date(2026, 3, 11), late) == 1
    assert days_remaining(date(2026, 3, 11), early) == 1


def test_days_remaining_uses_utc_calendar_day() -> None:
    # 01:00 on the 11th at UTC+3 is still the 10th in UTC.
    local = datetime(2026, 3, 11, 1, 0, tzinfo=timezone(timedelta(hours=3)))

    assert days_remaining(date(2026, 3, 11), local) == 1


def test_days_remaining_decreases_by_one_per_day() -> None:
    expiry = date(2026, 3, 20)
    start = date(2026, 3, 1)
    previous = days_remaining(expiry, start)
    for offset in range(1, 40):
        current = days_remaining(expiry, start + timedelta(days=offset))
        assert current == previous - 1
        previous = current


@pytest.mark.parametrize(
    ("days", "expected"),
    [(0, 0), (1, 1), (5, 5), (9, 9), (10, 10), (15, 10), (100, 10)],
)
def test_product_score_not_expired(days: int, expected: int) -> None:
    assert product_score(days, ProductStatus.NOT_EXPIRED) == expected


@pytest.mark.parametrize("days", [-1, -7, -365])
def test_product_score_penalizes_past_expiry(days: int) -> None:
    assert product_score(days, ProductStatus.NOT_EXPIRED) == -10
    assert product_score(days, ProductStatus.EXPIRED) == -10
    assert product_score(days, ProductStatus.CONSUMED) == 0


def test_product_score_expired_status_is_penalized_even_with_days_left() -> None:
    assert product_score(4, ProductStatus.EXPIRED) == -10


def test_product_score_consumed_is_zero() -> None:
    assert product_score(7, ProductStatus.CONSUMED) == 0


def test_consumed_contribution_and_bonus() -> None:
    assert consumed_contribution(3) == 8
    assert consumed_contribution(0) == 5
    assert consumed_contribution(25) == 15
    assert consumed_contribution(-1) == 0
    assert consumption_bonus(0) == 5
    assert consumption_bonus(-1) == 0
