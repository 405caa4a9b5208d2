"""Pure scoring rules for product expiry."""

from collections.abc import Callable
from datetime import UTC, date, datetime

from pantry_score.domain.products import ProductStatus

EXPIRED_PENALTY = -10
MAX_DAY_POINTS = 10
CONSUMPTION_BONUS = 5

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current time in UTC."""
    return datetime.now(tz=UTC)


def to_utc_date(value: date | datetime) -> date:
    """Truncate a date or datetime to its calendar day in UTC.

    Naive datetimes are treated as UTC.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(UTC).date()
    return value


def days_remaining(expiry: date | datetime, today: date | datetime) -> int:
    """Return whole days from today until expiry; negative once past."""
    return (to_utc_date(expiry) - to_utc_date(today)).days


def product_score(days: int, status: ProductStatus) -> int:
    """Return the point value of a product given its days remaining."""
    if status == ProductStatus.CONSUMED:
        # The consumption bonus is a separate ledger event.
        return 0
    if status == ProductStatus.EXPIRED or days < 0:
        return EXPIRED_PENALTY
    if status != ProductStatus.NOT_EXPIRED:
        raise ValueError(f"Unknown product status: {status!r}")
    return min(days, MAX_DAY_POINTS)


def clamp_day_points(days: int) -> int:
    """Return the day points creation would have granted, bounded to 0..10."""
    return min(max(days, 0), MAX_DAY_POINTS)


def consumed_contribution(days: int) -> int:
    """Return what a consumed product is taken to have contributed.

    Products consumed after expiry earned no bonus and are credited nothing.
    """
    if days < 0:
        return 0
    return clamp_day_points(days) + CONSUMPTION_BONUS


def consumption_bonus(days: int) -> int:
    """Return the bonus for marking a product consumed."""
    return CONSUMPTION_BONUS if days >= 0 else 0
