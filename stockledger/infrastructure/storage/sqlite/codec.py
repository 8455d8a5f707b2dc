"""Column conversions shared by the SQLite stores.

Decimals are stored as TEXT so no precision is lost. Timestamps are stored
as UTC ISO-8601 strings with fixed microsecond precision so that string
comparison in SQL matches chronological order.
"""

from datetime import UTC, date, datetime
from decimal import Decimal

from stockledger.core.money import ZERO


def to_db_datetime(value: datetime | None) -> str | None:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="microseconds")


def from_db_datetime(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def to_db_date(value: date | None) -> str | None:
    return value.isoformat() if value else None


def from_db_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def to_db_decimal(value: Decimal | None) -> str:
    return str(value if value is not None else ZERO)


def from_db_decimal(value: str | int | float | None) -> Decimal:
    if value is None:
        return ZERO
    return Decimal(str(value))


def now_utc() -> datetime:
    return datetime.now(UTC)
