from datetime import datetime, timezone
from typing import Optional


def as_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware datetime to naive UTC; naive values and None pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def check_same_convention(now: datetime, timestamp: datetime) -> None:
    """Raise ValueError if one datetime is timezone-aware and the other is naive."""
    if (now.tzinfo is None) != (timestamp.tzinfo is None):
        raise ValueError(
            f"Cannot compare naive and timezone-aware datetimes (now={now.isoformat()}, "
            f"timestamp={timestamp.isoformat()}); convert both with as_naive_utc"
        )
