"""
Time helpers shared by services and templates
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    """Naive UTC now; all stored timestamps are naive UTC"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class TimeRemaining:
    label: str
    urgent: bool


def time_remaining(ends_at: datetime, now: Optional[datetime] = None) -> TimeRemaining:
    """Human label for the time left before an auction ends"""
    now = now or utcnow()
    seconds = int((ends_at - now).total_seconds())
    if seconds <= 0:
        return TimeRemaining("Ended", False)

    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours >= 24:
        return TimeRemaining(f"{hours // 24}d {hours % 24}h left", False)
    if hours > 0:
        return TimeRemaining(f"{hours}h {minutes}m left", hours < 3)
    return TimeRemaining(f"{minutes}m left", True)


def format_cents(amount: int) -> str:
    """Format minor units as whole or fractional dollars: 125000 -> $1,250"""
    dollars, cents = divmod(int(amount), 100)
    if cents:
        return f"${dollars:,}.{cents:02d}"
    return f"${dollars:,}"
