"""Human-readable relative timestamps ("5 minutes ago") for conversation lists."""

from datetime import datetime, timezone
from typing import Optional


def time_ago(moment: datetime, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    seconds = round((now - moment).total_seconds())

    if seconds < 60:
        return f"{seconds} seconds ago"

    minutes = round(seconds / 60)
    if minutes < 60:
        return f"{minutes} minutes ago"

    hours = round(minutes / 60)
    if hours < 24:
        return f"{hours} hours ago"

    days = round(hours / 24)
    if days < 30:
        return f"{days} days ago"

    months = round(days / 30)
    if months < 12:
        return f"{months} months ago"

    years = round(months / 12)
    return f"{years} years ago"
