"""
시간 관련 헬퍼

DB 드라이버에 따라 naive/aware datetime이 섞여 반환되므로 모두 UTC aware로 맞춥니다.
"""

from datetime import datetime, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """naive datetime은 UTC로 간주"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _plural(count: int, unit: str) -> str:
    return f"{count} {unit}{'s' if count > 1 else ''} ago"


def format_relative_time(value: Optional[datetime], now: Optional[datetime] = None) -> str:
    """
    활동 피드용 상대 시간 문자열

    Examples:
        >>> format_relative_time(None)
        'Recently'
        "Just now", "5 minutes ago", "3 hours ago", "2 days ago", "1 week ago", "2024-01-31"
    """
    if value is None:
        return "Recently"

    value = ensure_aware(value)
    now = ensure_aware(now) or utcnow()

    seconds = int((now - value).total_seconds())
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if seconds < 60:
        return "Just now"
    if minutes < 60:
        return _plural(minutes, "minute")
    if hours < 24:
        return _plural(hours, "hour")
    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(days // 7, "week")
    return value.date().isoformat()
