from datetime import date, datetime, timezone

# Small helpers shared by the routers, the worker and the academy.

def ensure_timezone_aware(dt: datetime) -> datetime:
    """Ensures a datetime object is timezone-aware, assuming UTC if naive."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt

def time_ago(dt: datetime) -> str:
    """Converts a datetime object to a human-readable string like '2h ago'."""
    if not dt: return "N/A"
    now = datetime.now(timezone.utc)
    diff = now - ensure_timezone_aware(dt)
    seconds = diff.total_seconds()
    if seconds < 60: return "Just now"
    if seconds < 3600: return f"{int(seconds / 60)}m ago"
    if seconds < 86400: return f"{int(seconds / 3600)}h ago"
    return f"{diff.days}d ago"

def today_utc() -> date:
    return datetime.now(timezone.utc).date()

def format_currency(value: float) -> str:
    """Formats a value as Brazilian reais, e.g. 'R$ 1.234,50'."""
    text = f"{value:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {text}"