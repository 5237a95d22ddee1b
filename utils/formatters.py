"""Formatting utilities for display."""
from datetime import datetime, timezone


def parse_timestamp(value):
    """Parse an ISO-8601 string into an aware datetime (naive input is taken as UTC)."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value)
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_timestamp(ts):
    """Format a datetime to human-readable string."""
    if ts is None:
        return "N/A"
    if isinstance(ts, str):
        parsed = parse_timestamp(ts)
        if parsed is None:
            return ts
        ts = parsed
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M UTC")


def format_kpi(value, decimals=2):
    if value is None:
        return "N/A"
    return f"{float(value):.{decimals}f}"


def time_ago(dt):
    """Return human-readable time since dt. E.g., '3h ago', '2d ago'."""
    if dt is None:
        return "N/A"
    if isinstance(dt, str):
        dt = parse_timestamp(dt)
        if dt is None:
            return "N/A"
    now = datetime.now(timezone.utc)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    seconds = int((now - dt).total_seconds())

    if seconds < 60:
        return f"{seconds}s ago"
    elif seconds < 3600:
        return f"{seconds // 60}m ago"
    elif seconds < 86400:
        return f"{seconds // 3600}h ago"
    else:
        return f"{seconds // 86400}d ago"
