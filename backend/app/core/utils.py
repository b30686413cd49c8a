"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
from datetime import date, datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an offset-aware datetime to naive UTC; naive values are taken as UTC already."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date(value: Optional[str]) -> Optional[date]:
    """Parse 'YYYY-MM-DD' (or a full ISO timestamp) to a date; None if unparseable."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None


def format_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    """Format a success envelope."""
    return {
        "success": True,
        "message": message,
        "data": data
    }


def format_error(message: str, data: Any = None) -> Dict[str, Any]:
    """Format a failure envelope."""
    return {
        "success": False,
        "message": message,
        "data": data
    }
