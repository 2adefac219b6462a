"""
Utility functions for SplitBill
"""
from __future__ import annotations
import math
import os
from datetime import date, datetime, timezone


def iso_timestamp(dt: datetime) -> str:
    """ISO timestamp with millisecond precision, UTC written as Z"""
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def now_iso() -> str:
    return iso_timestamp(datetime.now(timezone.utc))


def parse_datetime(s: str) -> datetime:
    """Parse YYYY-MM-DD or a full ISO timestamp (a trailing Z is accepted)"""
    s = s.strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def parse_date(s: str) -> date:
    """Calendar date of a YYYY-MM-DD or ISO timestamp string"""
    return parse_datetime(s).date()


def safe_float(x: str, default: float = 0.0) -> float:
    """Convert string to float safely, returning default on error"""
    try:
        return float(x)
    except (TypeError, ValueError):
        return default


def round_currency(x: float) -> float:
    """Round to cents, halves toward +infinity"""
    return math.floor(x * 100 + 0.5) / 100


def format_currency(amount: float, symbol: str = "Rp", decimals: int = 0) -> str:
    """Format like 'Rp 1.234.567' ('.' thousands, ',' decimals)"""
    magnitude = round(abs(amount), decimals)
    s = f"{magnitude:,.{decimals}f}"
    s = s.replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 and magnitude != 0 else ""
    return f"{sign}{symbol} {s}"


def app_dir() -> str:
    """
    Get application data directory: $SPLITBILL_HOME or ~/.splitbill
    Creates directory if it doesn't exist.
    """
    path = os.environ.get("SPLITBILL_HOME") or os.path.expanduser("~/.splitbill")
    os.makedirs(path, exist_ok=True)
    return path
