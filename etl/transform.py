"""
Record transformation for the opportunity dashboard

Maps raw Salesforce opportunity records to the six string columns of the
dashboard's CSV export. Transformation is total: missing or malformed
fields fall back to defaults and nothing here raises.

Close Date and Close Month are built by splitting the YYYY-MM-DD string,
never by parsing it into a datetime, so no timezone can shift the day.
The quote-sent timestamp is a real instant and is converted explicitly
into DISPLAY_TIMEZONE.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from etl.config import DISPLAY_TIMEZONE, QUOTE_SENT_FIELD

logger = logging.getLogger(__name__)

TIMESTAMP_FORMATS = (
    "%Y-%m-%dT%H:%M:%S.%f%z",
    "%Y-%m-%dT%H:%M:%S%z",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
)


def _split_date(value: Optional[str]) -> Optional[Tuple[str, int, int]]:
    """Split YYYY-MM-DD into (year, month, day); None if malformed"""
    if not value or not isinstance(value, str):
        return None
    parts = value.strip().split('-')
    if len(parts) != 3:
        return None
    year, month, day = parts
    try:
        return year, int(month), int(day)
    except ValueError:
        return None


def format_date_mdy(value: Optional[str]) -> str:
    """
    Convert ISO date to M/D/YYYY
    "2023-07-20" -> "7/20/2023"
    """
    parts = _split_date(value)
    if parts is None:
        return ''
    year, month, day = parts
    return f"{month}/{day}/{year}"


def derive_close_month(value: Optional[str]) -> str:
    """
    First of the close date's month
    "2023-07-20" -> "7/1/2023"
    """
    parts = _split_date(value)
    if parts is None:
        return ''
    year, month, _ = parts
    return f"{month}/1/{year}"


FALLBACK_TIMEZONE = "America/New_York"


def resolve_display_zone(name: str) -> ZoneInfo:
    """Zone for rendering timestamps; unknown names fall back to New York"""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown display timezone {name!r}, using {FALLBACK_TIMEZONE}")
        return ZoneInfo(FALLBACK_TIMEZONE)


DISPLAY_ZONE = resolve_display_zone(DISPLAY_TIMEZONE)


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a Salesforce datetime into an aware UTC-based instant; naive values are UTC"""
    if not value or not isinstance(value, str):
        return None
    value = value.strip()
    if value.endswith('Z'):
        value = value[:-1] + '+0000'

    parsed = None
    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(value, fmt)
            break
        except ValueError:
            continue
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Optional[str]) -> str:
    """
    Convert ISO timestamp to the dashboard's display format
    "2023-08-28T12:07:00.000+0000" -> "8/28/2023, 8:07 AM" (America/New_York)
    """
    instant = parse_timestamp(value)
    if instant is None:
        if value:
            logger.debug(f"Unparseable timestamp: {value!r}")
        return ''

    try:
        local = instant.astimezone(DISPLAY_ZONE)
    except (OverflowError, ValueError):
        logger.debug(f"Timestamp out of range for display: {value!r}")
        return ''

    hour = local.hour % 12 or 12
    meridiem = 'AM' if local.hour < 12 else 'PM'
    return f"{local.month}/{local.day}/{local.year}, {hour}:{local.minute:02d} {meridiem}"


def format_amount(value: Any) -> str:
    """Amount as a string; null becomes "0" and whole floats drop the trailing .0"""
    if value is None:
        return '0'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def owner_name(owner: Optional[Mapping[str, Any]]) -> str:
    """Opportunity owner's name, or "Unknown" when the owner or its name is missing"""
    if not isinstance(owner, Mapping):
        return 'Unknown'
    name = owner.get('Name')
    if not name:
        return 'Unknown'
    return str(name)


def transform_record(record: Mapping[str, Any]) -> Dict[str, str]:
    """Transform single opportunity record"""
    if not isinstance(record, Mapping):
        record = {}
    stage = record.get('StageName')
    return {
        'Amount': format_amount(record.get('Amount')),
        'Close Date': format_date_mdy(record.get('CloseDate')),
        'Quote sent TImestamp 2': format_timestamp(record.get(QUOTE_SENT_FIELD)),
        'Stage': str(stage) if stage else '',
        'Opportunity Owner': owner_name(record.get('Owner')),
        'Close Month': derive_close_month(record.get('CloseDate'))
    }


def transform(records: List[Mapping[str, Any]]) -> List[Dict[str, str]]:
    """
    Transform API records to dashboard rows

    Args:
        records: Raw opportunity records, in API order

    Returns:
        One row per record, same order
    """
    return [transform_record(record) for record in records]
