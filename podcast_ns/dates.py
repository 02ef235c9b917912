"""
Date parsing and formatting for the two date formats the namespace uses.

RFC 2822 is used by <podcast:trailer pubdate="...">, ISO 8601 by
<podcast:updateFrequency dtstart="...">.
"""

import re
from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

RFC2822 = 'rfc2822'
ISO8601 = 'iso8601'

# strptime formats tried before falling back to dateutil
RFC2822_FORMATS = [
    '%a, %d %b %Y %H:%M:%S %z',  # Tue, 10 Jun 2003 04:00:00 +0000
    '%a, %d %b %Y %H:%M %z',     # seconds are optional
    '%d %b %Y %H:%M:%S %z',      # day name is optional
    '%d %b %Y %H:%M %z',
]

# Obsolete zone names RFC 822 still allows, as offsets in seconds
RFC822_ZONES = {
    'UT': 0, 'UTC': 0, 'GMT': 0, 'Z': 0,
    'EST': -5 * 3600, 'EDT': -4 * 3600,
    'CST': -6 * 3600, 'CDT': -5 * 3600,
    'MST': -7 * 3600, 'MDT': -6 * 3600,
    'PST': -8 * 3600, 'PDT': -7 * 3600,
}

# "[day, ]DD Mon YYYY HH:MM" must be present before dateutil gets a try
RFC2822_SHAPE = re.compile(
    r'^\s*(?:[A-Za-z]{3},\s*)?\d{1,2}\s+[A-Za-z]{3}\s+\d{2,4}\s+\d{1,2}:\d{2}'
)

# A trailing alphabetic zone name, checked against RFC822_ZONES
TRAILING_ZONE = re.compile(r'\s([A-Za-z]+)\s*$')


def _as_utc_if_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return pytz.utc.localize(dt)
    return dt


def parse_rfc2822(value: str) -> Optional[datetime]:
    """
    Parse an RFC 2822 date to an aware datetime.

    Returns None if parsing fails.
    """
    if not value:
        return None

    value = value.strip()

    for fmt in RFC2822_FORMATS:
        try:
            return _as_utc_if_naive(datetime.strptime(value, fmt))
        except ValueError:
            continue

    # Named zones (GMT, EST, ...) and two digit years go through dateutil
    if not RFC2822_SHAPE.match(value):
        return None
    # An unknown zone name would otherwise be read as UTC
    zone = TRAILING_ZONE.search(value)
    if zone:
        name = zone.group(1).upper()
        if name not in RFC822_ZONES:
            return None
        value = value[:zone.start(1)] + name
    try:
        dt = date_parser.parse(value, tzinfos=RFC822_ZONES)
    except (ValueError, OverflowError):
        return None
    return _as_utc_if_naive(dt)


def parse_iso8601(value: str) -> Optional[datetime]:
    """
    Parse an ISO 8601 date to an aware datetime.

    Returns None if parsing fails.
    """
    if not value:
        return None
    try:
        dt = date_parser.isoparse(value.strip())
    except (ValueError, OverflowError):
        return None
    return _as_utc_if_naive(dt)


PARSERS = {
    RFC2822: parse_rfc2822,
    ISO8601: parse_iso8601,
}


def parse_date(value: str, fmt: str) -> Optional[datetime]:
    """Parse value in the named format ('rfc2822' or 'iso8601')."""
    return PARSERS[fmt](value)


def coerce_datetime(value: datetime) -> datetime:
    """Localize a naive datetime to UTC, leave aware ones alone."""
    return _as_utc_if_naive(value)


def format_date(value: datetime, fmt: str) -> str:
    """Format an aware datetime in the named format."""
    if fmt == RFC2822:
        return value.strftime('%a, %d %b %Y %H:%M:%S %z')
    return value.isoformat()
