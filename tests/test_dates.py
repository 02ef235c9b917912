"""
Tests for RFC 2822 / ISO 8601 date handling.

Run:
    python -m pytest tests/test_dates.py -v
"""

import email.utils
from datetime import datetime, timedelta, timezone

import pytest

from podcast_ns import dates


@pytest.mark.parametrize('raw', [
    'Thu, 01 Apr 2021 08:00:00 +0000',
    'Thu, 01 Apr 2021 08:00:00 -0700',
    'Thu, 01 Apr 2021 08:00:00 GMT',
    'Thu, 01 Apr 2021 08:00:00 PDT',
    '01 Apr 2021 08:00:00 +0100',
    'Thu, 1 Apr 2021 08:00 +0000',
])
def test_rfc2822_matches_email_utils(raw):
    """Every supported shape parses to the instant email.utils reports."""
    assert dates.parse_rfc2822(raw) == email.utils.parsedate_to_datetime(raw)


def test_rfc2822_result_is_aware():
    parsed = dates.parse_rfc2822('Thu, 01 Apr 2021 08:00:00 GMT')
    assert parsed.utcoffset() == timedelta(0)


@pytest.mark.parametrize('raw', ['', 'not a date', '2021-04-01', 'Monday', 'Thu, 99 Foo 2021 08:00:00 +0000'])
def test_rfc2822_rejects_garbage(raw):
    assert dates.parse_rfc2822(raw) is None


@pytest.mark.parametrize('raw', [
    'Thu, 01 Apr 2021 08:00:00 XYZ',
    'Thu, 01 Apr 2021 08:00:00 CET',
])
def test_rfc2822_rejects_unknown_zone_name(raw):
    """Zone names outside RFC 822 must not be read as UTC."""
    assert dates.parse_rfc2822(raw) is None


def test_rfc2822_zone_name_case_insensitive():
    assert dates.parse_rfc2822('Thu, 01 Apr 2021 08:00:00 est') == \
        dates.parse_rfc2822('Thu, 01 Apr 2021 08:00:00 -0500')


def test_iso8601_naive_is_utc():
    parsed = dates.parse_iso8601('2023-04-10T12:00:00')
    assert parsed == datetime(2023, 4, 10, 12, tzinfo=timezone.utc)


def test_iso8601_offset_kept():
    parsed = dates.parse_iso8601('2023-04-10T12:00:00+02:00')
    assert parsed.utcoffset() == timedelta(hours=2)


def test_iso8601_rejects_garbage():
    assert dates.parse_iso8601('tomorrow') is None
    assert dates.parse_iso8601('') is None


def test_format_round_trip():
    when = datetime(2021, 4, 1, 8, 0, tzinfo=timezone(timedelta(hours=-5)))
    rfc = dates.format_date(when, dates.RFC2822)
    assert rfc == 'Thu, 01 Apr 2021 08:00:00 -0500'
    assert dates.parse_rfc2822(rfc) == when

    iso = dates.format_date(when, dates.ISO8601)
    assert dates.parse_iso8601(iso) == when
