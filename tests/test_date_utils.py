"""
Tests for timezone-aware date helpers.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from app.services.date_utils import (
    create_date_string,
    format_currency,
    format_date_for_display,
    format_date_for_input,
    resolve_timezone,
)

LA = ZoneInfo("America/Los_Angeles")
TOKYO = ZoneInfo("Asia/Tokyo")


class TestResolveTimezone:

    def test_known_zone(self):
        assert resolve_timezone("Asia/Tokyo", "UTC") == TOKYO

    def test_unknown_zone_falls_back(self):
        assert resolve_timezone("Mars/Olympus_Mons", "America/Los_Angeles") == LA

    def test_missing_zone_falls_back(self):
        assert resolve_timezone(None, "America/Los_Angeles") == LA


class TestFormatCurrency:

    def test_thousands_and_cents(self):
        assert format_currency(1234.5) == "$1,234.50"

    def test_decimal_and_none(self):
        assert format_currency(Decimal("0.1")) == "$0.10"
        assert format_currency(None) == "$0.00"

    def test_negative(self):
        assert format_currency(-20) == "-$20.00"


class TestDisplayAndInput:

    def test_date_string(self):
        assert format_date_for_display("2024-01-15", LA) == "Jan 15, 2024"

    def test_date_object(self):
        assert format_date_for_display(date(2024, 3, 5), LA) == "Mar 5, 2024"

    def test_utc_timestamp_shown_in_zone(self):
        # 03:00 UTC on the 15th is still the 14th in Los Angeles
        assert format_date_for_display("2024-01-15T03:00:00Z", LA) == "Jan 14, 2024"
        assert format_date_for_input("2024-01-15T03:00:00Z", LA) == "2024-01-14"

    def test_aware_datetime(self):
        value = datetime(2024, 6, 30, 20, 0, tzinfo=timezone.utc)
        assert format_date_for_input(value, TOKYO) == "2024-07-01"

    def test_invalid_input(self):
        assert format_date_for_display("not a date", LA) == ""
        assert format_date_for_input("", LA) == ""
        assert format_date_for_display(None, LA) == ""


class TestCreateDateString:

    def test_local_midnight_in_utc(self):
        assert create_date_string("2024-01-15", LA) == "2024-01-15T08:00:00Z"

    def test_daylight_saving(self):
        assert create_date_string("2024-07-04", LA) == "2024-07-04T07:00:00Z"

    def test_zone_ahead_of_utc(self):
        assert create_date_string("2024-01-15", TOKYO) == "2024-01-14T15:00:00Z"

    def test_empty_and_invalid(self):
        assert create_date_string("", LA) == ""
        assert create_date_string("15/01/2024", LA) == ""
