# =============================================================================
# tests/test_formatters.py - Display Formatter Tests
# =============================================================================
# Run with: pytest tests/test_formatters.py -v
# =============================================================================

from datetime import date, datetime, timezone

import pytest

from lib.formatters import (
    format_currency,
    format_date,
    format_distance,
    format_phone_number,
    format_vin,
    random_string,
    truncate,
)


class TestFormatCurrency:
    """Tests for format_currency."""

    def test_whole_dollars_with_separators(self):
        assert format_currency(25999) == "$25,999"

    def test_rounds_cents_half_up(self):
        assert format_currency(1234.5) == "$1,235"
        assert format_currency(1234.49) == "$1,234"

    def test_negative_amount(self):
        assert format_currency(-1200) == "-$1,200"

    def test_zero(self):
        assert format_currency(0) == "$0"


class TestFormatDate:
    """Tests for format_date."""

    def test_iso_string_with_z(self):
        assert format_date("2024-01-05T10:30:00Z") == "January 5, 2024"

    def test_date_object(self):
        assert format_date(date(2023, 12, 25)) == "December 25, 2023"

    def test_epoch_milliseconds(self):
        stamp = datetime(2024, 3, 1, 12, tzinfo=timezone.utc).timestamp() * 1000
        assert format_date(stamp) == "March 1, 2024"


class TestFormatDistance:
    """Tests for format_distance."""

    def test_miles(self):
        assert format_distance(5000) == "5,000 mi"

    def test_fractional_miles(self):
        assert format_distance(12.5) == "12.5 mi"

    def test_metric_converts_to_whole_km(self):
        assert format_distance(5000, use_metric=True) == "8,047 km"


class TestFormatPhoneNumber:
    """Tests for format_phone_number."""

    @pytest.mark.parametrize("raw", ["5551234567", "555-123-4567", "(555) 123 4567"])
    def test_ten_digits(self, raw):
        assert format_phone_number(raw) == "(555) 123-4567"

    def test_other_lengths_unchanged(self):
        assert format_phone_number("+44 20 7946 0958") == "+44 20 7946 0958"


class TestFormatVin:
    """Tests for format_vin."""

    def test_seventeen_characters_grouped(self):
        assert format_vin("1hgcm82633a004352") == "1HG CM 82633A004352"

    def test_short_vin_upper_cased_only(self):
        assert format_vin("abc123") == "ABC123"


class TestStringHelpers:
    """Tests for truncate and random_string."""

    def test_truncate_long_text(self):
        assert truncate("a" * 10, 4) == "aaaa..."

    def test_truncate_short_text_unchanged(self):
        assert truncate("short", 10) == "short"

    def test_truncate_empty(self):
        assert truncate(None) == ""

    def test_random_string_uses_alphabet(self):
        value = random_string(12, "ab")
        assert len(value) == 12
        assert set(value) <= {"a", "b"}
