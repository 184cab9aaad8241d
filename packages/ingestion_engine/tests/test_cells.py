"""Tests for amount and date cell parsing."""

from datetime import date, datetime

import pytest

from packages.ingestion_engine.cells import is_blank, parse_amount, parse_date

TODAY = date(2026, 2, 14)


class TestParseAmount:
    def test_numeric_passthrough(self):
        assert parse_amount(1234.5) == 1234.5
        assert parse_amount(-200) == -200

    def test_thousands_separator_and_currency(self):
        assert parse_amount("1,234.50") == 1234.50
        assert parse_amount("₹ 2,500") == 2500.0
        assert parse_amount("-75.25 INR") == -75.25

    @pytest.mark.parametrize("cell", [None, "", "   ", "abc", "--", float("nan")])
    def test_unusable_cells_become_zero(self, cell):
        assert parse_amount(cell) == 0.0

    def test_bool_is_not_treated_as_number(self):
        """True is text "True" after str(), which has no digits."""
        assert parse_amount(True) == 0.0


class TestParseDate:
    def test_spreadsheet_serial(self):
        assert parse_date(45000, today=TODAY) == "2023-03-15"

    def test_serial_fraction_is_truncated(self):
        assert parse_date(45000.75, today=TODAY) == "2023-03-15"

    def test_datetime_cell(self):
        assert parse_date(datetime(2024, 7, 1, 13, 45), today=TODAY) == "2024-07-01"
        assert parse_date(date(2024, 7, 2), today=TODAY) == "2024-07-02"

    def test_day_first_string(self):
        assert parse_date("28/04/2023", today=TODAY) == "2023-04-28"

    def test_iso_string(self):
        assert parse_date("2026-01-15", today=TODAY) == "2026-01-15"

    def test_garbage_falls_back_to_today(self):
        assert parse_date("not a date", today=TODAY) == TODAY.isoformat()

    def test_blank_falls_back_to_today(self):
        assert parse_date(None, today=TODAY) == TODAY.isoformat()
        assert parse_date("  ", today=TODAY) == TODAY.isoformat()


def test_is_blank():
    assert is_blank(None)
    assert is_blank(float("nan"))
    assert is_blank(" \t")
    assert not is_blank(0)
    assert not is_blank("x")
