"""Tests for tax year helpers."""

from datetime import date

import pytest

from shiftpay.calculators.tax_year import normalize_tax_year, tax_year_bounds, tax_year_for_date


class TestTaxYear:
    """Test July-to-June tax years."""

    @pytest.mark.parametrize(
        ("day", "expected"),
        [
            (date(2024, 7, 1), "2024-25"),
            (date(2025, 6, 30), "2024-25"),
            (date(2025, 7, 1), "2025-26"),
            (date(1999, 12, 31), "1999-00"),
        ],
    )
    def test_tax_year_for_date(self, day, expected):
        assert tax_year_for_date(day) == expected

    def test_bounds(self):
        assert tax_year_bounds("2024-25") == (date(2024, 7, 1), date(2025, 6, 30))
        assert tax_year_bounds("1999-00") == (date(1999, 7, 1), date(2000, 6, 30))

    @pytest.mark.parametrize("value", ["2024", "2024-26", "24-25", "2024/25"])
    def test_bounds_reject_malformed(self, value):
        with pytest.raises(ValueError):
            tax_year_bounds(value)

    def test_normalize(self):
        today = date(2025, 3, 1)

        assert normalize_tax_year("2023-24", today) == "2023-24"
        assert normalize_tax_year(None, today) == "2024-25"
        assert normalize_tax_year("bogus", today) == "2024-25"
