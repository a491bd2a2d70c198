"""Australian tax year strings, e.g. "2024-25" (1 July to 30 June)."""

from __future__ import annotations

import re
from datetime import date

_TAX_YEAR_RE = re.compile(r"^(\d{4})-(\d{2})$")


def _start_year(tax_year: str) -> int | None:
    match = _TAX_YEAR_RE.match(tax_year)
    if match is None:
        return None
    start_year = int(match.group(1))
    if (start_year + 1) % 100 != int(match.group(2)):
        return None
    return start_year


def tax_year_for_date(day: date) -> str:
    """Tax year containing day."""
    start_year = day.year if day.month >= 7 else day.year - 1
    return f"{start_year}-{(start_year + 1) % 100:02d}"


def tax_year_bounds(tax_year: str) -> tuple[date, date]:
    """First and last day of a tax year.

    Raises:
        ValueError: If tax_year is not in "YYYY-YY" form or the years are not consecutive
    """
    start_year = _start_year(tax_year)
    if start_year is None:
        raise ValueError(f"Invalid tax year string: {tax_year}")
    return date(start_year, 7, 1), date(start_year + 1, 6, 30)


def normalize_tax_year(tax_year: str | None, today: date | None = None) -> str:
    """Return tax_year if well formed, otherwise the tax year containing today."""
    if tax_year and _start_year(tax_year) is not None:
        return tax_year
    return tax_year_for_date(today or date.today())
