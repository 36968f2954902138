"""Date manipulation utilities"""

from datetime import date, timedelta


def add_years(from_date: date, years: int) -> date:
    """Same month and day N years later; Feb 29 rolls over to Mar 1 in non-leap years"""
    try:
        return from_date.replace(year=from_date.year + years)
    except ValueError:
        return from_date.replace(year=from_date.year + years, day=28) + timedelta(days=1)


def days_until(target: date, today: date) -> int:
    """Whole days from today to target (negative once target has passed)"""
    return (target - today).days
