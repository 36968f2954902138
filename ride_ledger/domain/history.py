"""Earnings history views: search, ordering and totals over saved records"""

from dataclasses import dataclass
from datetime import date
from typing import Any, List, Optional, Sequence

from ride_ledger.domain.exceptions import ValidationError

SORT_FIELDS = ("date", "net_earnings", "gross_earnings", "trips_completed")
SORT_ORDERS = ("asc", "desc")


@dataclass
class HistoryTotals:
    total_gross: float = 0.0
    total_net: float = 0.0
    total_trips: int = 0
    total_km: float = 0.0
    total_hours: float = 0.0


def _number_text(value: float) -> str:
    # 850.0 is searchable as "850"
    return str(int(value)) if float(value).is_integer() else str(value)


def _date_text(value: Any) -> str:
    return value.isoformat() if isinstance(value, date) else str(value)


def filter_records(records: Sequence[Any], query: Optional[str]) -> List[Any]:
    """Keep records whose date, net or gross earnings contain the query text"""
    if not query:
        return list(records)

    needle = query.strip().lower()
    return [
        r
        for r in records
        if needle in _date_text(r.date).lower()
        or needle in _number_text(r.net_earnings)
        or needle in _number_text(r.gross_earnings)
    ]


def sort_records(records: Sequence[Any], field: str = "date", order: str = "desc") -> List[Any]:
    if field not in SORT_FIELDS:
        raise ValidationError(f"Cannot sort by {field}", fields=["sort"])
    if order not in SORT_ORDERS:
        raise ValidationError(f"Sort order must be one of {', '.join(SORT_ORDERS)}", fields=["order"])

    return sorted(records, key=lambda r: getattr(r, field), reverse=(order == "desc"))


def calculate_totals(records: Sequence[Any]) -> HistoryTotals:
    totals = HistoryTotals()
    for r in records:
        totals.total_gross += r.gross_earnings
        totals.total_net += r.net_earnings
        totals.total_trips += r.trips_completed
        totals.total_km += r.kilometers_driven
        totals.total_hours += r.hours_worked
    return totals
