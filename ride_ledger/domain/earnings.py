"""Earnings calculator - gross/net totals and per-unit rates for a working day"""

import math
from dataclasses import asdict, fields
from datetime import date
from typing import Any, Dict, Optional

from ride_ledger.domain.exceptions import ValidationError
from ride_ledger.domain.models import EarningsBreakdown, EarningsInputs

INPUT_FIELDS = tuple(f.name for f in fields(EarningsInputs))

# Fields that must be filled in before a record can be saved
REQUIRED_FIELDS = ("total_earnings", "trips_completed", "kilometers_driven", "hours_worked")


def parse_amount(value: Any) -> float:
    """Coerce a form value to float; blank or non-numeric input counts as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _rate(amount: float, denominator: float) -> float:
    return amount / denominator if denominator > 0 else 0.0


def calculate_earnings(inputs: EarningsInputs) -> EarningsBreakdown:
    """
    Derive totals and rates from raw inputs.

    Rates whose denominator (km, hours, trips) is zero or negative are 0.
    Net earnings may be negative.
    """
    gross = inputs.total_earnings + inputs.tips + inputs.extras
    expenses = inputs.fuel_cost + inputs.other_expenses
    net = gross - expenses

    return EarningsBreakdown(
        gross_earnings=gross,
        gross_per_km=_rate(gross, inputs.kilometers_driven),
        gross_per_hour=_rate(gross, inputs.hours_worked),
        gross_per_trip=_rate(gross, inputs.trips_completed),
        total_expenses=expenses,
        net_earnings=net,
        net_per_km=_rate(net, inputs.kilometers_driven),
        net_per_hour=_rate(net, inputs.hours_worked),
        net_per_trip=_rate(net, inputs.trips_completed),
    )


class EarningsForm:
    """
    Latest snapshot of the earnings form.

    Every input-change event goes through update(), which recomputes the
    breakdown immediately so callers always see values for the most recent
    snapshot.
    """

    def __init__(self, raw: Optional[Dict[str, Any]] = None):
        self.raw: Dict[str, Any] = {name: None for name in INPUT_FIELDS}
        for name, value in (raw or {}).items():
            self._set(name, value)
        self.breakdown = calculate_earnings(self.inputs)

    def _set(self, name: str, value: Any) -> None:
        if name not in self.raw:
            raise ValidationError(f"Unknown earnings field: {name}", fields=[name])
        self.raw[name] = value

    @property
    def inputs(self) -> EarningsInputs:
        return EarningsInputs(**{name: parse_amount(value) for name, value in self.raw.items()})

    def update(self, name: str, value: Any) -> EarningsBreakdown:
        self._set(name, value)
        self.breakdown = calculate_earnings(self.inputs)
        return self.breakdown

    def missing_fields(self):
        return [name for name in REQUIRED_FIELDS if _is_blank(self.raw[name])]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def validate_submission(form: EarningsForm) -> None:
    """Raise ValidationError listing required fields that are blank"""
    missing = form.missing_fields()
    if missing:
        raise ValidationError("Please fill in all required fields", fields=missing)


def build_record_values(form: EarningsForm, day: Optional[date] = None) -> Dict[str, Any]:
    """Column values for a new earnings record, derived fields included"""
    validate_submission(form)
    inputs = form.inputs
    values: Dict[str, Any] = asdict(inputs)
    values["trips_completed"] = int(inputs.trips_completed)
    values["date"] = day or date.today()
    values.update(asdict(calculate_earnings(inputs)))
    return values
