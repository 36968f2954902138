"""Unit tests for the earnings calculator"""

import math
import pytest
from datetime import date
from ride_ledger.domain.earnings import (
    EarningsForm,
    build_record_values,
    calculate_earnings,
    parse_amount,
    validate_submission,
)
from ride_ledger.domain.exceptions import ValidationError
from ride_ledger.domain.models import EarningsInputs


def test_calculate_earnings_reference_day():
    """1000 earned + 50 tips, 200 fuel, 10 trips over 100 km in 5 hours"""
    breakdown = calculate_earnings(
        EarningsInputs(
            total_earnings=1000,
            trips_completed=10,
            kilometers_driven=100,
            hours_worked=5,
            tips=50,
            extras=0,
            fuel_cost=200,
            other_expenses=0,
        )
    )

    assert breakdown.gross_earnings == 1050
    assert breakdown.total_expenses == 200
    assert breakdown.net_earnings == 850
    assert breakdown.net_per_km == 8.5
    assert breakdown.net_per_trip == 85
    assert breakdown.net_per_hour == 170
    assert breakdown.gross_per_km == 10.5
    assert breakdown.gross_per_hour == 210
    assert breakdown.gross_per_trip == 105


def test_net_earnings_identity():
    inputs = EarningsInputs(total_earnings=730.5, tips=12.25, extras=40, fuel_cost=95.75, other_expenses=30)
    breakdown = calculate_earnings(inputs)

    assert breakdown.net_earnings == (730.5 + 12.25 + 40) - (95.75 + 30)


def test_zero_denominators_give_zero_rates():
    """No km, hours or trips: every rate is 0, never NaN or infinity"""
    breakdown = calculate_earnings(EarningsInputs(total_earnings=500, fuel_cost=100))

    for rate in (
        breakdown.gross_per_km,
        breakdown.gross_per_hour,
        breakdown.gross_per_trip,
        breakdown.net_per_km,
        breakdown.net_per_hour,
        breakdown.net_per_trip,
    ):
        assert rate == 0
        assert math.isfinite(rate)


def test_negative_denominator_gives_zero_rate():
    breakdown = calculate_earnings(EarningsInputs(total_earnings=500, kilometers_driven=-10))
    assert breakdown.gross_per_km == 0


def test_net_earnings_can_be_negative():
    breakdown = calculate_earnings(EarningsInputs(total_earnings=100, fuel_cost=150, kilometers_driven=50))

    assert breakdown.net_earnings == -50
    assert breakdown.net_per_km == -1


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, 0.0),
        ("", 0.0),
        ("   ", 0.0),
        ("abc", 0.0),
        ("nan", 0.0),
        ("inf", 0.0),
        ("12.5", 12.5),
        (" 40 ", 40.0),
        (7, 7.0),
    ],
)
def test_parse_amount(raw, expected):
    assert parse_amount(raw) == expected


def test_form_recomputes_on_every_change():
    form = EarningsForm()
    assert form.breakdown.gross_earnings == 0

    form.update("total_earnings", "1000")
    assert form.breakdown.gross_earnings == 1000

    form.update("tips", "50")
    form.update("kilometers_driven", "100")
    breakdown = form.update("fuel_cost", "200")

    assert breakdown is form.breakdown
    assert breakdown.net_earnings == 850
    assert breakdown.net_per_km == 8.5


def test_form_uses_latest_snapshot():
    form = EarningsForm({"total_earnings": "100"})
    form.update("total_earnings", "300")
    form.update("total_earnings", "")

    assert form.breakdown.gross_earnings == 0


def test_form_rejects_unknown_field():
    with pytest.raises(ValidationError):
        EarningsForm().update("bonus", "10")


def test_validate_submission_lists_missing_required_fields():
    form = EarningsForm({"total_earnings": "1000", "tips": "50"})

    with pytest.raises(ValidationError) as exc_info:
        validate_submission(form)

    assert exc_info.value.fields == ["trips_completed", "kilometers_driven", "hours_worked"]


def test_zero_counts_as_filled_in():
    form = EarningsForm(
        {"total_earnings": "0", "trips_completed": "0", "kilometers_driven": "0", "hours_worked": "0"}
    )
    validate_submission(form)


def test_build_record_values():
    form = EarningsForm(
        {
            "total_earnings": "1000",
            "trips_completed": "10",
            "kilometers_driven": "100",
            "hours_worked": "5",
            "tips": "50",
            "fuel_cost": "200",
        }
    )

    values = build_record_values(form, date(2024, 5, 1))

    assert values["date"] == date(2024, 5, 1)
    assert values["trips_completed"] == 10
    assert isinstance(values["trips_completed"], int)
    assert values["extras"] == 0
    assert values["other_expenses"] == 0
    assert values["net_earnings"] == 850
    assert values["net_per_hour"] == 170
