"""Unit tests for service-due rules"""

import pytest
from datetime import date, timedelta
from ride_ledger.domain.exceptions import ValidationError
from ride_ledger.domain.maintenance import (
    SERVICE_RULES,
    calculate_next_service,
    is_due_soon,
    validate_service_submission,
)
from ride_ledger.utils.date_utils import add_years


def test_oil_change_next_mileage():
    next_service = calculate_next_service("oil_change", date(2024, 1, 15), 50000)

    assert next_service.next_service_mileage == 60000
    assert next_service.next_service_date is None


@pytest.mark.parametrize(
    "service_type, expected",
    [("oil_change", 130000), ("timing_belt", 190000), ("brakes", 160000)],
)
def test_km_rules(service_type, expected):
    next_service = calculate_next_service(service_type, date(2024, 1, 15), 120000)
    assert next_service.next_service_mileage == expected


def test_inspection_next_date():
    next_service = calculate_next_service("vtv", date(2024, 3, 10), 80000)

    assert next_service.next_service_date == date(2026, 3, 10)
    assert next_service.next_service_mileage is None


def test_years_and_km_rules_never_mix():
    for key, rule in SERVICE_RULES.items():
        next_service = calculate_next_service(key, date(2024, 6, 1), 1000)
        if rule.kind == "years":
            assert next_service.next_service_mileage is None
            assert next_service.next_service_date is not None
        else:
            assert next_service.next_service_date is None
            assert next_service.next_service_mileage is not None


def test_unknown_service_type_is_empty():
    assert calculate_next_service("windscreen", date(2024, 1, 1), 1000) is None


def test_leap_day_rolls_over():
    assert add_years(date(2024, 2, 29), 2) == date(2026, 3, 1)
    assert add_years(date(2024, 2, 29), 4) == date(2028, 2, 29)


def test_mileage_due_soon_within_1000_km():
    assert is_due_soon(None, 60000, date.today(), current_mileage=59200) is True
    assert is_due_soon(None, 60000, date.today(), current_mileage=59000) is True
    assert is_due_soon(None, 60000, date.today(), current_mileage=58999) is False


def test_mileage_due_soon_needs_current_reading():
    assert is_due_soon(None, 60000, date.today(), current_mileage=None) is False


def test_date_due_soon_window():
    today = date(2024, 6, 1)

    assert is_due_soon(today + timedelta(days=30), None, today) is True
    assert is_due_soon(today + timedelta(days=31), None, today) is False
    assert is_due_soon(today - timedelta(days=3), None, today) is True  # overdue


def test_nothing_scheduled_is_not_due():
    assert is_due_soon(None, None, date.today(), current_mileage=100000) is False


def test_validate_service_submission():
    assert validate_service_submission(50000, ["oil_change", "brakes", "oil_change"]) == ["oil_change", "brakes"]


def test_validate_service_submission_requires_mileage():
    with pytest.raises(ValidationError) as exc_info:
        validate_service_submission(None, ["oil_change"])
    assert exc_info.value.fields == ["current_mileage"]


def test_validate_service_submission_requires_a_type():
    with pytest.raises(ValidationError):
        validate_service_submission(50000, [])


def test_validate_service_submission_rejects_unknown_type():
    with pytest.raises(ValidationError):
        validate_service_submission(50000, ["oil_change", "windscreen"])
