"""Service-due calculator - renewal rules for vehicle maintenance"""

from datetime import date
from typing import Dict, Iterable, List, Optional

from ride_ledger.domain.exceptions import ValidationError
from ride_ledger.domain.models import NextService, ServiceRule
from ride_ledger.utils.date_utils import add_years, days_until

DUE_SOON_DAYS = 30
DUE_SOON_KM = 1000

SERVICE_RULES: Dict[str, ServiceRule] = {
    rule.key: rule
    for rule in (
        ServiceRule(
            key="vtv",
            label="Periodic technical inspection",
            kind="years",
            interval=2,
            description="Mandatory roadworthiness inspection",
        ),
        ServiceRule(
            key="oil_change",
            label="Oil and filter change",
            kind="km",
            interval=10_000,
            description="Engine lubrication maintenance",
        ),
        ServiceRule(
            key="timing_belt",
            label="Timing belt replacement",
            kind="km",
            interval=70_000,
            description="Critical engine component",
        ),
        ServiceRule(
            key="brakes",
            label="Brake pad replacement",
            kind="km",
            interval=40_000,
            description="Vehicle safety system",
        ),
    )
}


def calculate_next_service(
    service_type: str,
    reference_date: date,
    current_mileage: float,
) -> Optional[NextService]:
    """
    Compute when a service is due again.

    Years-rule types get a next_service_date, km-rule types a
    next_service_mileage; never both. Unknown types return None.

    Example:
        oil_change at 50,000 km -> next_service_mileage=60,000
        vtv on 2024-03-10 -> next_service_date=2026-03-10
    """
    rule = SERVICE_RULES.get(service_type)
    if rule is None:
        return None

    if rule.kind == "years":
        return NextService(next_service_date=add_years(reference_date, rule.interval))
    return NextService(next_service_mileage=current_mileage + rule.interval)


def is_due_soon(
    next_service_date: Optional[date],
    next_service_mileage: Optional[float],
    today: date,
    current_mileage: Optional[float] = None,
) -> bool:
    """
    True when the next service is within the fixed proximity window.

    Date-based: 30 days or less remaining (overdue included).
    Mileage-based: only evaluated when the latest odometer reading is known.
    """
    if next_service_date is not None:
        return days_until(next_service_date, today) <= DUE_SOON_DAYS

    if next_service_mileage is not None and current_mileage:
        return current_mileage >= next_service_mileage - DUE_SOON_KM

    return False


def validate_service_submission(current_mileage: Optional[float], service_types: Iterable[str]) -> List[str]:
    """Check the registration form; returns the selected types without duplicates"""
    if current_mileage is None:
        raise ValidationError("Please enter the current mileage", fields=["current_mileage"])

    selected = list(dict.fromkeys(service_types))
    if not selected:
        raise ValidationError("Select at least one service", fields=["service_types"])

    unknown = [key for key in selected if key not in SERVICE_RULES]
    if unknown:
        raise ValidationError(f"Unknown service type: {', '.join(unknown)}", fields=["service_types"])

    return selected
