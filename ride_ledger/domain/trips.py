"""Trip profitability engine - compares the offered fare against a target price per km"""

from typing import Any, Optional, Tuple

from ride_ledger.domain.earnings import parse_amount
from ride_ledger.domain.exceptions import ValidationError
from ride_ledger.domain.models import Coordinates, TripAnalysisResult

PROFITABLE = "profitable"
MARGINAL = "marginal"
UNPROFITABLE = "unprofitable"

# Percent deviation from the desired price per km at which a trip leaves the marginal band
MARGIN_THRESHOLD_PCT = 10.0


def meters_to_km(meters: float) -> float:
    return meters / 1000


def validate_trip_request(
    origin: Optional[Coordinates],
    destination: Optional[Coordinates],
    desired_price_per_km: Any,
    trip_price: Any,
) -> Tuple[float, float]:
    """
    Check a trip quote before any routing call is made.

    Returns (desired_price_per_km, trip_price) as floats.

    Raises:
        ValidationError: missing coordinates, or a price that is blank,
            non-numeric or not positive
    """
    if not origin or not destination:
        raise ValidationError(
            "Select a valid origin and destination from the suggestions",
            fields=[name for name, value in (("origin", origin), ("destination", destination)) if not value],
        )

    if _is_blank(desired_price_per_km) or _is_blank(trip_price):
        raise ValidationError(
            "Please enter the desired price per km and the trip price",
            fields=["desired_price_per_km", "trip_price"],
        )

    desired = parse_amount(desired_price_per_km)
    price = parse_amount(trip_price)
    if desired <= 0 or price <= 0:
        raise ValidationError("Please enter valid prices", fields=["desired_price_per_km", "trip_price"])

    return desired, price


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def classify_profitability(percent_difference: float) -> str:
    """
    Map deviation from the desired rate to a tier.

    - >= +10%: profitable
    - -10% (inclusive) up to +10%: marginal
    - < -10%: unprofitable
    """
    if percent_difference >= MARGIN_THRESHOLD_PCT:
        return PROFITABLE
    elif percent_difference >= -MARGIN_THRESHOLD_PCT:
        return MARGINAL
    else:
        return UNPROFITABLE


def analyze_trip(distance_km: float, trip_price: float, desired_price_per_km: float) -> TripAnalysisResult:
    """
    Price a trip whose route distance is already known.

    Example:
        desired 750/km, price 5000, 5.88 km
        actual = 5000 / 5.88 = 850.34/km
        difference = (850.34 - 750) / 750 * 100 = +13.4% -> profitable
    """
    actual = trip_price / distance_km if distance_km > 0 else 0.0
    difference = (
        (actual - desired_price_per_km) / desired_price_per_km * 100 if desired_price_per_km > 0 else 0.0
    )

    return TripAnalysisResult(
        distance_km=distance_km,
        trip_price=trip_price,
        desired_price_per_km=desired_price_per_km,
        actual_price_per_km=actual,
        percent_difference=difference,
        profitability=classify_profitability(difference),
    )
