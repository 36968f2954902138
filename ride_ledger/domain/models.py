"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

# (longitude, latitude), the order the routing provider uses
Coordinates = Tuple[float, float]


@dataclass
class EarningsInputs:
    """Raw numeric inputs of a day's earnings form"""

    total_earnings: float = 0.0
    trips_completed: float = 0.0
    kilometers_driven: float = 0.0
    hours_worked: float = 0.0
    tips: float = 0.0
    extras: float = 0.0
    fuel_cost: float = 0.0
    other_expenses: float = 0.0


@dataclass
class EarningsBreakdown:
    """Values derived from EarningsInputs"""

    gross_earnings: float
    gross_per_km: float
    gross_per_hour: float
    gross_per_trip: float
    total_expenses: float
    net_earnings: float
    net_per_km: float
    net_per_hour: float
    net_per_trip: float


@dataclass(frozen=True)
class ServiceRule:
    """Renewal rule for one maintenance service type"""

    key: str
    label: str
    kind: str  # "years" or "km"
    interval: int
    description: str


@dataclass
class NextService:
    """Next due point for a service; exactly one field is set"""

    next_service_date: Optional[date] = None
    next_service_mileage: Optional[float] = None


@dataclass
class PlaceSuggestion:
    """Forward geocoding match"""

    place_name: str
    coordinates: Coordinates


@dataclass
class TripAnalysisResult:
    """Outcome of a trip profitability analysis"""

    distance_km: float
    trip_price: float
    desired_price_per_km: float
    actual_price_per_km: float
    percent_difference: float
    profitability: str  # "profitable" | "marginal" | "unprofitable"


@dataclass
class UserIdentity:
    """Authenticated user as reported by the auth provider"""

    id: str
    email: str


@dataclass
class AuthSession:
    """Session issued by the auth provider"""

    access_token: str
    user: UserIdentity
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


@dataclass
class SignUpResult:
    """Auth provider's answer to a registration"""

    user: UserIdentity
    confirmation_pending: bool
