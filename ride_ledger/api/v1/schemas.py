"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
import datetime
from typing import List, Optional, Tuple, Union

from ride_ledger.config import settings

# Raw form input: numbers, numeric strings, or blanks
FormValue = Optional[Union[float, str]]


class Notification(BaseModel):
    """Transient, auto-dismissing message for the user"""

    type: str  # "success" | "error"
    message: str
    dismiss_after_ms: int = Field(default_factory=lambda: settings.notification_dismiss_ms)


def success(message: str) -> Notification:
    return Notification(type="success", message=message)


# ---------------- Auth ----------------


class SignInRequest(BaseModel):
    email: str = ""
    password: str = ""


class SignUpRequest(BaseModel):
    email: str = ""
    password: str = ""
    confirm_password: str = ""


class UserSchema(BaseModel):
    id: str
    email: str


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    user: UserSchema
    notification: Notification


class SignUpResponse(BaseModel):
    user: UserSchema
    confirmation_pending: bool
    notification: Notification


# ---------------- Earnings ----------------


class EarningsForm(BaseModel):
    """Earnings form snapshot; blank or non-numeric values count as 0"""

    total_earnings: FormValue = None
    trips_completed: FormValue = None
    kilometers_driven: FormValue = None
    hours_worked: FormValue = None
    tips: FormValue = None
    extras: FormValue = None
    fuel_cost: FormValue = None
    other_expenses: FormValue = None


class EarningsCreateRequest(EarningsForm):
    date: Optional[datetime.date] = None


class EarningsBreakdownSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    gross_earnings: float
    gross_per_km: float
    gross_per_hour: float
    gross_per_trip: float
    total_expenses: float
    net_earnings: float
    net_per_km: float
    net_per_hour: float
    net_per_trip: float


class EarningsRecordSchema(EarningsBreakdownSchema):
    id: str
    date: datetime.date
    total_earnings: float
    trips_completed: int
    kilometers_driven: float
    hours_worked: float
    tips: float
    extras: float
    fuel_cost: float
    other_expenses: float


class EarningsCreateResponse(BaseModel):
    record: EarningsRecordSchema
    notification: Notification


class HistoryTotalsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_gross: float
    total_net: float
    total_trips: int
    total_km: float
    total_hours: float


class EarningsHistoryResponse(BaseModel):
    records: List[EarningsRecordSchema]
    totals: HistoryTotalsSchema


# ---------------- Services ----------------


class ServiceTypeSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    key: str
    label: str
    kind: str
    interval: int
    description: str


class ServiceCreateRequest(BaseModel):
    current_mileage: Optional[float] = Field(default=None, ge=0)
    service_types: List[str] = Field(default_factory=list)
    service_date: Optional[datetime.date] = None


class ServiceRecordSchema(BaseModel):
    id: str
    service_type: str
    label: Optional[str] = None
    service_date: datetime.date
    current_mileage: float
    next_service_date: Optional[datetime.date] = None
    next_service_mileage: Optional[float] = None
    due_soon: bool = False


class ServiceCreateResponse(BaseModel):
    records: List[ServiceRecordSchema]
    notification: Notification


class ServiceListResponse(BaseModel):
    services: List[ServiceRecordSchema]


# ---------------- Trips ----------------


class PlaceSchema(BaseModel):
    place_name: str
    coordinates: Tuple[float, float]


class PlacesResponse(BaseModel):
    suggestions: List[PlaceSchema]


class TripAnalyzeRequest(BaseModel):
    origin: str = ""
    destination: str = ""
    origin_coordinates: Optional[Tuple[float, float]] = None
    destination_coordinates: Optional[Tuple[float, float]] = None
    desired_price_per_km: FormValue = None
    trip_price: FormValue = None


class TripAnalysisSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    distance_km: float
    trip_price: float
    desired_price_per_km: float
    actual_price_per_km: float
    percent_difference: float
    profitability: str


class TripAnalyzeResponse(BaseModel):
    origin: str
    destination: str
    analysis: TripAnalysisSchema


class TripSaveRequest(BaseModel):
    """Analysis to keep; derived values are recomputed from these inputs"""

    origin: str = Field(..., min_length=1)
    destination: str = Field(..., min_length=1)
    distance_km: float = Field(..., gt=0)
    trip_price: float = Field(..., gt=0)
    desired_price_per_km: float = Field(..., gt=0)


class TripRecordSchema(TripAnalysisSchema):
    id: str
    origin: str
    destination: str
    created_at: str


class TripSaveResponse(BaseModel):
    record: TripRecordSchema
    notification: Notification


class TripListResponse(BaseModel):
    trips: List[TripRecordSchema]


class DeleteResponse(BaseModel):
    notification: Notification
