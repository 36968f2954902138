"""Trip profitability endpoints: address lookup, analysis and saved analyses"""

import uuid
import time
import logging
from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ride_ledger.api.v1.schemas import (
    DeleteResponse,
    PlaceSchema,
    PlacesResponse,
    TripAnalysisSchema,
    TripAnalyzeRequest,
    TripAnalyzeResponse,
    TripListResponse,
    TripRecordSchema,
    TripSaveRequest,
    TripSaveResponse,
    success,
)
from ride_ledger.api.dependencies import fail, get_current_user, get_request_id, get_routing_client
from ride_ledger.domain.exceptions import RecordNotFoundError, RouteNotFoundError, RoutingAPIError, ValidationError
from ride_ledger.domain.models import UserIdentity
from ride_ledger.domain.trips import analyze_trip, meters_to_km, validate_trip_request
from ride_ledger.infrastructure.clients.routing import RoutingClient
from ride_ledger.infrastructure.database.models import TripAnalysis
from ride_ledger.infrastructure.database.repositories import TripRepository
from ride_ledger.infrastructure.database.session import get_db
from ride_ledger.infrastructure.observability.logging import log_action
from ride_ledger.infrastructure.observability.metrics import (
    record_trip_analysis,
    routing_failures_counter,
    routing_latency_histogram,
)

router = APIRouter()


def to_schema(record: TripAnalysis) -> TripRecordSchema:
    return TripRecordSchema(
        id=str(record.id),
        origin=record.origin,
        destination=record.destination,
        distance_km=record.distance_km,
        trip_price=record.trip_price,
        desired_price_per_km=record.desired_price_per_km,
        actual_price_per_km=record.actual_price_per_km,
        percent_difference=record.percent_difference,
        profitability=record.profitability,
        created_at=record.created_at.isoformat(),
    )


@router.get("/places", response_model=PlacesResponse)
async def search_places(
    request: Request,
    q: str = Query("", description="Free-text address"),
    user: UserIdentity = Depends(get_current_user),
    routing_client: RoutingClient = Depends(get_routing_client),
):
    """Address suggestions for the origin/destination fields"""
    try:
        suggestions = await routing_client.forward_geocode(q)
    except RoutingAPIError as e:
        routing_failures_counter.labels(operation="geocode").inc()
        logging.error(f"Geocoding error: {e}", extra={"request_id": get_request_id(request)})
        fail(503, "Address search unavailable")

    return PlacesResponse(
        suggestions=[PlaceSchema(place_name=s.place_name, coordinates=s.coordinates) for s in suggestions]
    )


@router.post("/trips/analyze", response_model=TripAnalyzeResponse)
async def analyze(
    request_body: TripAnalyzeRequest,
    request: Request,
    user: UserIdentity = Depends(get_current_user),
    routing_client: RoutingClient = Depends(get_routing_client),
):
    """
    Price a trip against the driver's desired rate.

    Flow:
    1. Validate coordinates and prices (no routing call on failure)
    2. Fetch the driving distance of the primary route
    3. Classify profitability

    A failed or empty route lookup ends the analysis with no partial result.
    """
    request_id = get_request_id(request)

    try:
        desired, price = validate_trip_request(
            request_body.origin_coordinates,
            request_body.destination_coordinates,
            request_body.desired_price_per_km,
            request_body.trip_price,
        )
    except ValidationError as e:
        fail(422, str(e), e.fields)

    try:
        with routing_latency_histogram.time():
            meters = await routing_client.route_distance(
                request_body.origin_coordinates,
                request_body.destination_coordinates,
            )
        if meters is None or meters <= 0:
            raise RouteNotFoundError("No route between the selected points")

    except RouteNotFoundError as e:
        logging.warning(f"Route not found: {e}", extra={"request_id": request_id})
        fail(422, "Could not calculate a route between the selected points")

    except RoutingAPIError as e:
        routing_failures_counter.labels(operation="directions").inc()
        logging.error(f"Directions error: {e}", extra={"request_id": request_id})
        fail(503, "Could not calculate the route, check your connection")

    result = analyze_trip(meters_to_km(meters), price, desired)
    record_trip_analysis(result.profitability)
    log_action(
        request_id,
        user.id,
        "trip_analyzed",
        result.profitability,
        distance_km=round(result.distance_km, 2),
        percent_difference=round(result.percent_difference, 1),
    )

    return TripAnalyzeResponse(
        origin=request_body.origin,
        destination=request_body.destination,
        analysis=TripAnalysisSchema(**asdict(result)),
    )


@router.post("/trips", response_model=TripSaveResponse, status_code=201)
def save_trip(
    request_body: TripSaveRequest,
    request: Request,
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    """Persist an analysis the user chose to keep"""
    request_id = get_request_id(request)
    result = analyze_trip(request_body.distance_km, request_body.trip_price, request_body.desired_price_per_km)

    start_time = time.perf_counter()
    try:
        record = TripRepository(db).create(user.id, request_body.origin, request_body.destination, result)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Trip insert failed: {e}", extra={"request_id": request_id, "user_id": user.id})
        fail(503, "Could not save the analysis")

    log_action(
        request_id,
        user.id,
        "trip_saved",
        "success",
        duration_ms=(time.perf_counter() - start_time) * 1000,
    )
    return TripSaveResponse(record=to_schema(record), notification=success("Analysis saved"))


@router.get("/trips", response_model=TripListResponse)
def list_trips(
    request: Request,
    limit: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    try:
        records = TripRepository(db).list_for_user(user.id, limit=limit)
    except SQLAlchemyError as e:
        logging.error(f"Trip list failed: {e}", extra={"request_id": get_request_id(request)})
        fail(503, "Could not load saved analyses")

    return TripListResponse(trips=[to_schema(r) for r in records])


@router.delete("/trips/{record_id}", response_model=DeleteResponse)
def delete_trip(
    record_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    request_id = get_request_id(request)
    try:
        TripRepository(db).delete(record_id, user.id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        fail(404, "Analysis not found")
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Trip delete failed: {e}", extra={"request_id": request_id})
        fail(503, "Could not delete the analysis")

    log_action(request_id, user.id, "trip_deleted", "success", record_id=str(record_id))
    return DeleteResponse(notification=success("Analysis deleted"))
