"""Earnings endpoints: live preview, save, history and delete"""

import uuid
import logging
from dataclasses import asdict
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ride_ledger.api.v1.schemas import (
    DeleteResponse,
    EarningsBreakdownSchema,
    EarningsCreateRequest,
    EarningsCreateResponse,
    EarningsForm as EarningsFormSchema,
    EarningsHistoryResponse,
    EarningsRecordSchema,
    HistoryTotalsSchema,
    success,
)
from ride_ledger.api.dependencies import fail, get_current_user, get_request_id
from ride_ledger.domain.earnings import EarningsForm, build_record_values
from ride_ledger.domain.exceptions import RecordNotFoundError, ValidationError
from ride_ledger.domain.history import calculate_totals, filter_records, sort_records
from ride_ledger.domain.models import UserIdentity
from ride_ledger.infrastructure.database.models import EarningsRecord
from ride_ledger.infrastructure.database.repositories import EarningsRepository
from ride_ledger.infrastructure.database.session import get_db
from ride_ledger.infrastructure.observability.logging import log_action
from ride_ledger.infrastructure.observability.metrics import earnings_records_counter

router = APIRouter()

FORM_FIELDS = tuple(EarningsFormSchema.model_fields)


def to_schema(record: EarningsRecord) -> EarningsRecordSchema:
    return EarningsRecordSchema(
        id=str(record.id),
        date=record.date,
        total_earnings=record.total_earnings,
        trips_completed=record.trips_completed,
        kilometers_driven=record.kilometers_driven,
        hours_worked=record.hours_worked,
        tips=record.tips,
        extras=record.extras,
        fuel_cost=record.fuel_cost,
        other_expenses=record.other_expenses,
        gross_earnings=record.gross_earnings,
        gross_per_km=record.gross_per_km,
        gross_per_hour=record.gross_per_hour,
        gross_per_trip=record.gross_per_trip,
        total_expenses=record.total_expenses,
        net_earnings=record.net_earnings,
        net_per_km=record.net_per_km,
        net_per_hour=record.net_per_hour,
        net_per_trip=record.net_per_trip,
    )


@router.post("/earnings/preview", response_model=EarningsBreakdownSchema)
def preview_earnings(
    request_body: EarningsFormSchema,
    user: UserIdentity = Depends(get_current_user),
):
    """
    Recompute derived values for the current form snapshot.

    Called on every input change so the form always shows current totals.
    """
    form = EarningsForm(request_body.model_dump(include=set(FORM_FIELDS)))
    return EarningsBreakdownSchema(**asdict(form.breakdown))


@router.post("/earnings", response_model=EarningsCreateResponse, status_code=201)
def create_earnings(
    request_body: EarningsCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    """Validate required fields, derive totals and persist in a single insert"""
    request_id = get_request_id(request)
    form = EarningsForm(request_body.model_dump(include=set(FORM_FIELDS)))

    try:
        values = build_record_values(form, request_body.date)
    except ValidationError as e:
        fail(422, str(e), e.fields)

    try:
        record = EarningsRepository(db).create(user.id, values)
        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Earnings insert failed: {e}", extra={"request_id": request_id, "user_id": user.id})
        fail(503, "Could not save the record")

    earnings_records_counter.inc()
    log_action(request_id, user.id, "earnings_saved", "success", net_earnings=record.net_earnings)

    return EarningsCreateResponse(record=to_schema(record), notification=success("Record saved"))


@router.get("/earnings", response_model=EarningsHistoryResponse)
def get_earnings_history(
    request: Request,
    q: Optional[str] = Query(None, description="Search by date or amount"),
    sort: str = Query("date", description="date | net_earnings | gross_earnings | trips_completed"),
    order: str = Query("desc", description="asc | desc"),
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    """Earnings history with search, ordering and totals over the filtered records"""
    try:
        records = EarningsRepository(db).list_for_user(user.id)
    except SQLAlchemyError as e:
        logging.error(f"Earnings history failed: {e}", extra={"request_id": get_request_id(request)})
        fail(503, "Could not load the history")

    try:
        shown = sort_records(filter_records(records, q), sort, order)
    except ValidationError as e:
        fail(422, str(e), e.fields)

    return EarningsHistoryResponse(
        records=[to_schema(r) for r in shown],
        totals=HistoryTotalsSchema.model_validate(calculate_totals(shown)),
    )


@router.delete("/earnings/{record_id}", response_model=DeleteResponse)
def delete_earnings(
    record_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    request_id = get_request_id(request)
    try:
        EarningsRepository(db).delete(record_id, user.id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        fail(404, "Record not found")
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Earnings delete failed: {e}", extra={"request_id": request_id})
        fail(503, "Could not delete the record")

    log_action(request_id, user.id, "earnings_deleted", "success", record_id=str(record_id))
    return DeleteResponse(notification=success("Record deleted"))
