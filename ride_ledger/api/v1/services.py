"""Vehicle maintenance endpoints"""

import uuid
import logging
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ride_ledger.api.v1.schemas import (
    DeleteResponse,
    ServiceCreateRequest,
    ServiceCreateResponse,
    ServiceListResponse,
    ServiceRecordSchema,
    ServiceTypeSchema,
    success,
)
from ride_ledger.api.dependencies import fail, get_current_user, get_request_id
from ride_ledger.domain.exceptions import RecordNotFoundError, ValidationError
from ride_ledger.domain.maintenance import (
    SERVICE_RULES,
    calculate_next_service,
    is_due_soon,
    validate_service_submission,
)
from ride_ledger.domain.models import UserIdentity
from ride_ledger.infrastructure.database.models import ServiceRecord
from ride_ledger.infrastructure.database.repositories import ServiceRepository
from ride_ledger.infrastructure.database.session import get_db
from ride_ledger.infrastructure.observability.logging import log_action
from ride_ledger.infrastructure.observability.metrics import service_records_counter

router = APIRouter()


def to_schema(record: ServiceRecord, today: date, current_mileage: Optional[float]) -> ServiceRecordSchema:
    rule = SERVICE_RULES.get(record.service_type)
    return ServiceRecordSchema(
        id=str(record.id),
        service_type=record.service_type,
        label=rule.label if rule else None,
        service_date=record.service_date,
        current_mileage=record.current_mileage,
        next_service_date=record.next_service_date,
        next_service_mileage=record.next_service_mileage,
        due_soon=is_due_soon(record.next_service_date, record.next_service_mileage, today, current_mileage),
    )


@router.get("/services/types", response_model=List[ServiceTypeSchema])
def list_service_types():
    """Catalog of service types and their renewal rules"""
    return [ServiceTypeSchema.model_validate(rule) for rule in SERVICE_RULES.values()]


@router.post("/services", response_model=ServiceCreateResponse, status_code=201)
def register_services(
    request_body: ServiceCreateRequest,
    request: Request,
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    """
    Register services performed at the given mileage.

    Each selected type overwrites the user's previous record for that type.
    All selected services are committed together.
    """
    request_id = get_request_id(request)

    try:
        selected = validate_service_submission(request_body.current_mileage, request_body.service_types)
    except ValidationError as e:
        fail(422, str(e), e.fields)

    service_date = request_body.service_date or date.today()
    mileage = request_body.current_mileage
    repo = ServiceRepository(db)

    try:
        records = [
            repo.upsert(
                user_id=user.id,
                service_type=service_type,
                service_date=service_date,
                current_mileage=mileage,
                next_service=calculate_next_service(service_type, service_date, mileage),
            )
            for service_type in selected
        ]
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Service upsert failed: {e}", extra={"request_id": request_id, "user_id": user.id})
        fail(503, "Could not save the services")

    for service_type in selected:
        service_records_counter.labels(service_type=service_type).inc()
    log_action(request_id, user.id, "services_saved", "success", service_types=selected)

    today = date.today()
    return ServiceCreateResponse(
        records=[to_schema(r, today, mileage) for r in records],
        notification=success("Services registered"),
    )


@router.get("/services", response_model=ServiceListResponse)
def list_services(
    request: Request,
    current_mileage: Optional[float] = Query(None, ge=0, description="Latest odometer reading"),
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    """Registered services with the due-soon flag evaluated for today"""
    try:
        records = ServiceRepository(db).list_for_user(user.id)
    except SQLAlchemyError as e:
        logging.error(f"Service list failed: {e}", extra={"request_id": get_request_id(request)})
        fail(503, "Could not load the services")

    today = date.today()
    return ServiceListResponse(services=[to_schema(r, today, current_mileage) for r in records])


@router.delete("/services/{record_id}", response_model=DeleteResponse)
def delete_service(
    record_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user: UserIdentity = Depends(get_current_user),
):
    request_id = get_request_id(request)
    try:
        ServiceRepository(db).delete(record_id, user.id)
        db.commit()
    except RecordNotFoundError:
        db.rollback()
        fail(404, "Service not found")
    except SQLAlchemyError as e:
        db.rollback()
        logging.error(f"Service delete failed: {e}", extra={"request_id": request_id})
        fail(503, "Could not delete the service")

    log_action(request_id, user.id, "service_deleted", "success", record_id=str(record_id))
    return DeleteResponse(notification=success("Service deleted"))
