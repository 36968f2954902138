"""Data access layer for driver records"""

import uuid
from datetime import date
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from ride_ledger.infrastructure.database.models import EarningsRecord, ServiceRecord, TripAnalysis
from ride_ledger.domain.exceptions import RecordNotFoundError
from ride_ledger.domain.models import NextService, TripAnalysisResult


def _delete_owned(db: Session, model, record_id: uuid.UUID, user_id: str) -> None:
    """Delete one of the user's rows; other users' rows look the same as missing ones"""
    row = (
        db.query(model)
        .filter(model.id == record_id, model.user_id == user_id)
        .first()
    )
    if row is None:
        raise RecordNotFoundError(f"{model.__tablename__} record {record_id} not found")
    db.delete(row)
    db.flush()


class EarningsRepository:
    """Repository for daily earnings records"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: str, values: Dict[str, Any]) -> EarningsRecord:
        """Persist one earnings record (raw inputs + derived values)"""
        record = EarningsRecord(user_id=user_id, **values)
        self.db.add(record)
        self.db.flush()
        return record

    def list_for_user(self, user_id: str) -> List[EarningsRecord]:
        """All records for a user, newest day first"""
        return (
            self.db.query(EarningsRecord)
            .filter(EarningsRecord.user_id == user_id)
            .order_by(EarningsRecord.date.desc())
            .all()
        )

    def delete(self, record_id: uuid.UUID, user_id: str) -> None:
        _delete_owned(self.db, EarningsRecord, record_id, user_id)


class ServiceRepository:
    """Repository for maintenance records, one row per (user, service type)"""

    def __init__(self, db: Session):
        self.db = db

    def upsert(
        self,
        user_id: str,
        service_type: str,
        service_date: date,
        current_mileage: float,
        next_service: NextService,
    ) -> ServiceRecord:
        """Overwrite the user's record for this service type, or create it"""
        record = (
            self.db.query(ServiceRecord)
            .filter(ServiceRecord.user_id == user_id, ServiceRecord.service_type == service_type)
            .limit(1)
            .first()
        )
        if record is None:
            record = ServiceRecord(user_id=user_id, service_type=service_type)
            self.db.add(record)

        record.service_date = service_date
        record.current_mileage = current_mileage
        record.next_service_date = next_service.next_service_date
        record.next_service_mileage = next_service.next_service_mileage
        self.db.flush()
        return record

    def list_for_user(self, user_id: str) -> List[ServiceRecord]:
        return (
            self.db.query(ServiceRecord)
            .filter(ServiceRecord.user_id == user_id)
            .order_by(ServiceRecord.created_at.desc())
            .all()
        )

    def delete(self, record_id: uuid.UUID, user_id: str) -> None:
        _delete_owned(self.db, ServiceRecord, record_id, user_id)


class TripRepository:
    """Repository for saved trip analyses"""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: str,
        origin: str,
        destination: str,
        analysis: TripAnalysisResult,
    ) -> TripAnalysis:
        record = TripAnalysis(
            user_id=user_id,
            origin=origin,
            destination=destination,
            distance_km=analysis.distance_km,
            trip_price=analysis.trip_price,
            desired_price_per_km=analysis.desired_price_per_km,
            actual_price_per_km=analysis.actual_price_per_km,
            percent_difference=analysis.percent_difference,
            profitability=analysis.profitability,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def list_for_user(self, user_id: str, limit: Optional[int] = None) -> List[TripAnalysis]:
        query = (
            self.db.query(TripAnalysis)
            .filter(TripAnalysis.user_id == user_id)
            .order_by(TripAnalysis.created_at.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return query.all()

    def delete(self, record_id: uuid.UUID, user_id: str) -> None:
        _delete_owned(self.db, TripAnalysis, record_id, user_id)
