"""SQLAlchemy ORM models for the managed Postgres tables"""

import uuid
from sqlalchemy import Column, Float, DateTime, Date, Integer, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class EarningsRecord(Base):
    """One day of driving: raw inputs plus derived totals and rates"""

    __tablename__ = "earnings_records"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    date = Column(Date, nullable=False)

    total_earnings = Column(Float, nullable=False)
    trips_completed = Column(Integer, nullable=False)
    kilometers_driven = Column(Float, nullable=False)
    hours_worked = Column(Float, nullable=False)
    tips = Column(Float, nullable=False, default=0)
    extras = Column(Float, nullable=False, default=0)
    fuel_cost = Column(Float, nullable=False, default=0)
    other_expenses = Column(Float, nullable=False, default=0)

    gross_earnings = Column(Float, nullable=False)
    gross_per_km = Column(Float, nullable=False)
    gross_per_hour = Column(Float, nullable=False)
    gross_per_trip = Column(Float, nullable=False)
    total_expenses = Column(Float, nullable=False)
    net_earnings = Column(Float, nullable=False)
    net_per_km = Column(Float, nullable=False)
    net_per_hour = Column(Float, nullable=False)
    net_per_trip = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class ServiceRecord(Base):
    """Latest maintenance service of a given type"""

    __tablename__ = "service_records"
    __table_args__ = (UniqueConstraint("user_id", "service_type", name="uq_service_records_user_type"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    service_type = Column(Text, nullable=False)
    service_date = Column(Date, nullable=False)
    current_mileage = Column(Float, nullable=False)
    next_service_date = Column(Date, nullable=True)
    next_service_mileage = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class TripAnalysis(Base):
    """Saved trip profitability analysis"""

    __tablename__ = "trip_analysis"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    origin = Column(Text, nullable=False)
    destination = Column(Text, nullable=False)
    distance_km = Column(Float, nullable=False)
    trip_price = Column(Float, nullable=False)
    desired_price_per_km = Column(Float, nullable=False)
    actual_price_per_km = Column(Float, nullable=False)
    percent_difference = Column(Float, nullable=False)
    profitability = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
