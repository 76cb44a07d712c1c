"""Appointment ORM model."""
from __future__ import annotations

import datetime as _dt
import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Date, DateTime, Index, Numeric, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from reservations.infra.database.models.base import Base, _uuid_pk

CODE_UNIQUE_INDEX = "uq_appointments_confirmation_code"


class AppointmentRecord(Base):
    """One booked appointment. Rows are soft-deleted so confirmation codes are never reused."""

    __tablename__ = "appointments"
    __table_args__ = (
        Index(CODE_UNIQUE_INDEX, "confirmation_code", unique=True),
        Index("ix_appointments_date_start", "date", "start_time"),
        CheckConstraint("start_time < end_time", name="ck_appointments_time_order"),
        CheckConstraint("price >= 0", name="ck_appointments_price_nonnegative"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()

    # Contact info
    customer_name: Mapped[str] = mapped_column(String(100), nullable=False)
    contact_email: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    contact_phone: Mapped[str] = mapped_column(String(20), nullable=False)

    # When
    date: Mapped[_dt.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[_dt.time] = mapped_column(Time, nullable=False)
    end_time: Mapped[_dt.time] = mapped_column(Time, nullable=False)

    # What
    service_label: Mapped[str] = mapped_column(String(100), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    confirmation_code: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending", index=True)
    # pending | confirmed | cancelled | completed

    # Assigned by the scheduling core from the caller's clock
    created_at: Mapped[_dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[_dt.datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    deleted_at: Mapped[Optional[_dt.datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
