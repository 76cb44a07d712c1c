"""SqlAppointmentStore: AppointmentStore backed by an AsyncSession on PostgreSQL."""
from __future__ import annotations

import datetime as _dt
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from reservations.core.exceptions import DuplicateConfirmationCodeError
from reservations.infra.database.models.appointment import CODE_UNIQUE_INDEX, AppointmentRecord
from reservations.infra.database.repositories.appointment import AppointmentRepository
from reservations.scheduling.store import AppointmentStore
from reservations.scheduling.types import Appointment, AppointmentStatus

logger = logging.getLogger(__name__)

# Columns written by update; status changes go through set_status only
_DETAIL_FIELDS = (
    "customer_name",
    "contact_email",
    "contact_phone",
    "date",
    "start_time",
    "end_time",
    "service_label",
    "price",
    "notes",
    "updated_at",
)


def _as_uuid(value: Any) -> Optional[uuid.UUID]:
    """Primary keys are UUIDs; anything that does not parse cannot match a row."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def record_to_appointment(record: AppointmentRecord) -> Appointment:
    return Appointment(
        id=record.id,
        customer_name=record.customer_name,
        contact_email=record.contact_email,
        contact_phone=record.contact_phone,
        date=record.date,
        start_time=record.start_time,
        end_time=record.end_time,
        service_label=record.service_label,
        price=record.price,
        notes=record.notes,
        confirmation_code=record.confirmation_code,
        status=AppointmentStatus(record.status),
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def appointment_to_row(appointment: Appointment) -> Dict[str, Any]:
    row: Dict[str, Any] = {f: getattr(appointment, f) for f in _DETAIL_FIELDS}
    row["status"] = appointment.status.value
    row["confirmation_code"] = appointment.confirmation_code
    row["created_at"] = appointment.created_at
    return row


class SqlAppointmentStore(AppointmentStore):
    """One store per AsyncSession; the session's transaction is the consistency boundary.

    ``atomic(date)`` takes ``pg_advisory_xact_lock`` on the date, so concurrent
    writers of the same day queue until the first transaction ends. Code
    uniqueness is enforced by a unique index; inserts run in a SAVEPOINT so a
    duplicate can be retried within the same transaction.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._repo = AppointmentRepository(session)

    @asynccontextmanager
    async def atomic(self, date: _dt.date) -> AsyncIterator[None]:
        await self._repo.lock_date(date)
        yield

    async def insert(self, appointment: Appointment) -> Any:
        try:
            async with self._repo.session.begin_nested():
                record = await self._repo.create(appointment_to_row(appointment))
        except IntegrityError as exc:
            if CODE_UNIQUE_INDEX in str(exc.orig):
                raise DuplicateConfirmationCodeError(appointment.confirmation_code, cause=exc) from exc
            raise
        logger.debug("SqlAppointmentStore: inserted %s", record.id)
        return record.id

    async def get_by_id(self, appointment_id: Any) -> Optional[Appointment]:
        key = _as_uuid(appointment_id)
        if key is None:
            return None
        record = await self._repo.get_live(key)
        return record_to_appointment(record) if record is not None else None

    async def get_by_code(self, code: str) -> Optional[Appointment]:
        record = await self._repo.get_by_code(code)
        return record_to_appointment(record) if record is not None else None

    async def list_by_date(self, date: _dt.date) -> List[Appointment]:
        return [record_to_appointment(r) for r in await self._repo.list_for_date(date)]

    async def list_by_email(self, email: str) -> List[Appointment]:
        return [record_to_appointment(r) for r in await self._repo.list_by_email(email)]

    async def list_by_status(self, status: AppointmentStatus) -> List[Appointment]:
        return [record_to_appointment(r) for r in await self._repo.list_by_status(status.value)]

    async def list_all(self) -> List[Appointment]:
        return [record_to_appointment(r) for r in await self._repo.list_all()]

    async def exists_by_code(self, code: str) -> bool:
        return await self._repo.code_exists(code)

    async def update(self, appointment_id: Any, appointment: Appointment) -> bool:
        key = _as_uuid(appointment_id)
        if key is None or await self._repo.get_live(key) is None:
            return False
        await self._repo.update(key, {f: getattr(appointment, f) for f in _DETAIL_FIELDS})
        return True

    async def set_status(
        self,
        appointment_id: Any,
        status: AppointmentStatus,
        updated_at: _dt.datetime,
    ) -> bool:
        key = _as_uuid(appointment_id)
        if key is None or await self._repo.get_live(key) is None:
            return False
        await self._repo.update(key, {"status": status.value, "updated_at": updated_at})
        return True

    async def delete(self, appointment_id: Any) -> bool:
        key = _as_uuid(appointment_id)
        if key is None:
            return False
        return await self._repo.soft_delete(key)
