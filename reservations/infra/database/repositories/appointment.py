"""Appointment repository: live-row queries, soft delete and per-date advisory locks."""
from __future__ import annotations

import datetime as _dt
from typing import Any, List, Optional

from sqlalchemy import func, literal_column, select, text, update as sa_update

from reservations.infra.database.models.appointment import AppointmentRecord
from reservations.infra.database.repositories.base import BaseRepository

# First key of the two-int advisory lock; keeps date locks apart from other users
DATE_LOCK_NAMESPACE = 0x5253


class AppointmentRepository(BaseRepository[AppointmentRecord]):
    model = AppointmentRecord

    def _live(self):
        return select(AppointmentRecord).where(AppointmentRecord.deleted_at.is_(None))

    async def _scalars(self, stmt) -> List[AppointmentRecord]:
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_live(self, id: Any) -> Optional[AppointmentRecord]:
        """Reload from the database even if the session already holds the row.

        A read taken after ``lock_date`` must see what other transactions committed.
        """
        record = await self.session.get(AppointmentRecord, id, populate_existing=True)
        if record is None or record.deleted_at is not None:
            return None
        return record

    async def get_by_code(self, code: str) -> Optional[AppointmentRecord]:
        stmt = self._live().where(AppointmentRecord.confirmation_code == code)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def code_exists(self, code: str) -> bool:
        """Includes soft-deleted rows: a code is never handed out twice."""
        stmt = (
            select(literal_column("1"))
            .where(AppointmentRecord.confirmation_code == code)
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar() is not None

    async def list_for_date(self, date: _dt.date) -> List[AppointmentRecord]:
        stmt = (
            self._live()
            .where(AppointmentRecord.date == date)
            .order_by(AppointmentRecord.start_time)
        )
        return await self._scalars(stmt)

    async def list_by_email(self, email: str) -> List[AppointmentRecord]:
        stmt = (
            self._live()
            .where(AppointmentRecord.contact_email == email)
            .order_by(AppointmentRecord.date.desc(), AppointmentRecord.start_time.desc())
        )
        return await self._scalars(stmt)

    async def list_by_status(self, status: str) -> List[AppointmentRecord]:
        stmt = (
            self._live()
            .where(AppointmentRecord.status == status)
            .order_by(AppointmentRecord.date, AppointmentRecord.start_time)
        )
        return await self._scalars(stmt)

    async def list_all(self) -> List[AppointmentRecord]:
        stmt = self._live().order_by(AppointmentRecord.date, AppointmentRecord.start_time)
        return await self._scalars(stmt)

    async def soft_delete(self, id: Any) -> bool:
        stmt = (
            sa_update(AppointmentRecord)
            .where(AppointmentRecord.id == id)
            .where(AppointmentRecord.deleted_at.is_(None))
            .values(deleted_at=func.now())
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0

    async def lock_date(self, date: _dt.date) -> None:
        """Take a transaction-scoped advisory lock for ``date``.

        Released by PostgreSQL when the surrounding transaction commits or
        rolls back.
        """
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(:namespace, :day)"),
            {"namespace": DATE_LOCK_NAMESPACE, "day": date.toordinal()},
        )
