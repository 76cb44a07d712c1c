"""In-process AppointmentStore for tests, demos and single-process deployments."""
from __future__ import annotations

import asyncio
import dataclasses
import datetime as _dt
import itertools
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

from reservations.core.exceptions import DuplicateConfirmationCodeError
from reservations.scheduling.store import AppointmentStore
from reservations.scheduling.types import Appointment, AppointmentStatus


def _copy(appointment: Appointment) -> Appointment:
    return dataclasses.replace(appointment)


class InMemoryAppointmentStore(AppointmentStore):
    """Dict-backed store. ``atomic(date)`` holds a per-date asyncio.Lock.

    Individual methods never await, so each one is atomic on the event loop;
    insert rejecting a taken code is enough for code uniqueness across dates.
    Stored objects are copied in and out so callers cannot mutate state.
    """

    def __init__(self) -> None:
        self._rows: Dict[int, Appointment] = {}
        self._codes: Dict[str, int] = {}
        self._ids = itertools.count(1)
        self._date_locks: Dict[_dt.date, asyncio.Lock] = {}
        # Holders plus waiters per date; a lock is dropped when this reaches zero
        self._lock_users: Dict[_dt.date, int] = {}

    @asynccontextmanager
    async def atomic(self, date: _dt.date) -> AsyncIterator[None]:
        lock = self._date_locks.get(date)
        if lock is None:
            lock = self._date_locks[date] = asyncio.Lock()
        self._lock_users[date] = self._lock_users.get(date, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[date] -= 1
            if not self._lock_users[date]:
                del self._lock_users[date]
                del self._date_locks[date]

    async def insert(self, appointment: Appointment) -> int:
        code = appointment.confirmation_code
        if code is not None and code in self._codes:
            raise DuplicateConfirmationCodeError(code)
        new_id = next(self._ids)
        self._rows[new_id] = dataclasses.replace(appointment, id=new_id)
        if code is not None:
            self._codes[code] = new_id
        return new_id

    async def get_by_id(self, appointment_id: Any) -> Optional[Appointment]:
        row = self._rows.get(appointment_id)
        return _copy(row) if row is not None else None

    async def get_by_code(self, code: str) -> Optional[Appointment]:
        appointment_id = self._codes.get(code)
        if appointment_id is None or appointment_id not in self._rows:
            return None
        return _copy(self._rows[appointment_id])

    async def list_by_date(self, date: _dt.date) -> List[Appointment]:
        rows = [r for r in self._rows.values() if r.date == date]
        return [_copy(r) for r in sorted(rows, key=lambda r: r.start_time)]

    async def list_by_email(self, email: str) -> List[Appointment]:
        rows = [r for r in self._rows.values() if r.contact_email == email]
        return [_copy(r) for r in sorted(rows, key=lambda r: (r.date, r.start_time), reverse=True)]

    async def list_by_status(self, status: AppointmentStatus) -> List[Appointment]:
        rows = [r for r in self._rows.values() if r.status == status]
        return [_copy(r) for r in sorted(rows, key=lambda r: (r.date, r.start_time))]

    async def list_all(self) -> List[Appointment]:
        return [_copy(r) for r in sorted(self._rows.values(), key=lambda r: (r.date, r.start_time))]

    async def exists_by_code(self, code: str) -> bool:
        # Codes of deleted rows stay reserved
        return code in self._codes

    async def update(self, appointment_id: Any, appointment: Appointment) -> bool:
        existing = self._rows.get(appointment_id)
        if existing is None:
            return False
        # id, confirmation code, created_at and status are not written here
        self._rows[appointment_id] = dataclasses.replace(
            appointment,
            id=appointment_id,
            confirmation_code=existing.confirmation_code,
            created_at=existing.created_at,
            status=existing.status,
        )
        return True

    async def set_status(
        self,
        appointment_id: Any,
        status: AppointmentStatus,
        updated_at: _dt.datetime,
    ) -> bool:
        existing = self._rows.get(appointment_id)
        if existing is None:
            return False
        self._rows[appointment_id] = dataclasses.replace(existing, status=status, updated_at=updated_at)
        return True

    async def delete(self, appointment_id: Any) -> bool:
        return self._rows.pop(appointment_id, None) is not None
