"""ConflictDetector: find active appointments overlapping a candidate interval."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Iterable, List, Optional

from reservations.scheduling.store import AppointmentStore
from reservations.scheduling.types import Appointment, AppointmentSummary

logger = logging.getLogger(__name__)


def intervals_overlap(
    start_a: _dt.time,
    end_a: _dt.time,
    start_b: _dt.time,
    end_b: _dt.time,
) -> bool:
    """Half-open overlap: [10:00, 11:00) and [11:00, 12:00) do not overlap."""
    return start_a < end_b and end_a > start_b


def active_appointments(
    appointments: Iterable[Appointment],
    exclude_id: Optional[Any] = None,
) -> List[Appointment]:
    """Pending/Confirmed appointments, minus ``exclude_id``, ordered by start time."""
    active = [
        a for a in appointments
        if a.is_active and (exclude_id is None or a.id != exclude_id)
    ]
    return sorted(active, key=lambda a: (a.start_time, a.end_time))


def find_conflicts(
    appointments: Iterable[Appointment],
    start_time: _dt.time,
    end_time: _dt.time,
    exclude_id: Optional[Any] = None,
) -> List[AppointmentSummary]:
    """Pure variant of ConflictDetector.find_overlaps over an already-fetched day."""
    return [
        a.summary()
        for a in active_appointments(appointments, exclude_id)
        if intervals_overlap(start_time, end_time, a.start_time, a.end_time)
    ]


class ConflictDetector:
    """Report every active appointment on a date that a candidate interval would overlap.

    Cancelled and Completed appointments never block a slot. ``exclude_id``
    lets an update be checked without colliding with itself.
    """

    def __init__(self, store: AppointmentStore) -> None:
        self._store = store

    async def find_overlaps(
        self,
        date: _dt.date,
        start_time: _dt.time,
        end_time: _dt.time,
        exclude_id: Optional[Any] = None,
    ) -> List[AppointmentSummary]:
        day = await self._store.list_by_date(date)
        conflicts = find_conflicts(day, start_time, end_time, exclude_id)
        if conflicts:
            logger.debug(
                "ConflictDetector: %d overlap(s) for %s %s-%s",
                len(conflicts), date, start_time, end_time,
            )
        return conflicts

    async def has_conflict(
        self,
        date: _dt.date,
        start_time: _dt.time,
        end_time: _dt.time,
        exclude_id: Optional[Any] = None,
    ) -> bool:
        return bool(await self.find_overlaps(date, start_time, end_time, exclude_id))
