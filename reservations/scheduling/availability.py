"""AvailabilityCalculator: fixed slot grid over the business day, marked free/occupied."""
from __future__ import annotations

import datetime as _dt
from typing import Iterable, List, Optional, Tuple

from reservations.config.scheduling import SchedulingConfig
from reservations.scheduling.conflicts import active_appointments, intervals_overlap
from reservations.scheduling.store import AppointmentStore
from reservations.scheduling.types import Appointment, AvailabilityView, TimeSlot


def build_grid(
    open_time: _dt.time,
    close_time: _dt.time,
    slot_minutes: int,
) -> List[Tuple[_dt.time, _dt.time]]:
    """[(start, end), ...] covering [open_time, close_time) in slot_minutes steps.

    A trailing partial slot is dropped; the default 08:00–20:00 / 30 minute
    grid has 24 slots.
    """
    anchor = _dt.date(2000, 1, 1)
    cursor = _dt.datetime.combine(anchor, open_time)
    end = _dt.datetime.combine(anchor, close_time)
    width = _dt.timedelta(minutes=slot_minutes)
    grid: List[Tuple[_dt.time, _dt.time]] = []
    while cursor + width <= end:
        grid.append((cursor.time(), (cursor + width).time()))
        cursor += width
    return grid


class AvailabilityCalculator:
    """Classify each grid slot of a date as free or occupied.

    Uses the same half-open overlap rule and the same Pending/Confirmed filter
    as ConflictDetector, so a slot shown free never yields a conflict for an
    appointment that fits inside it.
    """

    def __init__(
        self,
        store: AppointmentStore,
        config: Optional[SchedulingConfig] = None,
    ) -> None:
        self._store = store
        self._config = config or SchedulingConfig()
        self._grid = build_grid(
            self._config.open_time,
            self._config.close_time,
            self._config.slot_minutes,
        )

    @property
    def total_slots(self) -> int:
        return len(self._grid)

    def project(self, date: _dt.date, appointments: Iterable[Appointment]) -> AvailabilityView:
        """Build the view from an already-fetched day."""
        active = active_appointments(appointments)
        slots = [
            TimeSlot(
                start=start,
                end=end,
                occupied=any(
                    intervals_overlap(start, end, a.start_time, a.end_time) for a in active
                ),
            )
            for start, end in self._grid
        ]
        occupied_ranges = [TimeSlot(a.start_time, a.end_time, occupied=True) for a in active]
        return AvailabilityView(date=date, slots=slots, occupied_ranges=occupied_ranges)

    async def availability(self, date: _dt.date) -> AvailabilityView:
        return self.project(date, await self._store.list_by_date(date))
