"""Unit tests for overlap detection against an in-memory day."""
from __future__ import annotations

import asyncio
import unittest
from datetime import date, datetime, time
from decimal import Decimal

from reservations.infra.memory import InMemoryAppointmentStore
from reservations.scheduling.conflicts import ConflictDetector, find_conflicts, intervals_overlap
from reservations.scheduling.types import Appointment, AppointmentStatus

DAY = date(2030, 1, 10)


def _appt(start: str, end: str, status=AppointmentStatus.PENDING, code: str = "APT-0000", day=DAY) -> Appointment:
    return Appointment(
        customer_name="Ana",
        contact_email="ana@example.com",
        contact_phone="600123456",
        date=day,
        start_time=time.fromisoformat(start),
        end_time=time.fromisoformat(end),
        service_label="Haircut",
        price=Decimal("20"),
        confirmation_code=code,
        status=status,
        created_at=datetime(2030, 1, 1),
        updated_at=datetime(2030, 1, 1),
    )


class TestIntervalsOverlap(unittest.TestCase):
    def test_cases(self) -> None:
        t = time.fromisoformat
        cases = [
            (("10:00", "11:00"), ("10:30", "11:30"), True),
            (("10:00", "11:00"), ("09:30", "10:30"), True),
            (("10:00", "11:00"), ("10:15", "10:45"), True),
            (("10:15", "10:45"), ("10:00", "11:00"), True),
            (("10:00", "11:00"), ("10:00", "11:00"), True),
            (("10:00", "11:00"), ("11:00", "12:00"), False),
            (("10:00", "11:00"), ("09:00", "10:00"), False),
            (("10:00", "11:00"), ("12:00", "13:00"), False),
        ]
        for (a_s, a_e), (b_s, b_e), expected in cases:
            with self.subTest(a=(a_s, a_e), b=(b_s, b_e)):
                self.assertEqual(intervals_overlap(t(a_s), t(a_e), t(b_s), t(b_e)), expected)


class TestFindConflicts(unittest.TestCase):
    def test_inactive_statuses_ignored(self) -> None:
        day = [
            _appt("10:00", "11:00", AppointmentStatus.CANCELLED),
            _appt("10:00", "11:00", AppointmentStatus.COMPLETED),
        ]
        self.assertEqual(find_conflicts(day, time(10, 0), time(11, 0)), [])

    def test_confirmed_blocks(self) -> None:
        a = _appt("10:00", "11:00", AppointmentStatus.CONFIRMED)
        a.id = 1
        conflicts = find_conflicts([a], time(10, 30), time(11, 30))
        self.assertEqual([c.id for c in conflicts], [1])

    def test_exclude_id(self) -> None:
        a = _appt("10:00", "11:00")
        a.id = 7
        self.assertEqual(find_conflicts([a], time(10, 0), time(11, 0), exclude_id=7), [])


class TestConflictDetector(unittest.TestCase):
    def setUp(self) -> None:
        self.store = InMemoryAppointmentStore()
        self.detector = ConflictDetector(self.store)

    def _seed(self, *appointments: Appointment) -> list:
        async def go():
            return [await self.store.insert(a) for a in appointments]
        return asyncio.run(go())

    def test_returns_every_conflict_in_start_order(self) -> None:
        ids = self._seed(
            _appt("11:00", "12:00", code="APT-0002"),
            _appt("09:00", "10:30", code="APT-0001"),
            _appt("13:00", "14:00", code="APT-0003"),
        )
        conflicts = asyncio.run(self.detector.find_overlaps(DAY, time(10, 0), time(11, 30)))
        self.assertEqual([c.id for c in conflicts], [ids[1], ids[0]])
        self.assertEqual(conflicts[0].to_dict()["start_time"], "09:00")

    def test_other_dates_do_not_conflict(self) -> None:
        self._seed(_appt("10:00", "11:00", day=date(2030, 1, 11)))
        self.assertFalse(asyncio.run(self.detector.has_conflict(DAY, time(10, 0), time(11, 0))))

    def test_touching_boundaries(self) -> None:
        self._seed(_appt("10:00", "11:00"))
        self.assertFalse(asyncio.run(self.detector.has_conflict(DAY, time(11, 0), time(12, 0))))
        self.assertFalse(asyncio.run(self.detector.has_conflict(DAY, time(9, 0), time(10, 0))))
        self.assertTrue(asyncio.run(self.detector.has_conflict(DAY, time(9, 0), time(10, 1))))
