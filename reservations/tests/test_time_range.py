"""Unit tests for TimeRangeValidator: rule order, boundaries, lead time."""
from __future__ import annotations

import unittest
from datetime import date, datetime, time, timezone

from reservations.config.scheduling import SchedulingConfig
from reservations.core.exceptions import InvalidTimeRangeError
from reservations.scheduling.time_range import TimeRangeValidator

DAY = date(2030, 1, 10)
NOW = datetime(2030, 1, 1, 9, 0)


class TestTimeRangeValidator(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = TimeRangeValidator()

    def _check(self, start: str, end: str, day: date = DAY, now: datetime = NOW):
        return self.validator.validate(day, time.fromisoformat(start), time.fromisoformat(end), now)

    def test_valid_range(self) -> None:
        self.assertIsNone(self._check("10:00", "11:00"))

    def test_start_after_end(self) -> None:
        err = self._check("11:00", "10:00")
        self.assertIsInstance(err, InvalidTimeRangeError)
        self.assertIn("earlier than end time", err.reason)

    def test_start_equals_end(self) -> None:
        self.assertIn("earlier than end time", self._check("10:00", "10:00").reason)

    def test_too_short(self) -> None:
        err = self._check("10:00", "10:10")
        self.assertIn("at least 15 minutes", err.reason)

    def test_minimum_duration_accepted(self) -> None:
        self.assertIsNone(self._check("10:00", "10:15"))

    def test_too_long(self) -> None:
        err = self._check("08:00", "16:30")
        self.assertIn("more than 8 hours", err.reason)

    def test_maximum_duration_accepted(self) -> None:
        self.assertIsNone(self._check("08:00", "16:00"))

    def test_before_opening(self) -> None:
        err = self._check("07:30", "08:30")
        self.assertIn("between 08:00 and 20:00", err.reason)

    def test_after_closing(self) -> None:
        err = self._check("19:30", "20:30")
        self.assertIn("between 08:00 and 20:00", err.reason)

    def test_business_hour_edges_accepted(self) -> None:
        self.assertIsNone(self._check("08:00", "09:00"))
        self.assertIsNone(self._check("19:00", "20:00"))

    def test_ordering_reported_before_business_hours(self) -> None:
        err = self._check("07:00", "06:30")
        self.assertIn("earlier than end time", err.reason)

    def test_lead_time_exactly_two_hours(self) -> None:
        now = datetime(2030, 1, 10, 8, 30)
        self.assertIsNone(self._check("10:30", "11:00", now=now))

    def test_lead_time_too_short(self) -> None:
        now = datetime(2030, 1, 10, 8, 30)
        err = self._check("10:15", "11:00", now=now)
        self.assertIn("at least 2 hours in advance", err.reason)

    def test_past_date_rejected(self) -> None:
        err = self._check("10:00", "11:00", day=date(2029, 12, 31))
        self.assertIn("in advance", err.reason)

    def test_aware_now(self) -> None:
        now = datetime(2030, 1, 10, 7, 0, tzinfo=timezone.utc)
        self.assertIsNone(self._check("09:00", "10:00", now=now))
        self.assertIsNotNone(self._check("08:30", "10:00", now=now))

    def test_error_metadata(self) -> None:
        err = self._check("07:30", "08:30")
        self.assertEqual(err.code, "INVALID_TIME_RANGE")
        self.assertEqual(err.http_status, 422)
        self.assertEqual(err.to_dict()["details"]["reason"], err.reason)

    def test_custom_rules(self) -> None:
        cfg = SchedulingConfig(lead_time_minutes=0, min_duration_minutes=30)
        validator = TimeRangeValidator(cfg)
        now = datetime(2030, 1, 10, 10, 0)
        self.assertIsNone(validator.validate(DAY, time(10, 0), time(10, 30), now))
        err = validator.validate(DAY, time(10, 0), time(10, 20), now)
        self.assertIn("at least 30 minutes", err.reason)
