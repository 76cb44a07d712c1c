"""Tests for the request schema, Outcome and appointment helpers."""
from datetime import date, time
from decimal import Decimal

import pytest
from pydantic import ValidationError

from reservations.core.exceptions import NotFoundError
from reservations.scheduling.schemas import AppointmentRequest
from reservations.scheduling.types import Outcome

VALID = {
    "customer_name": "  Ana Lopez ",
    "contact_email": "ana@example.com",
    "contact_phone": "+34 600-123-456",
    "date": "2030-01-10",
    "start_time": "10:00",
    "end_time": "11:00",
    "service_label": "Haircut",
    "price": "25.50",
}


class TestAppointmentRequest:
    def test_parses_and_strips(self):
        req = AppointmentRequest(**VALID)
        assert req.customer_name == "Ana Lopez"
        assert req.date == date(2030, 1, 10)
        assert req.start_time == time(10, 0)
        assert req.price == Decimal("25.50")
        assert req.notes is None

    @pytest.mark.parametrize(
        "field,value",
        [
            ("customer_name", "A"),
            ("contact_email", "not-an-email"),
            ("contact_phone", "12ab"),
            ("service_label", ""),
            ("price", "-1"),
            ("notes", "x" * 501),
        ],
    )
    def test_rejects_bad_fields(self, field, value):
        with pytest.raises(ValidationError):
            AppointmentRequest(**{**VALID, field: value})

    def test_time_order_not_checked_here(self):
        req = AppointmentRequest(**{**VALID, "start_time": "12:00", "end_time": "11:00"})
        assert req.start_time > req.end_time


class TestOutcome:
    def test_success(self):
        outcome = Outcome.success(5)
        assert outcome.ok
        assert outcome.unwrap() == 5

    def test_failure_unwrap_raises(self):
        err = NotFoundError.for_id(3)
        outcome = Outcome.failure(err)
        assert not outcome.ok
        assert outcome.value is None
        with pytest.raises(NotFoundError):
            outcome.unwrap()
        assert err.to_dict() == {
            "message": "Appointment with id 3 not found",
            "code": "NOT_FOUND",
            "http_status": 404,
            "details": {"id": "3"},
        }
