"""Pydantic schema for booking requests (create and update share it)."""
from __future__ import annotations

import datetime as _dt
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
_PHONE_PATTERN = r"^\+?[0-9\s-]{9,15}$"


class AppointmentRequest(BaseModel):
    """Caller-supplied appointment details.

    Field presence and format are checked here. Ordering, duration, business
    hours and lead time are TimeRangeValidator's job, so any start/end pair is
    accepted at this level.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    customer_name: str = Field(..., min_length=2, max_length=100)
    contact_email: str = Field(..., max_length=100, pattern=_EMAIL_PATTERN)
    contact_phone: str = Field(..., max_length=20, pattern=_PHONE_PATTERN)
    date: _dt.date
    start_time: _dt.time
    end_time: _dt.time
    service_label: str = Field(..., min_length=2, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = Field(None, max_length=500)
