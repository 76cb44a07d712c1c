"""Core data structures for the scheduling layer."""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from reservations.core.exceptions import ProjectError

T = TypeVar("T")


class AppointmentStatus(str, Enum):
    """Lifecycle states. Cancelled and Completed are terminal."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


ACTIVE_STATUSES = frozenset({AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED})
"""Only these statuses occupy a time slot."""


@dataclass
class Appointment:
    customer_name: str
    contact_email: str
    contact_phone: str
    date: _dt.date
    start_time: _dt.time
    end_time: _dt.time
    service_label: str
    price: Decimal
    notes: Optional[str] = None
    confirmation_code: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    created_at: Optional[_dt.datetime] = None
    updated_at: Optional[_dt.datetime] = None
    id: Optional[Any] = None
    """Assigned by the store on insert."""

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    @property
    def duration_minutes(self) -> int:
        start = _dt.datetime.combine(self.date, self.start_time)
        end = _dt.datetime.combine(self.date, self.end_time)
        return int((end - start).total_seconds() // 60)

    def summary(self) -> "AppointmentSummary":
        return AppointmentSummary(
            id=self.id,
            confirmation_code=self.confirmation_code,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            status=self.status,
            customer_name=self.customer_name,
        )


@dataclass(frozen=True)
class AppointmentSummary:
    """What a conflict report exposes about an existing appointment."""
    id: Any
    confirmation_code: Optional[str]
    date: _dt.date
    start_time: _dt.time
    end_time: _dt.time
    status: AppointmentStatus
    customer_name: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "confirmation_code": self.confirmation_code,
            "date": self.date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
            "end_time": self.end_time.strftime("%H:%M"),
            "status": self.status.value,
            "customer_name": self.customer_name,
        }


@dataclass(frozen=True)
class TimeSlot:
    start: _dt.time
    end: _dt.time
    occupied: bool = False

    @property
    def label(self) -> str:
        return f"{self.start:%H:%M} - {self.end:%H:%M}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.strftime("%H:%M"),
            "end": self.end.strftime("%H:%M"),
            "occupied": self.occupied,
        }


@dataclass(frozen=True)
class AvailabilityView:
    """Read-only projection of one day's slot grid."""
    date: _dt.date
    slots: List[TimeSlot] = field(default_factory=list)
    occupied_ranges: List[TimeSlot] = field(default_factory=list)
    """The active appointments' own [start, end) ranges, sorted by start."""

    @property
    def total_slots(self) -> int:
        return len(self.slots)

    @property
    def occupied_count(self) -> int:
        return sum(1 for s in self.slots if s.occupied)

    @property
    def free_count(self) -> int:
        return self.total_slots - self.occupied_count

    @property
    def free_slots(self) -> List[TimeSlot]:
        return [s for s in self.slots if not s.occupied]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "slots": [s.to_dict() for s in self.slots],
            "occupied_ranges": [r.label for r in self.occupied_ranges],
            "total_slots": self.total_slots,
            "free_count": self.free_count,
            "occupied_count": self.occupied_count,
        }


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or one of the scheduling error kinds, never both."""
    value: Optional[T] = None
    error: Optional[ProjectError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: ProjectError) -> "Outcome[T]":
        return cls(error=error)

    def unwrap(self) -> T:
        """Return the value, raising the carried error if there is one."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
