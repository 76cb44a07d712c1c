"""
Scheduling error kinds. Add new ones here.
"""
from __future__ import annotations

import datetime as _dt
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Union

from reservations.core.exceptions.base import ProjectError

if TYPE_CHECKING:
    from reservations.scheduling.types import AppointmentStatus, AppointmentSummary


class ConfigurationError(ProjectError, ValueError):
    """Invalid or missing configuration. Still a ValueError for callers that catch that."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class NotFoundError(ProjectError):
    """Referenced appointment id or confirmation code does not exist."""

    default_code = "NOT_FOUND"
    default_http_status = 404

    @classmethod
    def for_id(cls, appointment_id: Any) -> "NotFoundError":
        return cls(
            f"Appointment with id {appointment_id} not found",
            details={"id": str(appointment_id)},
        )

    @classmethod
    def for_code(cls, code: str) -> "NotFoundError":
        return cls(
            f"Appointment with confirmation code {code} not found",
            details={"confirmation_code": code},
        )


class InvalidTimeRangeError(ProjectError):
    """Ordering, duration, business-hours or lead-time rule violated."""

    default_code = "INVALID_TIME_RANGE"
    default_http_status = 422

    def __init__(self, reason: str) -> None:
        super().__init__(reason, details={"reason": reason})

    @property
    def reason(self) -> str:
        return self.details["reason"]


class TimeSlotConflictError(ProjectError):
    """One or more active appointments overlap the requested interval."""

    default_code = "TIME_SLOT_CONFLICT"
    default_http_status = 409

    def __init__(
        self,
        date: _dt.date,
        start_time: _dt.time,
        end_time: _dt.time,
        conflicts: Sequence["AppointmentSummary"],
    ) -> None:
        self.conflicts: List["AppointmentSummary"] = list(conflicts)
        super().__init__(
            f"Requested slot {start_time:%H:%M} - {end_time:%H:%M} on {date.isoformat()} "
            f"overlaps {len(self.conflicts)} existing appointment(s)",
            details={"conflicts": [c.to_dict() for c in self.conflicts]},
        )


class InvalidStateTransitionError(ProjectError):
    """Requested status change is not an allowed lifecycle edge."""

    default_code = "INVALID_STATE_TRANSITION"
    default_http_status = 409

    def __init__(
        self,
        current: "AppointmentStatus",
        target: Union["AppointmentStatus", str],
    ) -> None:
        self.current = current
        self.target = target
        # target may be a raw string that names no status
        target_value = getattr(target, "value", target)
        super().__init__(
            f"Cannot change appointment status from {current.value} to {target_value}",
            details={"current": current.value, "target": target_value},
        )


class AllocationExhaustedError(ProjectError):
    """No free confirmation code was found within the retry budget."""

    default_code = "ALLOCATION_EXHAUSTED"
    default_http_status = 500

    def __init__(self, attempts: int, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"Could not allocate a unique confirmation code after {attempts} attempts",
            details={"attempts": attempts},
            cause=cause,
        )


class DuplicateConfirmationCodeError(ProjectError):
    """Storage layer rejected a write because the confirmation code is taken."""

    default_code = "DUPLICATE_CONFIRMATION_CODE"
    default_http_status = 409

    def __init__(self, code: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(
            f"Confirmation code {code} is already in use",
            details={"confirmation_code": code},
            cause=cause,
        )
