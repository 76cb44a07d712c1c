"""
reservations.scheduling – the booking core.

Public API
──────────
  TimeRangeValidator, ConflictDetector, AvailabilityCalculator,
  ConfirmationCodeAllocator, LifecycleStateMachine
  Appointment, AppointmentStatus, AppointmentSummary, AvailabilityView, TimeSlot, Outcome
  AppointmentStore (port), AppointmentRequest (pydantic schema)
"""
from reservations.scheduling.availability import AvailabilityCalculator, build_grid
from reservations.scheduling.confirmation import ConfirmationCodeAllocator
from reservations.scheduling.conflicts import ConflictDetector, intervals_overlap
from reservations.scheduling.lifecycle import ALLOWED_TRANSITIONS, LifecycleStateMachine
from reservations.scheduling.schemas import AppointmentRequest
from reservations.scheduling.store import AppointmentStore
from reservations.scheduling.time_range import TimeRangeValidator
from reservations.scheduling.types import (
    ACTIVE_STATUSES,
    Appointment,
    AppointmentStatus,
    AppointmentSummary,
    AvailabilityView,
    Outcome,
    TimeSlot,
)

__all__ = [
    "ACTIVE_STATUSES",
    "ALLOWED_TRANSITIONS",
    "Appointment",
    "AppointmentRequest",
    "AppointmentStatus",
    "AppointmentStore",
    "AppointmentSummary",
    "AvailabilityCalculator",
    "AvailabilityView",
    "ConfirmationCodeAllocator",
    "ConflictDetector",
    "LifecycleStateMachine",
    "Outcome",
    "TimeRangeValidator",
    "TimeSlot",
    "build_grid",
    "intervals_overlap",
]
