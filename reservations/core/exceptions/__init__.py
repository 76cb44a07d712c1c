"""
Project exception system.

Usage:
    from reservations.core.exceptions import NotFoundError, TimeSlotConflictError

    # Scheduling operations hand these back inside an Outcome
    outcome = await service.create(request, now)
    if not outcome.ok:
        payload = outcome.error.to_dict()   # code, http_status, details

    # Or raise them where a caller prefers exceptions
    appointment = outcome.unwrap()
"""
from reservations.core.exceptions.base import ProjectError
from reservations.core.exceptions.errors import (
    AllocationExhaustedError,
    ConfigurationError,
    DuplicateConfirmationCodeError,
    InvalidStateTransitionError,
    InvalidTimeRangeError,
    NotFoundError,
    TimeSlotConflictError,
)

__all__ = [
    "ProjectError",
    "ConfigurationError",
    "NotFoundError",
    "InvalidTimeRangeError",
    "TimeSlotConflictError",
    "InvalidStateTransitionError",
    "AllocationExhaustedError",
    "DuplicateConfirmationCodeError",
]
