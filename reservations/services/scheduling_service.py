"""SchedulingService: create, update, transition, delete and query appointments."""
from __future__ import annotations

import dataclasses
import datetime as _dt
import logging
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Union

from reservations.config.scheduling import SchedulingConfig
from reservations.core.exceptions import (
    AllocationExhaustedError,
    DuplicateConfirmationCodeError,
    InvalidStateTransitionError,
    NotFoundError,
    TimeSlotConflictError,
)
from reservations.scheduling.availability import AvailabilityCalculator
from reservations.scheduling.confirmation import ConfirmationCodeAllocator
from reservations.scheduling.conflicts import ConflictDetector
from reservations.scheduling.lifecycle import LifecycleStateMachine
from reservations.scheduling.schemas import AppointmentRequest
from reservations.scheduling.store import AppointmentStore
from reservations.scheduling.time_range import TimeRangeValidator
from reservations.scheduling.types import (
    Appointment,
    AppointmentStatus,
    AvailabilityView,
    Outcome,
)

logger = logging.getLogger(__name__)


class SchedulingService:
    """The only component that writes to the store.

    Every fallible operation returns an Outcome holding either the result or
    one of NotFoundError, InvalidTimeRangeError, TimeSlotConflictError,
    InvalidStateTransitionError, AllocationExhaustedError. Store failures are
    not interpreted and propagate to the caller.

    The caller supplies ``now``; nothing here reads a clock.
    """

    def __init__(
        self,
        store: AppointmentStore,
        config: Optional[SchedulingConfig] = None,
        *,
        allocator: Optional[ConfirmationCodeAllocator] = None,
        state_machine: Optional[LifecycleStateMachine] = None,
    ) -> None:
        self._store = store
        self._config = config or SchedulingConfig()
        self._validator = TimeRangeValidator(self._config)
        self._conflicts = ConflictDetector(store)
        self._availability = AvailabilityCalculator(store, self._config)
        self._allocator = allocator or ConfirmationCodeAllocator(self._config)
        self._lifecycle = state_machine or LifecycleStateMachine()

    # ── Writes ───────────────────────────────────────────────────────────

    async def create(self, request: AppointmentRequest, now: _dt.datetime) -> Outcome[Appointment]:
        """Validate, check conflicts, allocate a code and persist as Pending."""
        error = self._validator.validate(request.date, request.start_time, request.end_time, now)
        if error is not None:
            logger.info("Booking rejected: %s", error.reason, extra={"date": request.date, "reason": error.reason})
            return Outcome.failure(error)

        async with self._store.atomic(request.date):
            conflicts = await self._conflicts.find_overlaps(
                request.date, request.start_time, request.end_time
            )
            if conflicts:
                logger.info(
                    "Booking rejected: %d conflicting appointment(s)", len(conflicts),
                    extra={"date": request.date, "reason": "conflict"},
                )
                return Outcome.failure(
                    TimeSlotConflictError(request.date, request.start_time, request.end_time, conflicts)
                )
            try:
                appointment = await self._insert_with_code(request, now)
            except AllocationExhaustedError as exc:
                return Outcome.failure(exc)

        logger.info(
            "Appointment created",
            extra={
                "appointment_id": appointment.id,
                "confirmation_code": appointment.confirmation_code,
                "date": appointment.date,
            },
        )
        return Outcome.success(appointment)

    async def _insert_with_code(self, request: AppointmentRequest, now: _dt.datetime) -> Appointment:
        """Allocate and insert in one step; a duplicate reported by the store triggers a fresh code."""
        last_duplicate: Optional[DuplicateConfirmationCodeError] = None
        for _ in range(self._allocator.max_attempts):
            code = await self._allocator.allocate(self._store.exists_by_code)
            appointment = Appointment(
                customer_name=request.customer_name,
                contact_email=request.contact_email,
                contact_phone=request.contact_phone,
                date=request.date,
                start_time=request.start_time,
                end_time=request.end_time,
                service_label=request.service_label,
                price=request.price,
                notes=request.notes,
                confirmation_code=code,
                status=AppointmentStatus.PENDING,
                created_at=now,
                updated_at=now,
            )
            try:
                appointment.id = await self._store.insert(appointment)
            except DuplicateConfirmationCodeError as exc:
                logger.warning("Store rejected confirmation code, retrying", extra={"confirmation_code": code})
                last_duplicate = exc
                continue
            return appointment
        raise AllocationExhaustedError(self._allocator.max_attempts, cause=last_duplicate)

    @asynccontextmanager
    async def _locked(self, *dates: _dt.date) -> AsyncIterator[None]:
        """Hold ``atomic`` on each distinct date, taken in ascending order."""
        async with AsyncExitStack() as stack:
            for day in sorted(set(dates)):
                await stack.enter_async_context(self._store.atomic(day))
            yield

    async def update(
        self,
        appointment_id: Any,
        request: AppointmentRequest,
        now: _dt.datetime,
    ) -> Outcome[Appointment]:
        """Replace time and details; code, status and created_at are kept.

        Both the stored date and the requested one are locked, so a move
        serializes with transitions and bookings on either day.
        """
        existing = await self._store.get_by_id(appointment_id)
        if existing is None:
            return Outcome.failure(NotFoundError.for_id(appointment_id))

        error = self._validator.validate(request.date, request.start_time, request.end_time, now)
        if error is not None:
            logger.info(
                "Update rejected: %s", error.reason,
                extra={"appointment_id": appointment_id, "reason": error.reason},
            )
            return Outcome.failure(error)

        while True:
            async with self._locked(existing.date, request.date):
                current = await self._store.get_by_id(appointment_id)
                if current is None:
                    return Outcome.failure(NotFoundError.for_id(appointment_id))
                if current.date == existing.date:
                    conflicts = await self._conflicts.find_overlaps(
                        request.date, request.start_time, request.end_time, exclude_id=appointment_id
                    )
                    if conflicts:
                        logger.info(
                            "Update rejected: %d conflicting appointment(s)", len(conflicts),
                            extra={"appointment_id": appointment_id, "reason": "conflict"},
                        )
                        return Outcome.failure(
                            TimeSlotConflictError(request.date, request.start_time, request.end_time, conflicts)
                        )
                    updated = dataclasses.replace(
                        current,
                        customer_name=request.customer_name,
                        contact_email=request.contact_email,
                        contact_phone=request.contact_phone,
                        date=request.date,
                        start_time=request.start_time,
                        end_time=request.end_time,
                        service_label=request.service_label,
                        price=request.price,
                        notes=request.notes,
                        updated_at=now,
                    )
                    if not await self._store.update(appointment_id, updated):
                        return Outcome.failure(NotFoundError.for_id(appointment_id))
                    break
            # Another update moved it after the first read; retry under its new date
            existing = current

        logger.info("Appointment updated", extra={"appointment_id": appointment_id, "date": updated.date})
        return Outcome.success(updated)

    async def transition(
        self,
        appointment_id: Any,
        target: Union[AppointmentStatus, str],
        now: _dt.datetime,
    ) -> Outcome[Appointment]:
        """Move to ``target`` if the lifecycle table allows it, then persist.

        A string that names no status is rejected like any other disallowed edge.
        """
        existing = await self._store.get_by_id(appointment_id)
        if existing is None:
            return Outcome.failure(NotFoundError.for_id(appointment_id))
        try:
            target = AppointmentStatus(target)
        except ValueError:
            logger.info(
                "Transition rejected: unknown status",
                extra={"appointment_id": appointment_id, "status": existing.status.value, "target": str(target)},
            )
            return Outcome.failure(InvalidStateTransitionError(existing.status, target))

        while True:
            async with self._store.atomic(existing.date):
                current = await self._store.get_by_id(appointment_id)
                if current is None:
                    return Outcome.failure(NotFoundError.for_id(appointment_id))
                if current.date == existing.date:
                    error = self._lifecycle.check(current.status, target)
                    if error is not None:
                        logger.info(
                            "Transition rejected",
                            extra={
                                "appointment_id": appointment_id,
                                "status": current.status.value,
                                "target": target.value,
                            },
                        )
                        return Outcome.failure(error)
                    if not await self._store.set_status(appointment_id, target, now):
                        return Outcome.failure(NotFoundError.for_id(appointment_id))
                    updated = dataclasses.replace(current, status=target, updated_at=now)
                    break
            existing = current

        logger.info(
            "Appointment %s", target.value,
            extra={"appointment_id": appointment_id, "status": current.status.value, "target": target.value},
        )
        return Outcome.success(updated)

    async def confirm(self, appointment_id: Any, now: _dt.datetime) -> Outcome[Appointment]:
        return await self.transition(appointment_id, AppointmentStatus.CONFIRMED, now)

    async def cancel(self, appointment_id: Any, now: _dt.datetime) -> Outcome[Appointment]:
        return await self.transition(appointment_id, AppointmentStatus.CANCELLED, now)

    async def complete(self, appointment_id: Any, now: _dt.datetime) -> Outcome[Appointment]:
        return await self.transition(appointment_id, AppointmentStatus.COMPLETED, now)

    async def delete(self, appointment_id: Any) -> Outcome[None]:
        if not await self._store.delete(appointment_id):
            return Outcome.failure(NotFoundError.for_id(appointment_id))
        logger.info("Appointment deleted", extra={"appointment_id": appointment_id})
        return Outcome.success(None)

    # ── Reads ────────────────────────────────────────────────────────────

    async def availability(self, date: _dt.date) -> AvailabilityView:
        return await self._availability.availability(date)

    async def get(self, appointment_id: Any) -> Outcome[Appointment]:
        appointment = await self._store.get_by_id(appointment_id)
        if appointment is None:
            return Outcome.failure(NotFoundError.for_id(appointment_id))
        return Outcome.success(appointment)

    async def get_by_code(self, code: str) -> Outcome[Appointment]:
        appointment = await self._store.get_by_code(code.strip().upper())
        if appointment is None:
            return Outcome.failure(NotFoundError.for_code(code))
        return Outcome.success(appointment)

    async def list_all(self) -> List[Appointment]:
        return await self._store.list_all()

    async def list_by_date(self, date: _dt.date) -> List[Appointment]:
        return await self._store.list_by_date(date)

    async def list_by_email(self, email: str) -> List[Appointment]:
        return await self._store.list_by_email(email)

    async def list_by_status(self, status: Union[AppointmentStatus, str]) -> List[Appointment]:
        """A string that names no status matches nothing."""
        try:
            status = AppointmentStatus(status)
        except ValueError:
            return []
        return await self._store.list_by_status(status)
