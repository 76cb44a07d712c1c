"""AppointmentStore: the persistence port the scheduling core consumes."""
from __future__ import annotations

import datetime as _dt
from abc import ABC, abstractmethod
from typing import Any, AsyncContextManager, List, Optional

from reservations.scheduling.types import Appointment, AppointmentStatus


class AppointmentStore(ABC):
    @abstractmethod
    def atomic(self, date: _dt.date) -> AsyncContextManager[None]:
        """Serialize check-then-write sequences touching ``date``.

        Everything awaited inside the block (conflict lookup, code existence
        check, insert/update) must be atomic with respect to other writers of
        the same date.
        """
        raise NotImplementedError

    @abstractmethod
    async def insert(self, appointment: Appointment) -> Any:
        """Persist a new appointment and return its id.

        Raises DuplicateConfirmationCodeError if the code is already stored.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, appointment_id: Any) -> Optional[Appointment]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Appointment]:
        raise NotImplementedError

    @abstractmethod
    async def list_by_date(self, date: _dt.date) -> List[Appointment]:
        """All appointments on ``date`` regardless of status, ordered by start time."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_email(self, email: str) -> List[Appointment]:
        """Ordered by date, most recent first."""
        raise NotImplementedError

    @abstractmethod
    async def list_by_status(self, status: AppointmentStatus) -> List[Appointment]:
        """Ordered by date, earliest first."""
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> List[Appointment]:
        raise NotImplementedError

    @abstractmethod
    async def exists_by_code(self, code: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def update(self, appointment_id: Any, appointment: Appointment) -> bool:
        """Replace the time and customer details. Returns False if the id is unknown.

        Status, confirmation code and created_at keep their stored values; only
        ``set_status`` changes the status.
        """
        raise NotImplementedError

    @abstractmethod
    async def set_status(
        self,
        appointment_id: Any,
        status: AppointmentStatus,
        updated_at: _dt.datetime,
    ) -> bool:
        """Write a new status and updated_at. Returns False if the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, appointment_id: Any) -> bool:
        """Remove the appointment. Returns False if the id is unknown."""
        raise NotImplementedError
