"""Services: orchestration over the scheduling core and an AppointmentStore."""
from reservations.services.scheduling_service import SchedulingService

__all__ = ["SchedulingService"]
