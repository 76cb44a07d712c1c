from reservations.infra.memory.store import InMemoryAppointmentStore

__all__ = ["InMemoryAppointmentStore"]
