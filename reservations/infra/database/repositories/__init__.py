"""Repositories for the reservations database."""
from reservations.infra.database.repositories.appointment import AppointmentRepository
from reservations.infra.database.repositories.base import BaseRepository

__all__ = [
    "BaseRepository",
    "AppointmentRepository",
]
