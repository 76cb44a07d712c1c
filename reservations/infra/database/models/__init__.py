"""
reservations.infra.database.models – SQLAlchemy 2.0 ORM models.
"""
from reservations.infra.database.models.appointment import CODE_UNIQUE_INDEX, AppointmentRecord
from reservations.infra.database.models.base import Base, _uuid_pk

__all__ = [
    "Base",
    "_uuid_pk",
    "AppointmentRecord",
    "CODE_UNIQUE_INDEX",
]
