"""
reservations.infra.database – PostgreSQL async engine, session, model, repository and store.

Public API
──────────
  build_engine, build_session_factory, session_scope, init_db, close_engine
  Base, AppointmentRecord (models)
  BaseRepository, AppointmentRepository
  SqlAppointmentStore
"""
from reservations.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    init_db,
    session_scope,
)
from reservations.infra.database.models import AppointmentRecord, Base
from reservations.infra.database.repositories import AppointmentRepository, BaseRepository
from reservations.infra.database.store import SqlAppointmentStore

__all__ = [
    "build_engine",
    "build_session_factory",
    "session_scope",
    "init_db",
    "close_engine",
    "Base",
    "AppointmentRecord",
    "BaseRepository",
    "AppointmentRepository",
    "SqlAppointmentStore",
]
