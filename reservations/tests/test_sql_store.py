"""Unit tests for SqlAppointmentStore with a mocked AsyncSession (no database)."""
from __future__ import annotations

import asyncio
import unittest
import uuid
from datetime import date, datetime, time, timezone
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.exc import IntegrityError

from reservations.core.exceptions import DuplicateConfirmationCodeError
from reservations.infra.database.repositories.appointment import DATE_LOCK_NAMESPACE
from reservations.infra.database.store import (
    SqlAppointmentStore,
    appointment_to_row,
    record_to_appointment,
)
from reservations.scheduling.types import Appointment, AppointmentStatus

DAY = date(2030, 1, 10)
CREATED = datetime(2030, 1, 1, tzinfo=timezone.utc)


def _run(coro):
    return asyncio.run(coro)


def _fake_record(**kwargs):
    defaults = {
        "id": uuid.uuid4(),
        "customer_name": "Ana",
        "contact_email": "ana@example.com",
        "contact_phone": "600123456",
        "date": DAY,
        "start_time": time(10, 0),
        "end_time": time(11, 0),
        "service_label": "Haircut",
        "price": Decimal("20.00"),
        "notes": None,
        "confirmation_code": "APT-AB12",
        "status": "confirmed",
        "created_at": CREATED,
        "updated_at": CREATED,
        "deleted_at": None,
    }
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


def _appointment(**kwargs) -> Appointment:
    return record_to_appointment(_fake_record(**kwargs))


def _nested_cm():
    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=None)
    cm.__aexit__ = AsyncMock(return_value=False)
    return cm


def _make_store():
    session = MagicMock()
    session.execute = AsyncMock()
    session.begin_nested = MagicMock(return_value=_nested_cm())
    return SqlAppointmentStore(session), session


class TestMapping(unittest.TestCase):
    def test_record_to_appointment(self) -> None:
        appt = _appointment()
        self.assertEqual(appt.status, AppointmentStatus.CONFIRMED)
        self.assertEqual(appt.confirmation_code, "APT-AB12")
        self.assertEqual(appt.duration_minutes, 60)

    def test_appointment_to_row(self) -> None:
        row = appointment_to_row(_appointment(status="cancelled"))
        self.assertEqual(row["status"], "cancelled")
        self.assertEqual(row["confirmation_code"], "APT-AB12")
        self.assertEqual(row["created_at"], CREATED)
        self.assertNotIn("id", row)


class TestSqlAppointmentStore(unittest.TestCase):
    def test_atomic_takes_advisory_lock(self) -> None:
        store, session = _make_store()

        async def go():
            async with store.atomic(DAY):
                pass

        _run(go())
        session.execute.assert_awaited_once()
        stmt, params = session.execute.call_args.args
        self.assertIn("pg_advisory_xact_lock", str(stmt))
        self.assertEqual(params, {"namespace": DATE_LOCK_NAMESPACE, "day": DAY.toordinal()})

    def test_insert_returns_id(self) -> None:
        store, session = _make_store()
        record = _fake_record()
        store._repo.create = AsyncMock(return_value=record)
        self.assertEqual(_run(store.insert(_appointment())), record.id)
        session.begin_nested.assert_called_once()
        self.assertEqual(store._repo.create.call_args.args[0]["confirmation_code"], "APT-AB12")

    def test_insert_duplicate_code(self) -> None:
        store, _ = _make_store()
        orig = Exception('duplicate key value violates unique constraint "uq_appointments_confirmation_code"')
        store._repo.create = AsyncMock(side_effect=IntegrityError("INSERT", {}, orig))
        with self.assertRaises(DuplicateConfirmationCodeError) as ctx:
            _run(store.insert(_appointment()))
        self.assertEqual(ctx.exception.details, {"confirmation_code": "APT-AB12"})

    def test_insert_other_integrity_error_propagates(self) -> None:
        store, _ = _make_store()
        orig = Exception('new row violates check constraint "ck_appointments_price_nonnegative"')
        store._repo.create = AsyncMock(side_effect=IntegrityError("INSERT", {}, orig))
        with self.assertRaises(IntegrityError):
            _run(store.insert(_appointment()))

    def test_get_by_id_missing(self) -> None:
        store, _ = _make_store()
        store._repo.get_live = AsyncMock(return_value=None)
        self.assertIsNone(_run(store.get_by_id(uuid.uuid4())))

    def test_list_by_status_maps_records(self) -> None:
        store, _ = _make_store()
        store._repo.list_by_status = AsyncMock(return_value=[_fake_record(), _fake_record()])
        result = _run(store.list_by_status(AppointmentStatus.CONFIRMED))
        self.assertEqual(len(result), 2)
        store._repo.list_by_status.assert_awaited_once_with("confirmed")

    def test_update_skips_identity_and_status_columns(self) -> None:
        store, _ = _make_store()
        record = _fake_record()
        store._repo.get_live = AsyncMock(return_value=record)
        store._repo.update = AsyncMock(return_value=record)
        self.assertTrue(_run(store.update(record.id, _appointment(status="completed"))))
        data = store._repo.update.call_args.args[1]
        self.assertNotIn("status", data)
        self.assertEqual(data["start_time"], time(10, 0))
        self.assertNotIn("confirmation_code", data)
        self.assertNotIn("created_at", data)

    def test_set_status_writes_only_status(self) -> None:
        store, _ = _make_store()
        record = _fake_record()
        store._repo.get_live = AsyncMock(return_value=record)
        store._repo.update = AsyncMock(return_value=record)
        changed_at = datetime(2030, 1, 2, tzinfo=timezone.utc)
        self.assertTrue(_run(store.set_status(record.id, AppointmentStatus.CANCELLED, changed_at)))
        store._repo.update.assert_awaited_once_with(record.id, {"status": "cancelled", "updated_at": changed_at})

    def test_lookup_reloads_rows_the_session_already_holds(self) -> None:
        store, session = _make_store()
        record = _fake_record()
        session.get = AsyncMock(return_value=record)
        self.assertEqual(_run(store.get_by_id(record.id)).id, record.id)
        self.assertTrue(session.get.call_args.kwargs["populate_existing"])

    def test_string_id_is_parsed(self) -> None:
        store, _ = _make_store()
        record = _fake_record()
        store._repo.get_live = AsyncMock(return_value=record)
        self.assertEqual(_run(store.get_by_id(str(record.id))).id, record.id)
        store._repo.get_live.assert_awaited_once_with(record.id)

    def test_malformed_id_matches_nothing(self) -> None:
        store, session = _make_store()
        store._repo.get_live = AsyncMock()
        store._repo.update = AsyncMock()
        for bad in ("not-a-uuid", 42, None):
            with self.subTest(id=bad):
                self.assertIsNone(_run(store.get_by_id(bad)))
                self.assertFalse(_run(store.update(bad, _appointment())))
                self.assertFalse(_run(store.set_status(bad, AppointmentStatus.CANCELLED, CREATED)))
                self.assertFalse(_run(store.delete(bad)))
        store._repo.get_live.assert_not_awaited()
        store._repo.update.assert_not_awaited()
        session.execute.assert_not_awaited()

    def test_update_missing(self) -> None:
        store, _ = _make_store()
        store._repo.get_live = AsyncMock(return_value=None)
        store._repo.update = AsyncMock()
        self.assertFalse(_run(store.update(uuid.uuid4(), _appointment())))
        store._repo.update.assert_not_awaited()

    def test_delete_is_soft(self) -> None:
        store, session = _make_store()
        session.execute.return_value = MagicMock(rowcount=1)
        self.assertTrue(_run(store.delete(uuid.uuid4())))
        stmt = session.execute.call_args.args[0]
        self.assertIn("UPDATE appointments", str(stmt))
        session.execute.return_value = MagicMock(rowcount=0)
        self.assertFalse(_run(store.delete(uuid.uuid4())))

    def test_exists_by_code(self) -> None:
        store, session = _make_store()
        session.execute.return_value = MagicMock(scalar=MagicMock(return_value=1))
        self.assertTrue(_run(store.exists_by_code("APT-AB12")))
        session.execute.return_value = MagicMock(scalar=MagicMock(return_value=None))
        self.assertFalse(_run(store.exists_by_code("APT-AB12")))
