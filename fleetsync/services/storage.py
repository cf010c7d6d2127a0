"""
Storage collaborator for the sync engine.

VehicleStore and AuditLedger only ever talk to a FleetStorage. Two backends:
  - SqlFleetStorage      → SQLAlchemy ORM over DATABASE_URL (SQLite by default)
  - InMemoryFleetStorage → process-local dicts, audit capped at AUDIT_MEMORY_LIMIT
Pick one with STORAGE_BACKEND=sql|memory.

insert_vehicle / update_vehicle take the audit entries describing the change and
write them together with the row: either both land or neither does.
"""

from collections import deque
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from itertools import islice
from typing import Any, Optional, Protocol, Sequence

from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError

from fleetsync.config import settings
from fleetsync.models.audit_entry import AuditEntry
from fleetsync.models.vehicle import Vehicle
from fleetsync.schemas.audit import AuditEntryOut
from fleetsync.schemas.vehicle import VehicleOut
from fleetsync.services.errors import StorageError
from fleetsync.utils.logger import get_logger

logger = get_logger(__name__)


class FleetStorage(Protocol):
    def get_all_vehicles(self) -> list[VehicleOut]: ...
    def get_vehicle(self, vehicle_id: str) -> Optional[VehicleOut]: ...
    def insert_vehicle(self, vehicle: VehicleOut, audit: Sequence[AuditEntryOut] = ()) -> None: ...
    def update_vehicle(self, vehicle_id: str, fields: dict[str, Any],
                       audit: Sequence[AuditEntryOut] = ()) -> bool: ...
    def count_vehicles(self) -> int: ...
    def insert_audit_entry(self, entry: AuditEntryOut) -> None: ...
    def get_recent_audit(self, limit: int) -> list[AuditEntryOut]: ...
    def ping(self) -> None: ...


def _column_value(value):
    return value.value if isinstance(value, Enum) else value


def _vehicle_out(row: Vehicle) -> VehicleOut:
    return VehicleOut(
        id=row.id,
        name=row.name,
        plate=row.plate,
        type=row.type,
        status=row.status,
        location=row.location,
        notes=row.notes,
        last_updated=row.last_updated,
        updated_by=row.updated_by,
    )


def _audit_row(entry: AuditEntryOut) -> AuditEntry:
    return AuditEntry(
        id=entry.id,
        vehicle_id=entry.vehicle_id,
        vehicle_name=entry.vehicle_name,
        action=_column_value(entry.action),
        field=entry.field,
        old_value=entry.old_value,
        new_value=entry.new_value,
        timestamp=entry.timestamp,
        user_id=entry.user_id,
        user_name=entry.user_name,
    )


def _audit_out(row: AuditEntry) -> AuditEntryOut:
    return AuditEntryOut(
        id=row.id,
        vehicle_id=row.vehicle_id,
        vehicle_name=row.vehicle_name,
        action=row.action,
        field=row.field or "",
        old_value=row.old_value or "",
        new_value=row.new_value or "",
        timestamp=row.timestamp,
        user_id=row.user_id,
        user_name=row.user_name,
    )


class SqlFleetStorage:
    """FleetStorage over SQLAlchemy sessions. One short session per call."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @contextmanager
    def _session(self, action: str):
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"[STORAGE] {action} failed: {e}")
            raise StorageError(f"{action} failed") from e
        finally:
            db.close()

    def get_all_vehicles(self) -> list[VehicleOut]:
        with self._session("load vehicles") as db:
            return [_vehicle_out(row) for row in db.query(Vehicle).order_by(Vehicle.name).all()]

    def get_vehicle(self, vehicle_id: str) -> Optional[VehicleOut]:
        with self._session(f"load vehicle {vehicle_id}") as db:
            row = db.get(Vehicle, vehicle_id)
            return _vehicle_out(row) if row else None

    def insert_vehicle(self, vehicle: VehicleOut, audit: Sequence[AuditEntryOut] = ()) -> None:
        with self._session(f"insert vehicle {vehicle.name}") as db:
            db.add(Vehicle(
                id=vehicle.id,
                name=vehicle.name,
                plate=vehicle.plate,
                type=_column_value(vehicle.type),
                status=_column_value(vehicle.status),
                location=vehicle.location,
                notes=vehicle.notes,
                last_updated=vehicle.last_updated,
                updated_by=vehicle.updated_by,
                created_at=datetime.utcnow(),
            ))
            db.add_all([_audit_row(entry) for entry in audit])

    def update_vehicle(self, vehicle_id: str, fields: dict[str, Any],
                       audit: Sequence[AuditEntryOut] = ()) -> bool:
        with self._session(f"update vehicle {vehicle_id}") as db:
            row = db.get(Vehicle, vehicle_id)
            if row is None:
                return False
            for key, value in fields.items():
                setattr(row, key, _column_value(value))
            db.add_all([_audit_row(entry) for entry in audit])
            return True

    def count_vehicles(self) -> int:
        with self._session("count vehicles") as db:
            return db.query(func.count(Vehicle.id)).scalar() or 0

    def insert_audit_entry(self, entry: AuditEntryOut) -> None:
        with self._session(f"insert audit entry for {entry.vehicle_name}") as db:
            db.add(_audit_row(entry))

    def get_recent_audit(self, limit: int) -> list[AuditEntryOut]:
        with self._session("load audit history") as db:
            rows = (
                db.query(AuditEntry)
                .order_by(AuditEntry.timestamp.desc(), AuditEntry.seq.desc())
                .limit(limit)
                .all()
            )
            return [_audit_out(row) for row in rows]

    def ping(self) -> None:
        with self._session("ping") as db:
            db.execute(text("SELECT 1"))


class InMemoryFleetStorage:
    """FleetStorage kept in process memory. Audit log is newest-first and bounded."""

    def __init__(self, audit_limit: int = settings.AUDIT_MEMORY_LIMIT):
        self._vehicles: dict[str, VehicleOut] = {}
        # appendleft + maxlen drops the oldest entry once the cap is reached
        self._audit: deque[AuditEntryOut] = deque(maxlen=audit_limit)

    def get_all_vehicles(self) -> list[VehicleOut]:
        return sorted(self._vehicles.values(), key=lambda v: v.name)

    def get_vehicle(self, vehicle_id: str) -> Optional[VehicleOut]:
        return self._vehicles.get(vehicle_id)

    def insert_vehicle(self, vehicle: VehicleOut, audit: Sequence[AuditEntryOut] = ()) -> None:
        self._audit.extendleft(audit)
        self._vehicles[vehicle.id] = vehicle

    def update_vehicle(self, vehicle_id: str, fields: dict[str, Any],
                       audit: Sequence[AuditEntryOut] = ()) -> bool:
        current = self._vehicles.get(vehicle_id)
        if current is None:
            return False
        updated = current.model_copy(update=fields)
        self._audit.extendleft(audit)
        self._vehicles[vehicle_id] = updated
        return True

    def count_vehicles(self) -> int:
        return len(self._vehicles)

    def insert_audit_entry(self, entry: AuditEntryOut) -> None:
        self._audit.appendleft(entry)

    def get_recent_audit(self, limit: int) -> list[AuditEntryOut]:
        return list(islice(self._audit, max(limit, 0)))

    def ping(self) -> None:
        return None


def build_storage(backend: Optional[str] = None) -> FleetStorage:
    """Create the storage backend named by STORAGE_BACKEND."""
    backend = (backend or settings.STORAGE_BACKEND).lower()
    if backend == "memory":
        logger.info("[STORAGE] Using in-memory storage (audit capped at "
                    f"{settings.AUDIT_MEMORY_LIMIT} entries)")
        return InMemoryFleetStorage()
    if backend == "sql":
        from fleetsync.database import SessionLocal, create_tables
        create_tables()
        logger.info(f"[STORAGE] Using SQL storage at {settings.DATABASE_URL}")
        return SqlFleetStorage(SessionLocal)
    raise ValueError(f"Unknown STORAGE_BACKEND '{backend}' (expected 'sql' or 'memory')")
