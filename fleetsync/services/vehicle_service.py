"""
Authoritative vehicle state.

VehicleStore owns every vehicle mutation: it merges partial updates, stamps
last_updated / updated_by, and writes one audit entry per field whose value
actually changed. The row and its audit entries go to storage in a single call,
so a failed write leaves neither behind.
Storage calls run in worker threads; updates to the same vehicle id are
serialised by a per-id asyncio.Lock that is dropped once nobody holds or awaits it.
"""

import asyncio
import uuid
from collections import Counter
from contextlib import asynccontextmanager
from datetime import datetime
from enum import Enum
from typing import Optional

from fleetsync.schemas.audit import AuditAction
from fleetsync.schemas.operator import OperatorRef
from fleetsync.schemas.vehicle import VehicleCreate, VehicleOut, VehicleUpdate
from fleetsync.services.audit_service import AuditLedger
from fleetsync.services.storage import FleetStorage
from fleetsync.utils.logger import get_logger

logger = get_logger(__name__)

# Fields a client may explicitly clear with null; null for any other field is dropped
NULLABLE_FIELDS = {"plate", "notes"}


def audit_value(value) -> str:
    """Stringify a field value for the audit trail. None becomes ""."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def audit_action_for(field: str) -> AuditAction:
    # Coarse three-way rule: status, notes, and everything else
    if field == "status":
        return AuditAction.STATUS_CHANGE
    if field == "notes":
        return AuditAction.NOTES_UPDATE
    return AuditAction.LOCATION_CHANGE


class VehicleStore:
    def __init__(self, storage: FleetStorage, ledger: AuditLedger):
        self._storage = storage
        self._ledger = ledger
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: Counter = Counter()

    async def get(self, vehicle_id: str) -> Optional[VehicleOut]:
        return await asyncio.to_thread(self._storage.get_vehicle, vehicle_id)

    async def list_all(self) -> list[VehicleOut]:
        """All vehicles, ordered by name."""
        return await asyncio.to_thread(self._storage.get_all_vehicles)

    async def count(self) -> int:
        return await asyncio.to_thread(self._storage.count_vehicles)

    async def ping(self):
        await asyncio.to_thread(self._storage.ping)

    @asynccontextmanager
    async def _vehicle_lock(self, vehicle_id: str):
        lock = self._locks.setdefault(vehicle_id, asyncio.Lock())
        self._lock_users[vehicle_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[vehicle_id] -= 1
            if not self._lock_users[vehicle_id]:
                del self._lock_users[vehicle_id]
                del self._locks[vehicle_id]

    async def create(self, data: VehicleCreate, operator: OperatorRef) -> VehicleOut:
        vehicle = VehicleOut(
            id=str(uuid.uuid4()),
            **data.model_dump(),
            last_updated=datetime.utcnow(),
            updated_by=operator.name,
        )
        entry = self._ledger.stamp(
            vehicle_id=vehicle.id,
            vehicle_name=vehicle.name,
            action=AuditAction.CREATED,
            field="status",
            old_value="",
            new_value=audit_value(vehicle.status),
            operator=operator,
        )
        await asyncio.to_thread(self._storage.insert_vehicle, vehicle, [entry])
        self._ledger.log_committed([entry])
        logger.info(f"[FLEET] Created {vehicle.name} ({vehicle.type.value} @ {vehicle.location}) "
                    f"by {operator.name}")
        return vehicle

    async def update(self, vehicle_id: str, changes: VehicleUpdate,
                     operator: OperatorRef) -> Optional[VehicleOut]:
        """
        Apply a partial update. Returns None when the id is unknown.
        last_updated / updated_by are stamped even when nothing else changes.
        """
        async with self._vehicle_lock(vehicle_id):
            current = await asyncio.to_thread(self._storage.get_vehicle, vehicle_id)
            if current is None:
                logger.warning(f"[FLEET] Update for unknown vehicle {vehicle_id} by {operator.name}")
                return None

            fields = {
                key: value
                for key, value in changes.model_dump(exclude_unset=True).items()
                if value is not None or key in NULLABLE_FIELDS
            }
            stamp = {"last_updated": datetime.utcnow(), "updated_by": operator.name}
            updated = current.model_copy(update={**fields, **stamp})

            entries = []
            for field in fields:
                old_value = audit_value(getattr(current, field))
                new_value = audit_value(getattr(updated, field))
                if old_value == new_value:
                    continue
                entries.append(self._ledger.stamp(
                    vehicle_id=vehicle_id,
                    vehicle_name=current.name,
                    action=audit_action_for(field),
                    field=field,
                    old_value=old_value,
                    new_value=new_value,
                    operator=operator,
                ))

            written = await asyncio.to_thread(
                self._storage.update_vehicle, vehicle_id, {**fields, **stamp}, entries,
            )
            if not written:
                # Row vanished between read and write
                return None

        self._ledger.log_committed(entries)
        logger.info(f"[FLEET] Updated {updated.name} ({', '.join(fields) or 'touch'}) by {operator.name}")
        return updated

    async def seed_if_empty(self, records: list[VehicleCreate]) -> int:
        """Insert `records` as the starting fleet when the store is empty. No audit entries."""
        existing = await self.count()
        if existing:
            logger.info(f"📊 Store already contains {existing} vehicles")
            return 0

        now = datetime.utcnow()
        for record in records:
            await asyncio.to_thread(self._storage.insert_vehicle, VehicleOut(
                id=str(uuid.uuid4()),
                **record.model_dump(),
                last_updated=now,
                updated_by="system",
            ))
        logger.info(f"🌱 Seeded {len(records)} default vehicles")
        return len(records)
