"""
Audit ledger — append-only record of vehicle field changes.
Entries are immutable once written and always read newest first.
Retention depends on the storage backend (bounded in memory, unbounded in SQL).

Vehicle mutations do not go through append(): VehicleStore stamps its entries here
and hands them to the storage call that writes the vehicle row, so the change and
its history commit together.
"""

import asyncio
import uuid
from datetime import datetime

from fleetsync.config import settings
from fleetsync.schemas.audit import AuditAction, AuditEntryOut
from fleetsync.schemas.operator import OperatorRef
from fleetsync.services.storage import FleetStorage
from fleetsync.utils.logger import get_logger

logger = get_logger(__name__)


class AuditLedger:
    def __init__(self, storage: FleetStorage):
        self._storage = storage

    def stamp(self, vehicle_id: str, vehicle_name: str, action: AuditAction,
              field: str, old_value: str, new_value: str,
              operator: OperatorRef) -> AuditEntryOut:
        """Build a new entry with a fresh id and the current time. Nothing is stored."""
        return AuditEntryOut(
            id=str(uuid.uuid4()),
            vehicle_id=vehicle_id,
            vehicle_name=vehicle_name,
            action=action,
            field=field,
            old_value=old_value,
            new_value=new_value,
            timestamp=datetime.utcnow(),
            user_id=operator.id,
            user_name=operator.name,
        )

    async def append(self, vehicle_id: str, vehicle_name: str, action: AuditAction,
                     field: str, old_value: str, new_value: str,
                     operator: OperatorRef) -> AuditEntryOut:
        """Stamp id + timestamp on a new entry and persist it."""
        entry = self.stamp(vehicle_id, vehicle_name, action, field, old_value, new_value, operator)
        await asyncio.to_thread(self._storage.insert_audit_entry, entry)
        self.log_committed([entry])
        return entry

    def log_committed(self, entries: list[AuditEntryOut]):
        for entry in entries:
            logger.info(f"[AUDIT] {entry.action.value} {entry.vehicle_name}.{entry.field}: "
                        f"'{entry.old_value}' → '{entry.new_value}' by {entry.user_name}")

    async def recent(self, limit: int = settings.AUDIT_DEFAULT_LIMIT) -> list[AuditEntryOut]:
        """Newest-first window of at most `limit` entries."""
        if limit <= 0:
            return []
        return await asyncio.to_thread(self._storage.get_recent_audit, limit)
