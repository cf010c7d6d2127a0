"""
SyncHub — real-time coordination between connected operators.

Every inbound intent (join, update, create, auditRequest, disconnect) is handled
under one hub-wide lock, so the fleet has a single logical timeline per process.
Broadcast payloads are computed from reads made after the mutation is persisted,
and all of them are built before the first one is sent.

Per-connection state: UNJOINED → join → JOINED → disconnect → (gone)

Outbound events:
  initialSnapshot{vehicles, groups, auditHistory}   → joiner only
  vehicleUpdated{vehicle, groups}                   → everyone
  vehicleCreated{vehicle, groups}                   → everyone
  auditUpdate{auditHistory}                         → everyone
  auditHistory{auditHistory}                        → requester only
  presenceUpdate{operators}                         → everyone
  error{message}                                    → originator only
"""

import asyncio
from enum import Enum
from typing import Any, Optional, Protocol

from fastapi import Request
from pydantic import ValidationError

from fleetsync.config import settings
from fleetsync.schemas.operator import OperatorOut, OperatorRef
from fleetsync.schemas.sync import AuditRequestIntent, CreateIntent, JoinIntent, UpdateIntent
from fleetsync.services.audit_service import AuditLedger
from fleetsync.services.errors import (
    FleetSyncError, InvalidIntentError, NotJoinedError, VehicleNotFoundError,
)
from fleetsync.services.group_service import build_groups
from fleetsync.services.presence_service import Operator, PresenceTracker
from fleetsync.services.vehicle_service import VehicleStore
from fleetsync.utils.logger import get_logger

logger = get_logger(__name__)


class Observer(Protocol):
    """Outbound handle of one connection (a WebSocket in production)."""

    async def send(self, event: str, data: dict[str, Any]) -> None: ...


class ConnectionState(str, Enum):
    UNJOINED = "unjoined"
    JOINED = "joined"


def _dump(models) -> list[dict]:
    return [m.model_dump(mode="json", by_alias=True) for m in models]


def operator_out(operator: Operator) -> OperatorOut:
    return OperatorOut(
        id=operator.id,
        name=operator.name,
        connection_id=operator.connection_id,
        last_active=operator.last_active,
    )


class SyncHub:
    def __init__(self, store: VehicleStore, ledger: AuditLedger, presence: PresenceTracker,
                 audit_window: int = settings.AUDIT_WINDOW,
                 require_join: bool = settings.REQUIRE_JOIN_FOR_EDITS,
                 send_timeout: float = settings.SEND_TIMEOUT_SECONDS):
        self.store = store
        self.ledger = ledger
        self.presence = presence
        self.audit_window = audit_window
        self.require_join = require_join
        self.send_timeout = send_timeout
        self._observers: dict[str, Observer] = {}
        self._states: dict[str, ConnectionState] = {}
        self._lock = asyncio.Lock()
        self._handlers = {
            "join": self._handle_join,
            "update": self._handle_update,
            "create": self._handle_create,
            "auditRequest": self._handle_audit_request,
        }

    def start(self):
        """Drop presence left over from a previous run."""
        self.presence.clear()

    @property
    def connection_count(self) -> int:
        return len(self._observers)

    def state_of(self, connection_id: str) -> Optional[ConnectionState]:
        return self._states.get(connection_id)

    # ── Connection lifecycle ────────────────────────────────────────────────

    async def connect(self, connection_id: str, observer: Observer):
        async with self._lock:
            self._observers[connection_id] = observer
            self._states[connection_id] = ConnectionState.UNJOINED
        logger.info(f"[SYNC] Connection opened: {connection_id} ({self.connection_count} live)")

    async def disconnect(self, connection_id: str):
        async with self._lock:
            self._observers.pop(connection_id, None)
            self._states.pop(connection_id, None)
            operator = self.presence.leave(connection_id)
            if operator:
                await self._broadcast("presenceUpdate", self._presence_payload())
        logger.info(f"[SYNC] Connection closed: {connection_id} ({self.connection_count} live)")

    # ── Intent handling ─────────────────────────────────────────────────────

    async def dispatch(self, connection_id: str, event: str, data: Optional[dict] = None):
        """Run one inbound intent. Failures become an error event for the sender only."""
        async with self._lock:
            try:
                handler = self._handlers.get(event)
                if handler is None:
                    raise InvalidIntentError(f"Unknown event '{event}'")
                self.presence.touch(connection_id)
                await handler(connection_id, data or {})
            except ValidationError as e:
                logger.warning(f"[SYNC] Invalid {event} payload from {connection_id}: {e}")
                await self._send_error(connection_id, f"Invalid {event} payload")
            except FleetSyncError as e:
                logger.warning(f"[SYNC] {event} from {connection_id} rejected: {e}")
                await self._send_error(connection_id, str(e))
            except Exception as e:
                logger.error(f"[SYNC] {event} from {connection_id} failed: {e}", exc_info=True)
                await self._send_error(connection_id, f"Failed to process {event}")

    async def _handle_join(self, connection_id: str, data: dict):
        intent = JoinIntent.model_validate(data)
        displaced = [op.connection_id for op in self.presence.list()
                     if op.name == intent.name and op.connection_id != connection_id]
        operator = self.presence.join(intent.name, connection_id)
        self._states[connection_id] = ConnectionState.JOINED
        for other in displaced:
            # The older socket lost its identity; it has to join again to edit
            if other in self._states:
                self._states[other] = ConnectionState.UNJOINED
                await self._send_error(other, f"{intent.name} joined from another connection")

        await self._send(connection_id, "initialSnapshot", await self.snapshot())
        await self._broadcast("presenceUpdate", self._presence_payload())
        logger.info(f"[SYNC] {operator.name} joined ({len(self.presence.list())} online)")

    async def _handle_update(self, connection_id: str, data: dict):
        intent = UpdateIntent.model_validate(data)
        actor = self._acting_operator(connection_id, intent.operator_id, intent.operator_name)

        vehicle = await self.store.update(intent.vehicle_id, intent.fields, actor)
        if vehicle is None:
            raise VehicleNotFoundError(intent.vehicle_id)

        groups = build_groups(await self.store.list_all())
        audit = await self.ledger.recent(self.audit_window)
        await self._broadcast("vehicleUpdated", {
            "vehicle": vehicle.model_dump(mode="json", by_alias=True),
            "groups": _dump(groups),
        })
        await self._broadcast("auditUpdate", {"auditHistory": _dump(audit)})
        logger.info(f"[SYNC] Vehicle {vehicle.name} updated by {actor.name}")

    async def _handle_create(self, connection_id: str, data: dict):
        intent = CreateIntent.model_validate(data)
        actor = self._acting_operator(connection_id, intent.operator_id, intent.operator_name)

        vehicle = await self.store.create(intent.fields, actor)

        groups = build_groups(await self.store.list_all())
        audit = await self.ledger.recent(self.audit_window)
        await self._broadcast("vehicleCreated", {
            "vehicle": vehicle.model_dump(mode="json", by_alias=True),
            "groups": _dump(groups),
        })
        await self._broadcast("auditUpdate", {"auditHistory": _dump(audit)})
        logger.info(f"[SYNC] Vehicle {vehicle.name} created by {actor.name}")

    async def _handle_audit_request(self, connection_id: str, data: dict):
        intent = AuditRequestIntent.model_validate(data)
        history = await self.ledger.recent(intent.limit or settings.AUDIT_DEFAULT_LIMIT)
        await self._send(connection_id, "auditHistory", {"auditHistory": _dump(history)})

    def _acting_operator(self, connection_id: str, operator_id: Optional[str],
                         operator_name: Optional[str]) -> OperatorRef:
        if self.require_join and self._states.get(connection_id) != ConnectionState.JOINED:
            raise NotJoinedError("Join before editing the fleet")

        joined = self.presence.by_connection(connection_id)
        operator_id = operator_id or (joined.id if joined else None)
        operator_name = operator_name or (joined.name if joined else None)
        if not operator_id or not operator_name:
            raise InvalidIntentError("Join first or send operatorId and operatorName")
        return OperatorRef(id=operator_id, name=operator_name)

    # ── Reads ───────────────────────────────────────────────────────────────

    async def snapshot(self) -> dict[str, Any]:
        vehicles = await self.store.list_all()
        audit = await self.ledger.recent(self.audit_window)
        return {
            "vehicles": _dump(vehicles),
            "groups": _dump(build_groups(vehicles)),
            "auditHistory": _dump(audit),
        }

    def operators(self) -> list[OperatorOut]:
        return [operator_out(op) for op in self.presence.list()]

    def _presence_payload(self) -> dict[str, Any]:
        return {"operators": _dump(self.operators())}

    # ── Fan-out ─────────────────────────────────────────────────────────────

    async def _send(self, connection_id: str, event: str, data: dict[str, Any]):
        observer = self._observers.get(connection_id)
        if observer is None:
            return
        try:
            await asyncio.wait_for(observer.send(event, data), self.send_timeout)
        except asyncio.TimeoutError:
            # Stalled reader: stop delivering to it so the hub lock is released
            self._observers.pop(connection_id, None)
            logger.warning(f"[SYNC] {connection_id} stalled on {event} for {self.send_timeout}s, dropped")
        except Exception as e:
            logger.warning(f"[SYNC] Could not deliver {event} to {connection_id}: {e}")

    async def _send_error(self, connection_id: str, message: str):
        await self._send(connection_id, "error", {"message": message})

    async def _broadcast(self, event: str, data: dict[str, Any]):
        # Best effort: a dead peer is logged and skipped, a stalled one is dropped
        for connection_id in list(self._observers):
            await self._send(connection_id, event, data)


def get_hub(request: Request) -> SyncHub:
    """FastAPI dependency — the hub built at startup."""
    return request.app.state.hub


def build_hub(storage) -> SyncHub:
    ledger = AuditLedger(storage)
    store = VehicleStore(storage, ledger)
    return SyncHub(store, ledger, PresenceTracker())
