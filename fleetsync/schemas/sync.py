# fleetsync/schemas/sync.py — WebSocket frames and inbound intents
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Any, Optional

from fleetsync.schemas.vehicle import VehicleCreate, VehicleUpdate


class SyncMessage(BaseModel):
    """Envelope of every frame in both directions: {"event": ..., "data": {...}}."""
    event: str
    data: dict[str, Any] = Field(default_factory=dict)


class _Intent(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True


class JoinIntent(_Intent):
    name: str = Field(min_length=1)


class UpdateIntent(_Intent):
    vehicle_id: str
    fields: VehicleUpdate = Field(default_factory=VehicleUpdate)
    operator_id: Optional[str] = None
    operator_name: Optional[str] = None


class CreateIntent(_Intent):
    fields: VehicleCreate
    operator_id: Optional[str] = None
    operator_name: Optional[str] = None


class AuditRequestIntent(_Intent):
    limit: Optional[int] = Field(default=None, ge=1)
