"""Vehicle read endpoints — edits go through the WebSocket sync channel."""

from fastapi import APIRouter, Depends, HTTPException
from fleetsync.schemas.vehicle import VehicleOut, VehicleStatus, VehicleType
from fleetsync.services.sync_hub import SyncHub, get_hub
from typing import Optional

router = APIRouter()


@router.get("/vehicles", response_model=list[VehicleOut], summary="List all vehicles")
async def list_vehicles(vehicle_type: Optional[VehicleType] = None,
                        status: Optional[VehicleStatus] = None,
                        hub: SyncHub = Depends(get_hub)):
    """All vehicles ordered by name, optionally filtered by type and/or status."""
    vehicles = await hub.store.list_all()
    if vehicle_type:
        vehicles = [v for v in vehicles if v.type == vehicle_type]
    if status:
        vehicles = [v for v in vehicles if v.status == status]
    return vehicles


@router.get("/vehicles/{vehicle_id}", response_model=VehicleOut, summary="Get one vehicle")
async def get_vehicle(vehicle_id: str, hub: SyncHub = Depends(get_hub)):
    vehicle = await hub.store.get(vehicle_id)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle
