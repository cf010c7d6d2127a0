"""Vehicle groups (type + location) with availability counts."""

from fastapi import APIRouter, Depends
from fleetsync.schemas.vehicle import VehicleGroupOut
from fleetsync.services.group_service import build_groups
from fleetsync.services.sync_hub import SyncHub, get_hub

router = APIRouter()


@router.get("/groups", response_model=list[VehicleGroupOut], summary="Groups with availability counts")
async def list_groups(hub: SyncHub = Depends(get_hub)):
    return build_groups(await hub.store.list_all())
