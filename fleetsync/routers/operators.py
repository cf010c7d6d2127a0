from fastapi import APIRouter, Depends
from fleetsync.schemas.operator import OperatorOut
from fleetsync.services.sync_hub import SyncHub, get_hub

router = APIRouter()


@router.get("/operators", response_model=list[OperatorOut], summary="Operators connected right now")
def list_operators(hub: SyncHub = Depends(get_hub)):
    return hub.operators()
