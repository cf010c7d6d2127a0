from fastapi import APIRouter, Depends, Query
from fleetsync.config import settings
from fleetsync.schemas.audit import AuditEntryOut
from fleetsync.services.sync_hub import SyncHub, get_hub

router = APIRouter()


@router.get("/audit", response_model=list[AuditEntryOut], summary="Recent audit history, newest first")
async def get_audit_history(limit: int = Query(settings.AUDIT_DEFAULT_LIMIT, ge=1),
                            hub: SyncHub = Depends(get_hub)):
    return await hub.ledger.recent(limit)
