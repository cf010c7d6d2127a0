"""
System health check endpoint.
Returns status of backend + storage + live sync connections.
"""

from fastapi import APIRouter, Depends
from fleetsync.config import settings
from fleetsync.services.sync_hub import SyncHub, get_hub
from datetime import datetime

router = APIRouter()


@router.get("/health", summary="System health check")
async def health_check(hub: SyncHub = Depends(get_hub)):
    """
    Returns:
    - Backend status
    - Storage connectivity and vehicle count
    - Number of live WebSocket connections
    """
    result = {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat(),
        "backend": "ok",
        "storage": "unknown",
        "storage_backend": settings.STORAGE_BACKEND,
        "vehicles": None,
        "connections": hub.connection_count,
    }

    try:
        await hub.store.ping()
        result["vehicles"] = await hub.store.count()
        result["storage"] = "ok"
    except Exception as e:
        result["storage"] = f"error: {str(e)}"
        result["status"] = "degraded"

    return result
