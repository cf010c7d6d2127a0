"""
Real-time sync channel.
WS /ws — every frame is {"event": <name>, "data": {...}} in both directions.
Each socket gets a fresh connection id; inbound frames are handed to the SyncHub.
"""

import uuid

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from fleetsync.schemas.sync import SyncMessage
from fleetsync.services.sync_hub import SyncHub
from fleetsync.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


class WebSocketObserver:
    """Outbound side of one socket as seen by the hub."""

    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    async def send(self, event: str, data: dict):
        await self.websocket.send_json(SyncMessage(event=event, data=data).model_dump())


@router.websocket("/ws")
async def sync_socket(websocket: WebSocket):
    hub: SyncHub = websocket.app.state.hub
    connection_id = str(uuid.uuid4())
    await websocket.accept()
    await hub.connect(connection_id, WebSocketObserver(websocket))

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = SyncMessage.model_validate_json(raw)
            except ValidationError:
                logger.warning(f"[SYNC] Malformed frame from {connection_id}: {raw!r}")
                await websocket.send_json({"event": "error", "data": {"message": "Malformed message"}})
                continue
            await hub.dispatch(connection_id, message.event, message.data)
    except WebSocketDisconnect:
        pass
    finally:
        await hub.disconnect(connection_id)
