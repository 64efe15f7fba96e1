"""Data version endpoints used by clients to detect stale views."""
import logging

from fastapi import APIRouter, Depends, WebSocketDisconnect
from starlette.websockets import WebSocket

from clubledger.dependencies import get_change_notifier
from clubledger.services import ChangeNotifier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/version")
async def get_version(notifier: ChangeNotifier = Depends(get_change_notifier)):
    """Current data version; refetch whenever it changes."""
    return {"version": notifier.version}


@router.websocket("/version/ws")
async def version_updates(websocket: WebSocket):
    """
    Push each new data version to the client.

    Message format:
        {"version": 42}

    The current version is sent immediately after the connection is accepted.
    """
    notifier: ChangeNotifier = websocket.app.state.change_notifier
    await websocket.accept()
    queue = notifier.subscribe()
    logger.debug(f"Version subscriber connected ({notifier.subscriber_count} open)")
    try:
        await websocket.send_json({"version": notifier.version})
        while True:
            version = await queue.get()
            await websocket.send_json({"version": version})
    except WebSocketDisconnect:
        logger.debug("Version subscriber disconnected")
    finally:
        notifier.unsubscribe(queue)
