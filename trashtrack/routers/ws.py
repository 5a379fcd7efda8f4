"""WebSocket router: /ws/reports live feed for worker and admin dashboards."""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from trashtrack.live_feed import connection_manager

router = APIRouter(tags=["ws"])


@router.websocket("/ws/reports")
async def ws_reports(websocket: WebSocket):
    """On connect send all reports; then stream report_created / report_updated messages."""
    await websocket.accept()
    await connection_manager.connect(websocket)
    try:
        store = websocket.app.state.report_store
        await websocket.send_json({
            "type": "snapshot",
            "reports": [r.model_dump(mode="json") for r in store.list_all()],
        })
        while True:
            try:
                _ = await websocket.receive_text()
            except WebSocketDisconnect:
                break
    finally:
        await connection_manager.disconnect(websocket)
