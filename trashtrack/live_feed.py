"""WebSocket ConnectionManager for the live report feed."""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from trashtrack.models.report import WasteReport

logger = logging.getLogger(__name__)


@dataclass
class ConnectionManager:
    """Tracks dashboard/worker sockets and fans report events out to them."""

    connections: set[Any] = field(default_factory=set)
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def connect(self, websocket: Any) -> None:
        async with self._lock:
            self.connections.add(websocket)

    async def disconnect(self, websocket: Any) -> None:
        async with self._lock:
            self.connections.discard(websocket)

    async def broadcast(self, message: dict[str, Any]) -> None:
        dead: set[Any] = set()
        async with self._lock:
            conns = set(self.connections)
        for ws in conns:
            try:
                await ws.send_json(message)
            except Exception:
                dead.add(ws)
        if dead:
            logger.info("Dropping %d dead live-feed connection(s)", len(dead))
        for ws in dead:
            async with self._lock:
                self.connections.discard(ws)


connection_manager = ConnectionManager()


async def broadcast_report_event(event_type: str, report: WasteReport) -> None:
    await connection_manager.broadcast({
        "type": event_type,
        "report": report.model_dump(mode="json"),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    })
