"""
Online-user presence for the real-time channel.

One registry lives on ``app.state.presence`` for the lifetime of the process.
Entries map a user's contact key (email) to their live WebSocket. Nothing is
persisted: after a restart clients announce themselves again with ``join``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import Request, WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


class PresenceRegistry:
    def __init__(self) -> None:
        self._connections: Dict[str, WebSocket] = {}

    def add(self, user_key: str, websocket: WebSocket) -> None:
        """Register (or replace) the live connection for a user."""
        self._connections[user_key] = websocket

    def remove(self, user_key: str, websocket: Optional[WebSocket] = None) -> bool:
        """
        Drop a user's entry.

        When ``websocket`` is given the entry is only removed if it still points
        at that socket, so a stale disconnect cannot evict a newer connection.
        """
        current = self._connections.get(user_key)
        if current is None:
            return False
        if websocket is not None and current is not websocket:
            return False
        del self._connections[user_key]
        return True

    def lookup(self, user_key: str) -> Optional[WebSocket]:
        return self._connections.get(user_key)

    def is_online(self, user_key: str) -> bool:
        return user_key in self._connections

    def online_users(self) -> List[str]:
        return list(self._connections.keys())

    async def send_to(self, user_key: str, event: str, data: Any) -> bool:
        """Push one event to one user. Returns False when nobody is listening."""
        websocket = self.lookup(user_key)
        if websocket is None:
            return False
        try:
            await websocket.send_json({"event": event, "data": data})
            return True
        except (WebSocketDisconnect, RuntimeError, OSError) as exc:
            logger.warning("Dropping dead connection for %s (%s): %s", user_key, event, exc)
            self.remove(user_key, websocket)
            return False

    async def broadcast(self, event: str, data: Any) -> int:
        delivered = 0
        for user_key in self.online_users():
            if await self.send_to(user_key, event, data):
                delivered += 1
        return delivered


def get_presence(request: Request) -> PresenceRegistry:
    """FastAPI dependency returning the application's registry."""
    return request.app.state.presence
