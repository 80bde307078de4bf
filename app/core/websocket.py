"""
WebSocket manager for live admin views.
Pushes user removals to connected admin dashboards over Socket.IO.
"""
import logging
from typing import Dict, Set

import socketio

from app.config import settings
from app.core.security import decode_token, SecurityException

logger = logging.getLogger(__name__)

ADMIN_ROOM = "admins"


class ConnectionManager:
    """
    WebSocket connection manager using Socket.IO.

    Admin clients authenticate with their access token in the handshake and
    are placed in the admin room, which receives removal events.
    """

    def __init__(self):
        """Initialize the connection manager."""
        cors_origins = settings.get_allowed_origins_list() or "*"
        self.sio = socketio.AsyncServer(
            async_mode="asgi",
            cors_allowed_origins=cors_origins,
            logger=False,
            engineio_logger=False,
        )

        # Track connections: {sid: user_id}
        self.connections: Dict[str, str] = {}

        # Admin sessions in the admin room
        self.admin_sessions: Set[str] = set()

        self._setup_handlers()

    def _setup_handlers(self):
        """Setup Socket.IO event handlers."""

        @self.sio.event
        async def connect(sid, environ, auth):
            """Accept clients with a valid access token."""
            token = auth.get("token") if auth else None
            if not token:
                logger.warning(f"Connection rejected - no token: {sid}")
                return False

            try:
                payload = decode_token(token)
            except SecurityException as e:
                logger.warning(f"Connection rejected - {e.detail}: {sid}")
                return False

            user_id = payload.get("sub")
            if not user_id:
                logger.warning(f"Connection rejected - token without subject: {sid}")
                return False

            self.connections[sid] = user_id
            if payload.get("is_admin"):
                await self.sio.enter_room(sid, ADMIN_ROOM)
                self.admin_sessions.add(sid)

            logger.info(f"Client connected: {sid} (user {user_id})")
            return True

        @self.sio.event
        async def disconnect(sid):
            """Forget a disconnected client."""
            self.connections.pop(sid, None)
            self.admin_sessions.discard(sid)
            logger.info(f"Client disconnected: {sid}")

    async def broadcast_user_removed(self, user_id: str) -> None:
        """
        Tell connected admin views that a user is gone.

        Registered as a removal listener; only called after a removal completed.

        Args:
            user_id: Id of the removed user
        """
        await self.sio.emit("user_removed", {"user_id": str(user_id)}, room=ADMIN_ROOM)

    def get_asgi_app(self, fastapi_app):
        """
        Get the ASGI app for Socket.IO wrapping FastAPI.

        Socket.IO handles /socket.io/* and FastAPI handles everything else.
        """
        return socketio.ASGIApp(self.sio, fastapi_app)


# Global connection manager instance
connection_manager = ConnectionManager()
