"""
DualPane application.

Serves the two-pane browser state over HTTP and pushes notices and copy
progress to clients over a WebSocket at /ws.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from dualpane.config import Settings, load_settings
from dualpane.routers import copy, notices, panes, search
from dualpane.services.notices import Notifier
from dualpane.services.workspace import Workspace
from dualpane.websocket import ConnectionManager

logger = logging.getLogger(__name__)


def create_app(workspace: Optional[Workspace] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application around a workspace.

    Args:
        workspace: Workspace to serve (defaults to one backed by the real file system)
        settings: Settings to use (defaults to the environment)

    Returns:
        Configured FastAPI app; both panes are pointed at the home directory on startup
    """
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level.upper())

    manager = ConnectionManager()
    if workspace is None:
        notifier = Notifier(broadcast=manager.broadcast, duration_ms=settings.notice_duration_ms)
        workspace = Workspace.from_settings(settings, notifier=notifier)
    elif workspace.notifier.broadcast is None:
        workspace.notifier.broadcast = manager.broadcast

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await workspace.initialize()
        logger.info("DualPane ready")
        yield

    app = FastAPI(title="DualPane", lifespan=lifespan)
    app.state.workspace = workspace
    app.state.manager = manager

    app.include_router(panes.router)
    app.include_router(copy.router)
    app.include_router(search.router)
    app.include_router(notices.router)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await manager.connect(websocket)
        try:
            while True:
                # Clients only listen; drain anything they send
                await websocket.receive_text()
        except WebSocketDisconnect:
            manager.disconnect(websocket)

    return app


app = create_app()
