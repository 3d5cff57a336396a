"""FastAPI HTTP server exposing the tag graph to editor clients."""

import asyncio
import logging
import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from .. import __version__
from ..config import TagTreeConfig
from ..core import GRAPH_CHANGED, EventKind, FileEvent, NodeNotFoundError, TagTreeError
from ..workspace import Workspace
from .websocket import ConnectionManager

# Configure logging
log_level = os.getenv("TAGTREE_LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    stream=sys.stderr
)
logger = logging.getLogger(__name__)


# ============================================================================
# Request/Response Models
# ============================================================================

class DropRequest(BaseModel):
    """Request to merge dragged nodes into a target node."""
    names: list[str] = Field(..., description="Names of the dragged nodes")
    target: str = Field(..., description="Name of the node they were dropped on")


class StarRequest(BaseModel):
    """Request to star or unstar a node."""
    name: str = Field(..., description="Node name")
    starred: bool = Field(True, description="New starred flag")


class EventRequest(BaseModel):
    """File event pushed by an editor."""
    kind: EventKind = Field(..., description="saved, created, deleted or renamed")
    path: str = Field(..., description="Path of the file (old path for renames)")
    new_path: str | None = Field(None, description="New path, renames only")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    nodes: int
    edges: int
    files: int
    watching: bool
    connections: int
    consistent: bool


# ============================================================================
# Global State
# ============================================================================

workspace: Workspace | None = None
connection_manager: ConnectionManager | None = None
_broadcasts: set[asyncio.Task] = set()


def _require_workspace() -> Workspace:
    if not workspace:
        raise HTTPException(status_code=500, detail="Workspace not initialized")
    return workspace


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global workspace, connection_manager

    # Startup
    logger.info("Starting Tag Tree HTTP Server...")

    config = TagTreeConfig.from_env()
    connection_manager = ConnectionManager()
    workspace = Workspace(config)

    loop = asyncio.get_running_loop()

    def on_graph_changed():
        """Push a change signal to connected WebSocket clients."""
        if not connection_manager or connection_manager.count() == 0:
            return
        task = loop.create_task(connection_manager.broadcast_all({"type": GRAPH_CHANGED}))
        _broadcasts.add(task)
        task.add_done_callback(_broadcasts.discard)

    unsubscribe = workspace.notifier.subscribe(on_graph_changed)
    await workspace.start()

    logger.info("Server ready")

    yield

    # Shutdown
    unsubscribe()
    if workspace:
        await workspace.shutdown()

    logger.info("Server stopped")


# Create FastAPI app
app = FastAPI(
    title="Tag Tree Server",
    description="Incremental tag/file graph for editor tree views and completion",
    version=__version__,
    lifespan=lifespan
)


# ============================================================================
# API Endpoints
# ============================================================================

@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    ws = _require_workspace()
    stats = ws.stats()
    return {
        "status": "ok",
        "version": __version__,
        "nodes": stats["nodes"],
        "edges": stats["edges"],
        "files": stats["files"],
        "watching": stats["watching"],
        "connections": connection_manager.count() if connection_manager else 0,
        "consistent": not ws.index.check_consistency(),
    }


@app.get("/api/tree/children")
async def get_children(node: str | None = None):
    """
    Tree children of a node, or the top-level nodes when no node is given.
    """
    ws = _require_workspace()

    try:
        return [child.to_dict() for child in ws.children(node)]
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/api/nodes")
async def get_nodes():
    """Snapshot of every node."""
    ws = _require_workspace()
    return [node.to_dict() for node in ws.index.get_nodes()]


@app.get("/api/tags")
async def get_tags():
    """Snapshot of every tag node."""
    ws = _require_workspace()
    return [node.to_dict() for node in ws.index.get_tags()]


@app.get("/api/complete")
async def complete(line: str, character: int | None = None):
    """
    Suggestions for the tag being typed.
    ``character`` is the cursor column and defaults to the end of the line.
    """
    ws = _require_workspace()
    if character is None:
        character = len(line)

    suggestions = ws.complete(line, character)
    return {"active": suggestions is not None, "items": suggestions or []}


@app.post("/api/tree/drop")
async def drop(request: DropRequest):
    """Merge dragged nodes into the target's inbound links."""
    ws = _require_workspace()

    try:
        linked = ws.drop(request.names, request.target)
        return {"target": request.target, "linked": linked}
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error dropping nodes: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/tree/star")
async def star(request: StarRequest):
    """Star or unstar a node."""
    ws = _require_workspace()

    try:
        node = ws.index.set_starred(request.name, request.starred)
        ws.notifier.fire()
        return node.to_dict()
    except NodeNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/api/events")
async def push_event(request: EventRequest):
    """
    Apply a file event reported by the editor.
    Returns once the event has been applied to the graph.
    """
    ws = _require_workspace()

    if request.kind is EventKind.RENAMED and not request.new_path:
        raise HTTPException(status_code=400, detail="new_path required for renamed events")

    try:
        await ws.submit(FileEvent(request.kind, request.path, request.new_path))
        await ws.drain()
        return {"applied": True, **ws.stats()}
    except TagTreeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error applying event: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/rescan")
async def rescan():
    """Rebuild the graph from a full scan of the workspace root."""
    ws = _require_workspace()

    try:
        scanned = await ws.rescan()
        return {"scanned": scanned, **ws.stats()}
    except Exception as e:
        logger.error(f"Error rescanning: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for graph change notifications.
    Clients receive {"type": "graph_changed"} and re-pull what they display.
    """
    if not connection_manager:
        await websocket.close(code=1011, reason="Server not initialized")
        return

    client_id = await connection_manager.connect(websocket)

    try:
        # Keep connection alive and receive messages (for heartbeat/ping)
        while True:
            data = await websocket.receive_text()
            await websocket.send_json({"type": "pong", "message": data})

    except WebSocketDisconnect:
        connection_manager.disconnect(client_id)
    except Exception as e:
        logger.error(f"WebSocket error for {client_id}: {e}")
        connection_manager.disconnect(client_id)
