"""HTTP surface over packing sessions."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from container_packer.config import load_settings
from container_packer.containers import CONTAINER_PRESETS_M, get_container
from container_packer.errors import NoSpaceError, PackingError, UnknownBoxError
from container_packer.io.schemas import (
    AddBoxSchema,
    ContainerChangeSchema,
    ContainerSchema,
    CreateSessionSchema,
    DragResultSchema,
    DragSchema,
    SessionSchema,
)
from container_packer.models import Container
from container_packer.session import PackingSession

logger = logging.getLogger(__name__)

settings = load_settings()

# FastAPI app instance (exactly one)
app = FastAPI(
    title="Container Packer API",
    description="Interactive 3D container packing sessions",
)

# One in-memory session per container view
SESSIONS: dict[str, PackingSession] = {}


@app.exception_handler(PackingError)
async def packing_error_handler(request: Request, exc: PackingError) -> JSONResponse:
    status_code = 409 if isinstance(exc, NoSpaceError) else 422
    return JSONResponse(status_code=status_code, content={"error": exc.reason, "detail": str(exc)})


@app.exception_handler(UnknownBoxError)
async def unknown_box_handler(request: Request, exc: UnknownBoxError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": exc.reason, "detail": f"Box {exc.args[0]} not found"})


def _resolve_container(preset: str | None, dims: Any) -> Container | None:
    if dims is not None:
        return Container(name="custom", dimensions=dims)
    if preset:
        return get_container(preset)
    return None


def _get_session(session_id: str) -> PackingSession:
    session = SESSIONS.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Session {session_id} not found")
    return session


def _snapshot(session_id: str, session: PackingSession) -> dict[str, Any]:
    return SessionSchema(
        session_id=session_id,
        container=session.container,
        boxes=list(session.boxes),
        selected_box_id=session.selected_box_id,
        utilization=session.utilization(),
        invalid_box_ids=session.invalid_box_ids(),
    ).model_dump()


@app.post("/sessions", status_code=201)
async def create_session(request: CreateSessionSchema) -> dict[str, Any]:
    """Open a packing session on a preset or explicit container."""
    container = _resolve_container(request.container_preset, request.container)
    session = PackingSession(container=container, settings=settings)
    session_id = str(uuid.uuid4())
    SESSIONS[session_id] = session
    logger.info(f"session {session_id} opened on {session.container.name}")
    return _snapshot(session_id, session)


@app.get("/sessions/{session_id}")
async def get_session(session_id: str) -> dict[str, Any]:
    return _snapshot(session_id, _get_session(session_id))


@app.delete("/sessions/{session_id}")
async def close_session(session_id: str) -> dict[str, Any]:
    """Drop a session and return its final snapshot."""
    snapshot = _snapshot(session_id, _get_session(session_id))
    del SESSIONS[session_id]
    logger.info(f"session {session_id} closed")
    return snapshot


@app.put("/sessions/{session_id}/container")
async def change_container(session_id: str, request: ContainerSchema) -> dict[str, Any]:
    """Switch container type; boxes that no longer fit are re-placed or flagged."""
    session = _get_session(session_id)
    container = _resolve_container(request.container_preset, request.container)
    if container is None:
        raise HTTPException(status_code=422, detail="container_preset or container is required")
    flagged = session.set_container(container)
    snapshot = _snapshot(session_id, session)
    return ContainerChangeSchema(**snapshot, flagged_invalid=flagged).model_dump()


@app.post("/sessions/{session_id}/boxes", status_code=201)
async def add_box(session_id: str, request: AddBoxSchema) -> dict[str, Any]:
    session = _get_session(session_id)
    box = session.add_box(request.width, request.length, request.height, request.is_fragile)
    return box.model_dump()


@app.delete("/sessions/{session_id}/boxes/{box_id}")
async def remove_box(session_id: str, box_id: str) -> dict[str, Any]:
    session = _get_session(session_id)
    session.remove_box(box_id)
    return _snapshot(session_id, session)


@app.post("/sessions/{session_id}/boxes/{box_id}/edit")
async def start_editing(session_id: str, box_id: str) -> dict[str, Any]:
    session = _get_session(session_id)
    return session.start_editing(box_id).model_dump()


@app.post("/sessions/{session_id}/finish-edit")
async def finish_editing(session_id: str) -> dict[str, Any]:
    session = _get_session(session_id)
    session.finish_editing()
    return _snapshot(session_id, session)


@app.post("/sessions/{session_id}/boxes/{box_id}/lock")
async def toggle_lock(session_id: str, box_id: str) -> dict[str, Any]:
    session = _get_session(session_id)
    return session.toggle_lock(box_id).model_dump()


@app.post("/sessions/{session_id}/arrange")
async def arrange(session_id: str) -> dict[str, Any]:
    session = _get_session(session_id)
    session.auto_arrange()
    return _snapshot(session_id, session)


@app.post("/sessions/{session_id}/drag")
async def drag(session_id: str, request: DragSchema) -> dict[str, Any]:
    """One pointer-move step; a rejected step is a normal response with committed=false."""
    session = _get_session(session_id)
    committed = session.update_dragged_box(request.box_id, request.ray)
    return DragResultSchema(committed=committed, box=session.get_box(request.box_id)).model_dump()


@app.get("/sessions/{session_id}/utilization")
async def get_utilization(session_id: str) -> dict[str, Any]:
    session = _get_session(session_id)
    return {"utilization": session.utilization()}


@app.get("/health")
async def health() -> dict[str, Any]:
    """Health check endpoint."""
    return {
        "ok": True,
        "sessions": len(SESSIONS),
        "containers": sorted(CONTAINER_PRESETS_M.keys()),
    }
