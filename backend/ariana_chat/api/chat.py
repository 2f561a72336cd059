"""Presentation bridge: exposes the session manager over REST and a WebSocket state stream."""

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, ConfigDict, Field

from ariana_chat.models.message import ConversationView, format_timestamp
from ariana_chat.services.session import SessionManager

router = APIRouter()
logger = logging.getLogger(__name__)


class SendRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str = ""
    file_name: str | None = Field(default=None, alias="fileName")


class ComposeUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    draft: str | None = None
    file_name: str | None = Field(default=None, alias="fileName")
    detach: bool = False


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager


def view_payload(view: ConversationView) -> dict[str, Any]:
    payload = view.model_dump(mode="json", by_alias=True)
    for raw, message in zip(payload["messages"], view.messages):
        raw["time"] = format_timestamp(message.timestamp)
    return payload


@router.get("/state")
async def get_state(manager: SessionManager = Depends(get_session_manager)):
    return view_payload(manager.view())


@router.post("/messages")
async def send_message(body: SendRequest, manager: SessionManager = Depends(get_session_manager)):
    if manager.is_loading:
        raise HTTPException(status_code=409, detail="A reply is still pending")
    await manager.send(body.content, body.file_name)
    return view_payload(manager.view())


@router.put("/compose")
async def update_compose(body: ComposeUpdate, manager: SessionManager = Depends(get_session_manager)):
    if body.draft is not None:
        manager.set_draft(body.draft)
    if body.detach:
        manager.detach_file()
    elif body.file_name:
        manager.attach_file(body.file_name)
    return view_payload(manager.view())


@router.delete("/")
async def clear_conversation(manager: SessionManager = Depends(get_session_manager)):
    manager.clear()
    logger.debug("Conversation cleared")
    return view_payload(manager.view())


@router.websocket("/ws")
async def chat_websocket(websocket: WebSocket):
    await websocket.accept()
    manager: SessionManager = websocket.app.state.session_manager
    views: asyncio.Queue[ConversationView] = asyncio.Queue()
    unsubscribe = manager.subscribe(views.put_nowait)
    forwarder = asyncio.create_task(_forward_views(websocket, views))
    views.put_nowait(manager.view())

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                data = json.loads(raw)
            except json.JSONDecodeError:
                data = None
            if not isinstance(data, dict):
                # Anything that is not a frame object is message text as typed
                data = {"type": "send", "content": raw}

            kind = data.get("type", "send")
            if kind == "send":
                if manager.is_loading:
                    await websocket.send_json({"type": "error", "detail": "A reply is still pending"})
                    continue
                content = data.get("content", "")
                file_name = data.get("fileName")
                if not isinstance(content, str) or (file_name is not None and not isinstance(file_name, str)):
                    await websocket.send_json(
                        {"type": "error", "detail": "content and fileName must be strings"}
                    )
                    continue
                await manager.send(content, file_name)
            elif kind == "clear":
                manager.clear()
            else:
                await websocket.send_json({"type": "error", "detail": f"Unknown frame type: {kind}"})

    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()
        forwarder.cancel()
        try:
            await forwarder
        except asyncio.CancelledError:
            pass


async def _forward_views(websocket: WebSocket, views: asyncio.Queue[ConversationView]) -> None:
    while True:
        view = await views.get()
        await websocket.send_json({"type": "state", "state": view_payload(view)})
