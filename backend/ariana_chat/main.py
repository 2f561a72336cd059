import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ariana_chat.api import chat
from ariana_chat.core.config import settings
from ariana_chat.core.database import init_db
from ariana_chat.services.persistence import ConversationPersistence
from ariana_chat.services.remote import get_conversation_client
from ariana_chat.services.session import SessionManager
from ariana_chat.services.storage import get_key_value_store


def create_session_manager() -> SessionManager:
    persistence = ConversationPersistence(get_key_value_store(), key=settings.storage_key)
    return SessionManager(get_conversation_client(), persistence)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Configure logging based on debug setting
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s" if settings.debug
        else "%(levelname)-8s %(name)s: %(message)s",
    )

    if settings.storage_backend == "sqlite":
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)
        init_db()
    elif settings.storage_backend == "file":
        settings.data_dir.mkdir(parents=True, exist_ok=True)

    # Tests may install their own manager before startup
    if getattr(app.state, "session_manager", None) is None:
        app.state.session_manager = create_session_manager()
    app.state.session_manager.initialize()

    yield


app = FastAPI(title=settings.app_name, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat.router, prefix="/api/chat", tags=["chat"])


@app.get("/api/health")
async def health():
    return {"status": "ok", "app": settings.app_name}
